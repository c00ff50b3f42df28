"""Experience verification use cases."""

from .verify_experience import (
    ExperienceNotFoundError,
    VerificationOutcome,
    VerificationPermissionError,
    parse_status,
    verify_experience,
)

__all__ = [
    "ExperienceNotFoundError",
    "VerificationOutcome",
    "VerificationPermissionError",
    "parse_status",
    "verify_experience",
]
