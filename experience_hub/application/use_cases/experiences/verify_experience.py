"""Use case for recording an organization's verification decision."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from experience_hub.domain.entities import Experience, VerificationStatus
from experience_hub.infrastructure.repositories import ExperienceRepository
from experience_hub.utils import now_in_app_timezone


class ExperienceNotFoundError(LookupError):
    """Raised when the experience to verify does not exist."""


class VerificationPermissionError(PermissionError):
    """Raised when the caller does not own the experience."""


@dataclass(frozen=True)
class VerificationOutcome:
    """Persisted verification plus what fan-out needs to address recipients."""

    experience: Experience
    status: VerificationStatus
    verified_by: str

    @property
    def student_user_id(self) -> str | None:
        return self.experience.student_user_id


def parse_status(value: object) -> VerificationStatus:
    """Return the verification status named by ``value`` or raise ``ValueError``."""

    if isinstance(value, VerificationStatus):
        return value
    if not isinstance(value, str):
        raise ValueError("Verification status is required")
    try:
        return VerificationStatus(value.strip().upper())
    except ValueError as exc:
        raise ValueError(f"Unknown verification status '{value}'") from exc


def verify_experience(
    session: Session,
    *,
    experience_id: str,
    status: VerificationStatus | str,
    verifier_user_id: str,
    verifier_organization_id: str | None,
    is_admin: bool = False,
    note: str | None = None,
) -> VerificationOutcome:
    """Update the verification status of ``experience_id``.

    Only the organization that issued the experience, or an administrator, may
    verify it. Nothing is written when either check fails.
    """

    new_status = parse_status(status)
    repository = ExperienceRepository(session)
    experience = repository.get(experience_id) if experience_id else None
    if experience is None:
        raise ExperienceNotFoundError(f"Experience {experience_id!r} not found")

    owns_experience = (
        verifier_organization_id is not None
        and experience.organization_id == verifier_organization_id
    )
    if not (owns_experience or is_admin):
        raise VerificationPermissionError("Permission denied")

    approved = new_status == VerificationStatus.APPROVED
    updated = repository.update_verification(
        experience.id,
        status=new_status,
        verified_by=verifier_user_id if approved else None,
        verified_at=now_in_app_timezone() if approved else None,
        note=note,
    )
    return VerificationOutcome(
        experience=updated, status=new_status, verified_by=verifier_user_id
    )


__all__ = [
    "ExperienceNotFoundError",
    "VerificationOutcome",
    "VerificationPermissionError",
    "parse_status",
    "verify_experience",
]
