"""Account roles and verification statuses shared across the domain."""

from enum import Enum


class Role(str, Enum):
    """Closed set of roles an account can hold."""

    ORGANIZATION = "ORGANIZATION"
    STUDENT = "STUDENT"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: object) -> "Role | None":
        """Return the matching role for ``value`` ignoring case, or ``None``."""

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class VerificationStatus(str, Enum):
    """Lifecycle states of an experience verification."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    DRAFT = "DRAFT"


class NotificationType(str, Enum):
    """Category tag attached to persisted notifications."""

    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    VERIFICATION = "VERIFICATION"
    MESSAGE = "MESSAGE"


__all__ = ["NotificationType", "Role", "VerificationStatus"]
