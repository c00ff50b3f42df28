"""Domain entities representing accounts and their role-specific profiles."""

from dataclasses import dataclass
from datetime import datetime

from .role import Role


@dataclass
class OrganizationProfile:
    """Organization attached to an ``ORGANIZATION`` account."""

    id: str
    name: str


@dataclass
class StudentProfile:
    """Student attached to a ``STUDENT`` account."""

    id: str
    full_name: str


@dataclass
class User:
    """Core attributes describing an application user."""

    id: str | None
    email: str
    role: Role
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime | None = None
    organization: OrganizationProfile | None = None
    student: StudentProfile | None = None

    def has_role(self, role: Role) -> bool:
        """Return ``True`` when the user holds ``role``."""

        return self.role == role

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.has_role(Role.ADMIN)


__all__ = ["OrganizationProfile", "StudentProfile", "User"]
