"""Authenticated principal attached to a realtime connection."""

from __future__ import annotations

from dataclasses import dataclass

from .role import Role
from .user import User


@dataclass(frozen=True)
class Identity:
    """Immutable snapshot of the user behind a socket connection.

    Identities are resolved once at handshake time and cached for the lifetime
    of the connection only; they are never persisted.
    """

    user_id: str
    role: Role
    organization_id: str | None = None
    organization_name: str | None = None
    student_id: str | None = None
    student_name: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        organization = user.organization if user.role == Role.ORGANIZATION else None
        student = user.student if user.role == Role.STUDENT else None
        return cls(
            user_id=str(user.id),
            role=user.role,
            organization_id=organization.id if organization else None,
            organization_name=organization.name if organization else None,
            student_id=student.id if student else None,
            student_name=student.full_name if student else None,
        )

    @property
    def is_organization(self) -> bool:
        return self.role == Role.ORGANIZATION and self.organization_id is not None

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT and self.student_id is not None

    @property
    def display_name(self) -> str | None:
        """Name shown to other users: student name or organization name."""

        if self.role == Role.STUDENT:
            return self.student_name
        return self.organization_name


__all__ = ["Identity"]
