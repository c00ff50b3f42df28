"""Persistence layer for user data."""

from __future__ import annotations

from sqlalchemy.orm import Session

from experience_hub.domain.entities import (
    OrganizationProfile,
    Role,
    StudentProfile,
    User,
)
from experience_hub.infrastructure.models import (
    OrganizationModel,
    StudentModel,
    UserModel,
)
from experience_hub.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class UserRepository:
    """Provide lookups for user entities and their profiles."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def create(
        self,
        *,
        email: str,
        role: Role,
        organization_name: str | None = None,
        student_name: str | None = None,
        is_active: bool = True,
    ) -> User:
        """Insert a user together with the profile its role requires."""

        model = UserModel(email=email, role=role.value, is_active=is_active)
        if role == Role.ORGANIZATION:
            model.organization = OrganizationModel(name=organization_name or email)
        elif role == Role.STUDENT:
            model.student = StudentModel(full_name=student_name or email)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def touch_last_login(self, user_id: str) -> None:
        model = self.session.get(UserModel, user_id)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        model.last_login = ensure_app_naive_datetime(now_in_app_timezone())
        self.session.add(model)
        self.session.commit()

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        organization = (
            OrganizationProfile(id=model.organization.id, name=model.organization.name)
            if model.organization
            else None
        )
        student = (
            StudentProfile(id=model.student.id, full_name=model.student.full_name)
            if model.student
            else None
        )
        return User(
            id=model.id,
            email=model.email,
            role=Role(model.role),
            is_active=bool(model.is_active),
            last_login=ensure_app_timezone(model.last_login),
            created_at=ensure_app_timezone(model.created_at),
            organization=organization,
            student=student,
        )


__all__ = ["UserRepository"]
