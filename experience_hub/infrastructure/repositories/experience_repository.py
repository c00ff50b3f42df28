"""Persistence helpers for experience records."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from experience_hub.domain.entities import Experience, VerificationStatus
from experience_hub.infrastructure.models import ExperienceModel, StudentModel
from experience_hub.utils import ensure_app_naive_datetime, ensure_app_timezone


class ExperienceRepository:
    """Read and update :class:`Experience` verification state."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, experience_id: str) -> Experience | None:
        model = self.session.get(ExperienceModel, experience_id)
        return self._to_entity(model) if model else None

    def create(
        self,
        *,
        title: str,
        organization_id: str,
        student_id: str,
        status: VerificationStatus = VerificationStatus.PENDING,
        experience_id: str | None = None,
    ) -> Experience:
        model = ExperienceModel(
            title=title,
            status=status.value,
            organization_id=organization_id,
            student_id=student_id,
        )
        if experience_id:
            model.id = experience_id
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update_verification(
        self,
        experience_id: str,
        *,
        status: VerificationStatus,
        verified_by: str | None,
        verified_at: datetime | None,
        note: str | None = None,
    ) -> Experience:
        model = self.session.get(ExperienceModel, experience_id)
        if model is None:
            msg = f"Experience with id {experience_id} not found"
            raise ValueError(msg)
        model.status = status.value
        model.verified_by = verified_by
        model.verified_at = ensure_app_naive_datetime(verified_at)
        if note is not None:
            model.verification_note = note
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _to_entity(self, model: ExperienceModel) -> Experience:
        student: StudentModel | None = model.student
        return Experience(
            id=model.id,
            title=model.title,
            status=VerificationStatus(model.status),
            organization_id=model.organization_id,
            student_id=model.student_id,
            organization_name=model.organization.name if model.organization else None,
            student_name=student.full_name if student else None,
            student_user_id=student.user_id if student else None,
            verified_at=ensure_app_timezone(model.verified_at),
            verified_by=model.verified_by,
            verification_note=model.verification_note,
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["ExperienceRepository"]
