"""Pydantic models for experience verification requests."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from experience_hub.domain.entities import VerificationStatus


class ExperienceVerificationRequest(BaseModel):
    status: VerificationStatus
    note: str | None = Field(default=None, max_length=2000)


class ExperienceVerificationRead(BaseModel):
    id: str
    title: str
    status: VerificationStatus
    organization_id: str
    student_id: str
    verified_at: datetime | None = None
    verified_by: str | None = None
    verification_note: str | None = None


__all__ = ["ExperienceVerificationRead", "ExperienceVerificationRequest"]
