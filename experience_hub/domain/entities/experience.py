"""Domain entity representing a verifiable experience record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .role import VerificationStatus


@dataclass
class Experience:
    """Internship, project or similar record issued by an organization."""

    id: str
    title: str
    status: VerificationStatus
    organization_id: str
    student_id: str
    organization_name: str | None = None
    student_name: str | None = None
    student_user_id: str | None = None
    verified_at: datetime | None = None
    verified_by: str | None = None
    verification_note: str | None = None
    updated_at: datetime | None = None


__all__ = ["Experience"]
