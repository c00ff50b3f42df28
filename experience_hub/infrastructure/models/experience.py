"""SQLAlchemy model for experience records."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship

from experience_hub.infrastructure.database import Base

from ._ids import generate_id


class ExperienceModel(Base):
    """Database representation of an experience awaiting or holding verification."""

    __tablename__ = "experience"

    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="PENDING")
    verification_note = Column(Text, nullable=True)
    verified_at = Column(DateTime, nullable=True)
    verified_by = Column(String(36), nullable=True)
    organization_id = Column(
        String(36), ForeignKey("organization.id"), nullable=False, index=True
    )
    student_id = Column(String(36), ForeignKey("student.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())

    organization = relationship("OrganizationModel", lazy="joined")
    student = relationship("StudentModel", lazy="joined")


__all__ = ["ExperienceModel"]
