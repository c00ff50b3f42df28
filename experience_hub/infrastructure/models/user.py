"""SQLAlchemy models for accounts and their role-specific profiles."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, func
from sqlalchemy.orm import relationship

from experience_hub.infrastructure.database import Base

from ._ids import generate_id


class UserModel(Base):
    """Database representation of the system user."""

    __tablename__ = "user"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(String(20), nullable=False, default="STUDENT")
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    organization = relationship(
        "OrganizationModel", back_populates="user", uselist=False, lazy="joined"
    )
    student = relationship(
        "StudentModel", back_populates="user", uselist=False, lazy="joined"
    )


class OrganizationModel(Base):
    """Organization profile owned by an ``ORGANIZATION`` account."""

    __tablename__ = "organization"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    user_id = Column(
        String(36), ForeignKey("user.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    user = relationship("UserModel", back_populates="organization")


class StudentModel(Base):
    """Student profile owned by a ``STUDENT`` account."""

    __tablename__ = "student"

    id = Column(String(36), primary_key=True, default=generate_id)
    full_name = Column(String(255), nullable=False)
    user_id = Column(
        String(36), ForeignKey("user.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    user = relationship("UserModel", back_populates="student")


__all__ = ["OrganizationModel", "StudentModel", "UserModel"]
