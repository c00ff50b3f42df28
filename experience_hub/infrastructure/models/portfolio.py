"""SQLAlchemy models for portfolios and their view tracking."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from experience_hub.infrastructure.database import Base
from experience_hub.utils import now_in_app_naive_datetime

from ._ids import generate_id


class PortfolioModel(Base):
    """Database representation of a student's public portfolio."""

    __tablename__ = "portfolio"

    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String(255), nullable=False)
    student_id = Column(String(36), ForeignKey("student.id"), nullable=False, index=True)
    view_count = Column(Integer, nullable=False, default=0)

    student = relationship("StudentModel", lazy="joined")


class PortfolioViewModel(Base):
    """Append-only record of a single portfolio view."""

    __tablename__ = "portfolio_view"

    id = Column(String(36), primary_key=True, default=generate_id)
    portfolio_id = Column(String(36), nullable=False, index=True)
    viewer_user_id = Column(String(36), nullable=True, index=True)
    viewed_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)
    referrer = Column(Text, nullable=True)


__all__ = ["PortfolioModel", "PortfolioViewModel"]
