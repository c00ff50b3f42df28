"""Domain entities for public portfolios and their view tracking."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Portfolio:
    """Public portfolio owned by a student."""

    id: str
    title: str
    student_id: str
    owner_user_id: str | None = None
    view_count: int = 0


@dataclass(frozen=True)
class PortfolioView:
    """One append-only viewing event for a portfolio."""

    id: str | None
    portfolio_id: str
    viewer_user_id: str | None
    viewed_at: datetime | None
    ip_address: str | None = None
    user_agent: str | None = None
    referrer: str | None = None


__all__ = ["Portfolio", "PortfolioView"]
