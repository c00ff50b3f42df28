"""Persistence helpers for portfolios and append-only view records."""

from __future__ import annotations

from sqlalchemy.orm import Session

from experience_hub.domain.entities import Portfolio, PortfolioView
from experience_hub.infrastructure.models import PortfolioModel, PortfolioViewModel
from experience_hub.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class PortfolioRepository:
    """Look up portfolios and track how often they are viewed."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, portfolio_id: str) -> Portfolio | None:
        model = self.session.get(PortfolioModel, portfolio_id)
        return self._to_entity(model) if model else None

    def create(
        self, *, title: str, student_id: str, portfolio_id: str | None = None
    ) -> Portfolio:
        model = PortfolioModel(title=title, student_id=student_id)
        if portfolio_id:
            model.id = portfolio_id
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def increment_view_count(self, portfolio_id: str) -> None:
        self.session.query(PortfolioModel).filter(
            PortfolioModel.id == portfolio_id
        ).update(
            {PortfolioModel.view_count: PortfolioModel.view_count + 1},
            synchronize_session=False,
        )
        self.session.commit()

    def record_view(self, view: PortfolioView) -> PortfolioView:
        """Insert ``view``; existing rows are never touched."""

        model = PortfolioViewModel(
            portfolio_id=view.portfolio_id,
            viewer_user_id=view.viewer_user_id,
            viewed_at=ensure_app_naive_datetime(view.viewed_at or now_in_app_timezone()),
            ip_address=view.ip_address,
            user_agent=view.user_agent,
            referrer=view.referrer,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._view_to_entity(model)

    def list_views(self, portfolio_id: str) -> list[PortfolioView]:
        query = (
            self.session.query(PortfolioViewModel)
            .filter(PortfolioViewModel.portfolio_id == portfolio_id)
            .order_by(PortfolioViewModel.viewed_at.asc())
        )
        return [self._view_to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: PortfolioModel) -> Portfolio:
        return Portfolio(
            id=model.id,
            title=model.title,
            student_id=model.student_id,
            owner_user_id=model.student.user_id if model.student else None,
            view_count=model.view_count or 0,
        )

    @staticmethod
    def _view_to_entity(model: PortfolioViewModel) -> PortfolioView:
        return PortfolioView(
            id=model.id,
            portfolio_id=model.portfolio_id,
            viewer_user_id=model.viewer_user_id,
            viewed_at=ensure_app_timezone(model.viewed_at),
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            referrer=model.referrer,
        )


__all__ = ["PortfolioRepository"]
