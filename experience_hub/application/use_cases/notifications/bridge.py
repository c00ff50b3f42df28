"""Durable writes backing the realtime notification fan-out."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from sqlalchemy.orm import Session

from experience_hub.domain.entities import Notification, NotificationType, PortfolioView
from experience_hub.infrastructure.database import run_in_session_async
from experience_hub.infrastructure.realtime import Broadcaster, broadcaster
from experience_hub.infrastructure.repositories import (
    NotificationRepository,
    PortfolioRepository,
)
from experience_hub.utils import isoformat_or_none, now_in_app_timezone

logger = logging.getLogger(__name__)

NOTIFICATION_NEW_EVENT = "notification:new"


class NotificationBridge:
    """Persist notification state so it survives disconnects.

    The bridge never broadcasts on its own except through
    :meth:`send_notification`; callers push records live with the
    :class:`Broadcaster` after they are stored.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] | None = None,
        publisher: Broadcaster | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._publisher = publisher or broadcaster

    async def create_notification(
        self,
        recipient_user_id: str,
        title: str,
        message: str,
        *,
        type: NotificationType | str = NotificationType.INFO,
        category: str | None = None,
        action_url: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> Notification:
        notification = Notification(
            id=None,
            user_id=recipient_user_id,
            title=title,
            message=message,
            type=NotificationType(type),
            category=category,
            action_url=action_url,
            metadata=dict(metadata or {}),
            created_at=now_in_app_timezone(),
        )
        saved = await self._run(lambda session: NotificationRepository(session).create(notification))
        logger.info(
            "Notification %s created for user %s (%s)",
            saved.id,
            saved.user_id,
            saved.type.value,
        )
        return saved

    async def send_notification(
        self,
        recipient_user_id: str,
        title: str,
        message: str,
        **options: Any,
    ) -> Notification:
        """Store a notification and push ``notification:new`` to its recipient."""

        saved = await self.create_notification(recipient_user_id, title, message, **options)
        await self._publisher.send_to_user(
            saved.user_id,
            NOTIFICATION_NEW_EVENT,
            {"notification": serialize_notification(saved), "timestamp": now_in_app_timezone()},
        )
        return saved

    async def record_portfolio_view(
        self,
        portfolio_id: str,
        viewer_user_id: str | None,
        client_metadata: Mapping[str, Any] | None = None,
    ) -> PortfolioView | None:
        """Append a view record; failures are logged and never propagate."""

        metadata = dict(client_metadata or {})
        view = PortfolioView(
            id=None,
            portfolio_id=portfolio_id,
            viewer_user_id=viewer_user_id,
            viewed_at=now_in_app_timezone(),
            ip_address=metadata.get("ip_address"),
            user_agent=metadata.get("user_agent"),
            referrer=metadata.get("referrer"),
        )

        def _record(session: Session) -> PortfolioView:
            repository = PortfolioRepository(session)
            saved = repository.record_view(view)
            repository.increment_view_count(portfolio_id)
            return saved

        try:
            return await self._run(_record)
        except Exception:
            logger.exception("Error tracking portfolio view for %s", portfolio_id)
            return None

    async def mark_notifications_read(
        self, recipient_user_id: str, notification_ids: Iterable[str]
    ) -> int:
        ids = [str(notification_id) for notification_id in notification_ids if notification_id]
        updated = await self._run(
            lambda session: NotificationRepository(session).mark_as_read(
                ids, user_id=recipient_user_id
            )
        )
        logger.info(
            "Notifications marked as read for user %s: %d of %d",
            recipient_user_id,
            updated,
            len(ids),
        )
        return updated

    async def count_unread(self, recipient_user_id: str) -> int:
        return await self._run(
            lambda session: NotificationRepository(session).count_for_user(
                recipient_user_id, unread_only=True
            )
        )

    async def _run(self, work: Callable[[Session], Any]) -> Any:
        return await run_in_session_async(work, self._session_factory)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "userId": notification.user_id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.type.value,
        "category": notification.category,
        "actionUrl": notification.action_url,
        "metadata": notification.metadata or {},
        "isRead": notification.is_read,
        "createdAt": isoformat_or_none(notification.created_at),
        "readAt": isoformat_or_none(notification.read_at),
    }


notification_bridge = NotificationBridge()


__all__ = [
    "NOTIFICATION_NEW_EVENT",
    "NotificationBridge",
    "notification_bridge",
    "serialize_notification",
]
