"""Endpoints exposing the stored notifications of the authenticated user."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from experience_hub.domain.entities import Notification, User
from experience_hub.infrastructure.database import get_db
from experience_hub.infrastructure.realtime import broadcaster, user_room
from experience_hub.infrastructure.repositories import NotificationRepository
from experience_hub.interfaces.api.dependencies import get_current_active_user
from experience_hub.interfaces.api.schemas import (
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    NotificationSummary,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])

COUNT_UPDATE_EVENT = "notification:count:update"


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or "",
        user_id=notification.user_id,
        title=notification.title,
        message=notification.message,
        type=notification.type,
        category=notification.category,
        action_url=notification.action_url,
        metadata=notification.metadata or {},
        is_read=notification.is_read,
        created_at=notification.created_at,
        read_at=notification.read_at,
    )


def _push_unread_count(repository: NotificationRepository, user_id: str) -> None:
    unread = repository.count_for_user(user_id, unread_only=True)
    broadcaster.dispatch(user_room(user_id), COUNT_UPDATE_EVENT, {"unreadCount": unread})


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    limit: int = Query(50, ge=1, le=200),
    unread_only: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    notifications = NotificationRepository(db).list_for_user(
        current_user.id, unread_only=unread_only, limit=limit
    )
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/summary", response_model=NotificationSummary)
def notification_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationSummary:
    repository = NotificationRepository(db)
    return NotificationSummary(
        total=repository.count_for_user(current_user.id),
        unread=repository.count_for_user(current_user.id, unread_only=True),
        recent=[
            _notification_to_schema(notification)
            for notification in repository.list_for_user(current_user.id, limit=5)
        ],
    )


@router.post("/read", response_model=NotificationMarkReadResponse)
def mark_notifications_read(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationMarkReadResponse:
    """Mark the given notifications of the authenticated user as read."""

    repository = NotificationRepository(db)
    updated = repository.mark_as_read(payload.unique_ids(), user_id=current_user.id)
    if updated:
        _push_unread_count(repository, current_user.id)
    return NotificationMarkReadResponse(updated_count=updated)


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def mark_notification_read(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    repository = NotificationRepository(db)
    notification = repository.get(notification_id)
    if notification is None or notification.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )

    if repository.mark_as_read([notification_id], user_id=current_user.id):
        _push_unread_count(repository, current_user.id)
        notification = repository.get(notification_id)
    return _notification_to_schema(notification)
