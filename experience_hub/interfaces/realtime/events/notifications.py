"""Notification read-state and unread counters."""

from __future__ import annotations

from typing import Any

from ..router import (
    REQUEST_ERRORS,
    EventContext,
    EventRouter,
    HandlerResult,
    payload_str,
)

router = EventRouter()

MAX_IDS_PER_REQUEST = 100


@router.on(
    "notification:read",
    errors=REQUEST_ERRORS,
    error_message="Failed to mark notifications as read",
)
async def mark_read(context: EventContext, data: Any) -> HandlerResult:
    identity = context.identity
    if identity is None:
        return HandlerResult.unauthorized()

    raw_ids = data.get("notificationIds") if isinstance(data, dict) else None
    if not isinstance(raw_ids, list) or not raw_ids:
        return HandlerResult.invalid("At least one notification ID is required")
    if len(raw_ids) > MAX_IDS_PER_REQUEST:
        return HandlerResult.invalid(
            f"Maximum {MAX_IDS_PER_REQUEST} notifications can be marked at once"
        )
    ids = [str(value) for value in raw_ids if isinstance(value, (str, int)) and str(value)]

    updated = await context.bridge.mark_notifications_read(identity.user_id, ids)
    await context.reply(
        "notification:read:success", {"notificationIds": ids, "updatedCount": updated}
    )
    return HandlerResult.ok()


@router.on(
    "mark-notification-read",
    errors=REQUEST_ERRORS,
    error_message="Failed to mark notification as read",
)
async def mark_single_read(context: EventContext, data: Any) -> HandlerResult:
    identity = context.identity
    if identity is None:
        return HandlerResult.unauthorized()
    notification_id = payload_str(data, "notificationId")
    if notification_id is None:
        return HandlerResult.invalid("Notification ID is required")

    await context.bridge.mark_notifications_read(identity.user_id, [notification_id])
    await context.reply("notification-read", {"notificationId": notification_id})
    return HandlerResult.ok()


@router.on(
    "notification:count",
    errors=REQUEST_ERRORS,
    error_message="Failed to get notification count",
)
async def unread_count(context: EventContext, data: Any) -> HandlerResult:
    identity = context.identity
    if identity is None:
        return HandlerResult.unauthorized()

    count = await context.bridge.count_unread(identity.user_id)
    await context.reply("notification:count:update", {"unreadCount": count})
    return HandlerResult.ok()
