"""Presence events: status changes and typing indicators."""

from __future__ import annotations

from typing import Any

from experience_hub.infrastructure.realtime import is_reserved_room
from experience_hub.utils import now_in_app_timezone

from ..router import EventContext, EventRouter, HandlerResult, payload_str

router = EventRouter()


@router.on("user:status:update")
async def update_status(context: EventContext, data: Any) -> HandlerResult:
    identity = context.identity
    if identity is None:
        return HandlerResult.unauthorized()
    status = payload_str(data, "status")
    if status is None:
        return HandlerResult.invalid("Status is required")

    await context.broadcaster.send_to_user(
        identity.user_id,
        "user:status:changed",
        {"userId": identity.user_id, "status": status, "timestamp": now_in_app_timezone()},
    )
    return HandlerResult.ok()


async def _relay_typing(
    context: EventContext, room: str | None, event: str, payload: dict[str, Any]
) -> HandlerResult:
    # Chat rooms are client-named; identity-scoped names are off limits.
    if room is None or is_reserved_room(room):
        return HandlerResult.invalid("Invalid chat room")

    context.rooms.join(context.connection_id, room)
    await context.broadcaster.send_to_room(
        room, event, payload, exclude=[context.connection_id]
    )
    return HandlerResult.ok()


def _sender_id(context: EventContext) -> str | None:
    return context.identity.user_id if context.identity else None


@router.on("user:typing:start")
async def typing_start(context: EventContext, data: Any) -> HandlerResult:
    return await _relay_typing(
        context,
        payload_str(data, "chatId"),
        "user:typing:indicator",
        {"userId": _sender_id(context), "isTyping": True},
    )


@router.on("user:typing:stop")
async def typing_stop(context: EventContext, data: Any) -> HandlerResult:
    return await _relay_typing(
        context,
        payload_str(data, "chatId"),
        "user:typing:indicator",
        {"userId": _sender_id(context), "isTyping": False},
    )


@router.on("typing-start")
async def legacy_typing_start(context: EventContext, data: Any) -> HandlerResult:
    return await _relay_typing(
        context,
        payload_str(data, "roomId"),
        "user-typing",
        {"userId": _sender_id(context), "typing": True},
    )


@router.on("typing-stop")
async def legacy_typing_stop(context: EventContext, data: Any) -> HandlerResult:
    return await _relay_typing(
        context,
        payload_str(data, "roomId"),
        "user-typing",
        {"userId": _sender_id(context), "typing": False},
    )
