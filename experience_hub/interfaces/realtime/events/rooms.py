"""Explicit room join/leave requests."""

from __future__ import annotations

from typing import Any

from experience_hub.domain.entities import Role
from experience_hub.infrastructure.realtime import role_room, user_room

from ..router import EventContext, EventRouter, HandlerResult, Outcome, payload_str

router = EventRouter()

_INVALID_ROOM_DATA = "Invalid room data"


def _requested(data: Any) -> tuple[str | None, Role | None]:
    role = Role.parse(data.get("role")) if isinstance(data, dict) else None
    return payload_str(data, "userId"), role


@router.on(
    "join-room",
    errors=(Outcome.INVALID, Outcome.UNAUTHORIZED, Outcome.PERSISTENCE_ERROR),
    error_message="Failed to join room",
)
async def join_room(context: EventContext, data: Any) -> HandlerResult:
    """Re-join the caller's own rooms; payloads naming anyone else are refused."""

    user_id, role = _requested(data)
    if not user_id or role is None:
        return HandlerResult.invalid(_INVALID_ROOM_DATA)

    identity = context.identity
    if identity is None or identity.user_id != user_id or identity.role != role:
        return HandlerResult.unauthorized(_INVALID_ROOM_DATA)

    context.services.membership.attach(context.connection_id, identity)
    await context.reply("room-joined", {"userId": user_id, "role": role.value})
    return HandlerResult.ok()


@router.on("leave-room")
async def leave_room(context: EventContext, data: Any) -> HandlerResult:
    user_id, role = _requested(data)
    if not user_id or role is None:
        return HandlerResult.invalid(_INVALID_ROOM_DATA)

    identity = context.identity
    if identity is None or identity.user_id != user_id or identity.role != role:
        return HandlerResult.unauthorized(_INVALID_ROOM_DATA)

    context.rooms.leave(context.connection_id, user_room(user_id))
    context.rooms.leave(context.connection_id, role_room(role))
    return HandlerResult.ok()
