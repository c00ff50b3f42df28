"""Websocket entry point and administration of live connections."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, WebSocket

from experience_hub.domain.entities import User
from experience_hub.infrastructure.realtime import broadcaster
from experience_hub.interfaces.api.dependencies import require_admin, require_organization_access
from experience_hub.interfaces.api.schemas import (
    DisconnectRequest,
    DisconnectResult,
    OnlineMembers,
    RealtimeStats,
)
from experience_hub.interfaces.realtime import serve_connection

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def realtime_websocket(websocket: WebSocket) -> None:
    """Bidirectional event channel. Authenticate with ``?token=`` or a bearer header."""

    await serve_connection(websocket)


@router.get("/realtime/stats", response_model=RealtimeStats)
def realtime_stats(_: User = Depends(require_admin)) -> RealtimeStats:
    return RealtimeStats(connected=broadcaster.connected_count())


@router.get(
    "/realtime/organizations/{organization_id}/online-members",
    response_model=OnlineMembers,
)
def online_members(
    organization_id: str,
    _: User = Depends(require_organization_access),
) -> OnlineMembers:
    """List the users of an organization that currently hold a live connection."""

    return OnlineMembers(
        organization_id=organization_id,
        user_ids=broadcaster.online_organization_members(organization_id),
    )


@router.post("/realtime/users/{user_id}/disconnect", response_model=DisconnectResult)
async def disconnect_user(
    user_id: str,
    payload: DisconnectRequest | None = None,
    current_user: User = Depends(require_admin),
) -> DisconnectResult:
    reason = (payload.reason if payload else None) or "Disconnected by administrator"
    closed = await broadcaster.disconnect_user(user_id, reason)
    logger.info("Admin %s disconnected user %s", current_user.id, user_id)
    return DisconnectResult(user_id=user_id, closed=closed)
