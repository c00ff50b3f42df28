"""Portfolio view tracking and edit presence."""

from __future__ import annotations

from typing import Any

from experience_hub.infrastructure.realtime import portfolio_edit_room
from experience_hub.infrastructure.repositories import PortfolioRepository
from experience_hub.utils import now_in_app_timezone

from ..router import EventContext, EventRouter, HandlerResult, payload_str

router = EventRouter()


@router.on("portfolio:view")
async def view(context: EventContext, data: Any) -> HandlerResult:
    """Record the view, then tell the owner if they can be resolved.

    Works without an identity: anonymous viewers are stored with no user id.
    """

    portfolio_id = payload_str(data, "portfolioId")
    if portfolio_id is None:
        return HandlerResult.invalid("Portfolio id is required")

    identity = context.identity
    await context.bridge.record_portfolio_view(
        portfolio_id,
        identity.user_id if identity else None,
        {
            "ip_address": context.client.host,
            "user_agent": context.client.user_agent,
            "referrer": payload_str(data, "referrer"),
        },
    )

    portfolio = await context.run(lambda session: PortfolioRepository(session).get(portfolio_id))
    if portfolio is None or not portfolio.owner_user_id:
        return HandlerResult.not_found("Portfolio not found")

    viewer_info: dict[str, Any]
    if identity is None:
        viewer_info = {"anonymous": True}
    else:
        viewer_info = {"name": identity.display_name, "role": identity.role.value}

    await context.broadcaster.send_to_user(
        portfolio.owner_user_id,
        "portfolio:view:new",
        {
            "portfolioId": portfolio.id,
            "viewerInfo": viewer_info,
            "timestamp": now_in_app_timezone(),
        },
    )
    return HandlerResult.ok()


@router.on("portfolio:edit:start")
async def edit_start(context: EventContext, data: Any) -> HandlerResult:
    portfolio_id = payload_str(data, "portfolioId")
    if portfolio_id is None:
        return HandlerResult.invalid("Portfolio id is required")

    room = portfolio_edit_room(portfolio_id)
    context.rooms.join(context.connection_id, room)
    identity = context.identity
    await context.broadcaster.send_to_room(
        room,
        "portfolio:edit:user:joined",
        {
            "userId": identity.user_id if identity else None,
            "userName": identity.display_name if identity else None,
        },
        exclude=[context.connection_id],
    )
    return HandlerResult.ok()


@router.on("portfolio:edit:stop")
async def edit_stop(context: EventContext, data: Any) -> HandlerResult:
    portfolio_id = payload_str(data, "portfolioId")
    if portfolio_id is None:
        return HandlerResult.invalid("Portfolio id is required")

    room = portfolio_edit_room(portfolio_id)
    context.rooms.leave(context.connection_id, room)
    identity = context.identity
    await context.broadcaster.send_to_room(
        room,
        "portfolio:edit:user:left",
        {"userId": identity.user_id if identity else None},
        exclude=[context.connection_id],
    )
    return HandlerResult.ok()
