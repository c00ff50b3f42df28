"""Lifecycle of one websocket connection: handshake, event loop, teardown."""

from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from experience_hub.infrastructure.realtime import extract_token

from .registry import event_router
from .router import ClientInfo, EventContext, EventRouter, RealtimeServices

logger = logging.getLogger(__name__)

ONLINE_STATUS_EVENT = "user:status:online"


async def serve_connection(
    websocket: WebSocket,
    *,
    services: RealtimeServices | None = None,
    router: EventRouter | None = None,
) -> None:
    """Serve ``websocket`` until the peer disconnects or is evicted.

    The handshake is always accepted; a missing or invalid credential only
    means the connection stays anonymous.
    """

    services = services or RealtimeServices()
    router = router or event_router

    connection_id = await services.manager.connect(websocket)
    token = extract_token(websocket.query_params, websocket.headers)
    identity = await services.authenticator.authenticate(connection_id, token)
    services.membership.attach(connection_id, identity)

    context = EventContext(
        connection_id=connection_id,
        identity=identity,
        services=services,
        client=ClientInfo(
            host=websocket.client.host if websocket.client else None,
            user_agent=websocket.headers.get("user-agent"),
        ),
    )
    logger.info(
        "WebSocket %s connected (user=%s)",
        connection_id,
        identity.user_id if identity else None,
    )

    try:
        await services.broadcaster.send_to_connection(
            connection_id,
            "connection:ready",
            {"connectionId": connection_id, "authenticated": identity is not None},
        )
        if identity is not None:
            await services.broadcaster.send_to_user(
                identity.user_id, ONLINE_STATUS_EVENT, {"isOnline": True}
            )

        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except Exception:
                if (
                    not services.manager.is_connected(connection_id)
                    or websocket.application_state != WebSocketState.CONNECTED
                ):
                    break
                continue

            if not isinstance(message, dict):
                continue

            event = message.get("type")
            if event == "ping":
                await websocket.send_json({"type": "pong"})
                continue
            if not isinstance(event, str):
                continue

            await router.dispatch(context, event, message.get("data"))
    except WebSocketDisconnect:
        pass
    finally:
        services.membership.detach(connection_id)
        services.authenticator.forget(connection_id)
        if identity is not None:
            await services.broadcaster.send_to_user(
                identity.user_id, ONLINE_STATUS_EVENT, {"isOnline": False}
            )
        logger.info("WebSocket %s disconnected", connection_id)


__all__ = ["ONLINE_STATUS_EVENT", "serve_connection"]
