"""Dispatch inbound socket events to identity-scoped handlers."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from sqlalchemy.orm import Session

from experience_hub.application.use_cases.notifications import (
    NotificationBridge,
    notification_bridge,
)
from experience_hub.domain.entities import Identity
from experience_hub.infrastructure.database import run_in_session_async
from experience_hub.infrastructure.realtime import (
    Broadcaster,
    ConnectionAuthenticator,
    ConnectionManager,
    RoomMembershipManager,
    broadcaster,
    connection_authenticator,
    connection_manager,
    membership_manager,
)

logger = logging.getLogger(__name__)

ERROR_EVENT = "error"

T = TypeVar("T")


class Outcome(str, Enum):
    OK = "ok"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    INVALID = "invalid"
    PERSISTENCE_ERROR = "persistence_error"


@dataclass(frozen=True)
class HandlerResult:
    """Tagged outcome returned by every event handler."""

    outcome: Outcome
    message: str | None = None

    @property
    def is_ok(self) -> bool:
        return self.outcome == Outcome.OK

    @classmethod
    def ok(cls) -> "HandlerResult":
        return cls(Outcome.OK)

    @classmethod
    def unauthorized(cls, message: str = "Not allowed") -> "HandlerResult":
        return cls(Outcome.UNAUTHORIZED, message)

    @classmethod
    def not_found(cls, message: str = "Not found") -> "HandlerResult":
        return cls(Outcome.NOT_FOUND, message)

    @classmethod
    def invalid(cls, message: str = "Invalid payload") -> "HandlerResult":
        return cls(Outcome.INVALID, message)

    @classmethod
    def persistence_error(cls, message: str) -> "HandlerResult":
        return cls(Outcome.PERSISTENCE_ERROR, message)


# Outcomes reported back to the sender for request/response style events.
REQUEST_ERRORS = frozenset({Outcome.INVALID, Outcome.PERSISTENCE_ERROR})


@dataclass(frozen=True)
class ClientInfo:
    host: str | None = None
    user_agent: str | None = None


@dataclass
class RealtimeServices:
    """Collaborators shared by every connection of a process."""

    manager: ConnectionManager = field(default_factory=lambda: connection_manager)
    authenticator: ConnectionAuthenticator = field(
        default_factory=lambda: connection_authenticator
    )
    membership: RoomMembershipManager = field(default_factory=lambda: membership_manager)
    broadcaster: Broadcaster = field(default_factory=lambda: broadcaster)
    bridge: NotificationBridge = field(default_factory=lambda: notification_bridge)
    session_factory: Callable[[], Session] | None = None


@dataclass(frozen=True)
class EventContext:
    """Everything a handler may know about the emitting connection."""

    connection_id: str
    identity: Identity | None
    services: RealtimeServices
    client: ClientInfo = ClientInfo()

    @property
    def broadcaster(self) -> Broadcaster:
        return self.services.broadcaster

    @property
    def bridge(self) -> NotificationBridge:
        return self.services.bridge

    @property
    def rooms(self) -> ConnectionManager:
        return self.services.manager

    async def reply(self, event: str, payload: Any) -> bool:
        """Send ``event`` to the emitting connection only."""

        return await self.broadcaster.send_to_connection(self.connection_id, event, payload)

    async def run(self, work: Callable[[Session], T]) -> T:
        """Run blocking ORM ``work`` without stalling other connections."""

        return await run_in_session_async(work, self.services.session_factory)


Handler = Callable[[EventContext, Any], Awaitable["HandlerResult | None"]]


@dataclass(frozen=True)
class _Route:
    handler: Handler
    errors: frozenset[Outcome]
    error_message: str


class EventRouter:
    """Registry mapping event names to handlers.

    Handler exceptions never escape :meth:`dispatch`: they are logged and
    turned into ``persistence_error`` results. Whether a failed result is
    reported with an ``error`` event is decided per event at registration.
    """

    def __init__(self) -> None:
        self._routes: dict[str, _Route] = {}

    def on(
        self,
        *events: str,
        errors: Iterable[Outcome] = (),
        error_message: str = "Request failed",
    ) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            for event in events:
                if event in self._routes:
                    raise ValueError(f"Handler already registered for '{event}'")
                self._routes[event] = _Route(handler, frozenset(errors), error_message)
            return handler

        return decorator

    def include_router(self, other: "EventRouter") -> None:
        for event, route in other._routes.items():
            if event in self._routes:
                raise ValueError(f"Handler already registered for '{event}'")
            self._routes[event] = route

    @property
    def events(self) -> frozenset[str]:
        return frozenset(self._routes)

    async def dispatch(self, context: EventContext, event: str, data: Any) -> HandlerResult:
        route = self._routes.get(event)
        if route is None:
            logger.debug("Ignoring unknown event %r from %s", event, context.connection_id)
            return HandlerResult.not_found(f"Unknown event '{event}'")

        try:
            result = await route.handler(context, data) or HandlerResult.ok()
        except Exception:
            logger.exception(
                "Error handling %s event from connection %s", event, context.connection_id
            )
            result = HandlerResult.persistence_error(route.error_message)

        if not result.is_ok:
            logger.debug("Event %s finished with %s", event, result.outcome.value)
            if result.outcome in route.errors:
                await context.reply(
                    ERROR_EVENT,
                    {"message": result.message or route.error_message, "event": event},
                )
        return result


def payload_str(data: Any, key: str) -> str | None:
    """Return a non-empty string field from a socket payload."""

    if not isinstance(data, dict):
        return None
    value = data.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


__all__ = [
    "ClientInfo",
    "ERROR_EVENT",
    "EventContext",
    "EventRouter",
    "HandlerResult",
    "Outcome",
    "REQUEST_ERRORS",
    "RealtimeServices",
    "payload_str",
]
