"""Directed-send primitives shared by socket handlers and REST routes."""

from __future__ import annotations

import asyncio
import copy
import logging
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable

from anyio import from_thread

from experience_hub.domain.entities import Role

from .authenticator import ConnectionAuthenticator, connection_authenticator
from .manager import ConnectionManager, connection_manager
from .membership import organization_room, role_room, student_room, user_room

logger = logging.getLogger(__name__)


class Broadcaster:
    """Best-effort fan-out to whatever connections currently hold a room.

    Nothing is queued for offline recipients and nothing is persisted here;
    callers store durable state first and then push it live.
    """

    def __init__(
        self,
        manager: ConnectionManager,
        authenticator: ConnectionAuthenticator,
    ) -> None:
        self._manager = manager
        self._authenticator = authenticator
        self._tasks: set[asyncio.Task] = set()

    async def send_to_user(self, user_id: str, event: str, payload: Any) -> int:
        return await self.send_to_room(user_room(user_id), event, payload)

    async def send_to_organization(self, organization_id: str, event: str, payload: Any) -> int:
        return await self.send_to_room(organization_room(organization_id), event, payload)

    async def send_to_student(self, student_id: str, event: str, payload: Any) -> int:
        return await self.send_to_room(student_room(student_id), event, payload)

    async def send_to_role(self, role: Role | str, event: str, payload: Any) -> int:
        return await self.send_to_room(role_room(role), event, payload)

    async def send_to_all(self, event: str, payload: Any) -> int:
        return await self._manager.broadcast(build_message(event, payload))

    async def send_to_room(
        self,
        room: str,
        event: str,
        payload: Any,
        *,
        exclude: Iterable[str] = (),
    ) -> int:
        delivered = await self._manager.emit(room, build_message(event, payload), exclude=exclude)
        logger.debug("Event %s reached %d connection(s) in %s", event, delivered, room)
        return delivered

    async def send_to_connection(self, connection_id: str, event: str, payload: Any) -> bool:
        return await self._manager.send_to_connection(
            connection_id, build_message(event, payload)
        )

    def dispatch(self, room: str, event: str, payload: Any) -> None:
        """Schedule a room emit from code that may run outside the event loop."""

        message_payload = copy.deepcopy(payload)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            from_thread.run(self.send_to_room, room, event, message_payload)
        else:
            task = loop.create_task(self.send_to_room(room, event, message_payload))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    def connected_count(self) -> int:
        return self._manager.connection_count()

    def online_organization_members(self, organization_id: str) -> list[str]:
        """Return the distinct user ids connected to the organization room."""

        user_ids: list[str] = []
        for connection_id in sorted(self._manager.members(organization_room(organization_id))):
            identity = self._authenticator.identity_for(connection_id)
            if identity is not None and identity.user_id not in user_ids:
                user_ids.append(identity.user_id)
        return user_ids

    async def disconnect_user(self, user_id: str, reason: str | None = None) -> int:
        """Force every connection of ``user_id`` to close."""

        room = user_room(user_id)
        for connection_id in self._manager.members(room):
            self._authenticator.forget(connection_id)
        closed = await self._manager.close_room(room, code=1008, reason=reason)
        logger.info("User %s forcefully disconnected (%d connection(s)): %s", user_id, closed, reason)
        return closed


def build_message(event: str, payload: Any) -> dict[str, Any]:
    """Return the wire envelope for ``event``."""

    return {"type": event, "data": serialize_payload(payload)}


def serialize_payload(payload: Any) -> Any:
    """Return a JSON-serializable deep copy of ``payload``."""

    if is_dataclass(payload) and not isinstance(payload, type):
        payload = asdict(payload)
    data = copy.deepcopy(payload)
    if isinstance(data, (dict, list)):
        _normalize_values(data)
        return data
    return _normalize_scalar(data)


def _normalize_values(data: dict[str, Any] | list[Any]) -> None:
    """Convert datetimes and enums nested inside ``data`` in place."""

    items = data.items() if isinstance(data, dict) else enumerate(data)
    for key, value in list(items):
        if is_dataclass(value) and not isinstance(value, type):
            value = asdict(value)
            data[key] = value
        if isinstance(value, (dict, list)):
            _normalize_values(value)
        else:
            data[key] = _normalize_scalar(value)


def _normalize_scalar(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


broadcaster = Broadcaster(connection_manager, connection_authenticator)


__all__ = ["Broadcaster", "broadcaster", "build_message", "serialize_payload"]
