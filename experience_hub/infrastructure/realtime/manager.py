"""Connection and room bookkeeping for realtime websockets."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Dict, Iterable, Protocol, Set
from uuid import uuid4

logger = logging.getLogger(__name__)


class MessageSink(Protocol):
    """Subset of :class:`fastapi.WebSocket` used to deliver messages."""

    async def send_json(self, data: Any) -> None: ...

    async def close(self, code: int = 1000, reason: str | None = None) -> None: ...


class ConnectionManager:
    """Track live connections and the named rooms they belong to.

    Rooms only exist while at least one connection is a member. Every mutation
    happens on the event loop thread, so no locking is involved.
    """

    def __init__(self) -> None:
        self._connections: Dict[str, MessageSink] = {}
        self._rooms: DefaultDict[str, Set[str]] = defaultdict(set)
        self._memberships: DefaultDict[str, Set[str]] = defaultdict(set)

    async def connect(self, websocket: Any) -> str:
        """Accept ``websocket`` and register it under a fresh connection id."""

        await websocket.accept()
        return self.register(websocket)

    def register(self, sink: MessageSink, connection_id: str | None = None) -> str:
        connection_id = connection_id or uuid4().hex
        self._connections[connection_id] = sink
        return connection_id

    def unregister(self, connection_id: str) -> Set[str]:
        """Forget ``connection_id`` and remove it from every room it joined."""

        self._connections.pop(connection_id, None)
        rooms = self._memberships.pop(connection_id, set())
        for room in rooms:
            self._discard_member(room, connection_id)
        return rooms

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self._connections

    def join(self, connection_id: str, room: str) -> bool:
        """Add ``connection_id`` to ``room``; return ``False`` if unknown."""

        if connection_id not in self._connections:
            return False
        self._rooms[room].add(connection_id)
        self._memberships[connection_id].add(room)
        return True

    def leave(self, connection_id: str, room: str) -> bool:
        rooms = self._memberships.get(connection_id)
        if not rooms or room not in rooms:
            return False
        rooms.discard(room)
        if not rooms:
            self._memberships.pop(connection_id, None)
        self._discard_member(room, connection_id)
        return True

    def members(self, room: str) -> Set[str]:
        return set(self._rooms.get(room, set()))

    def rooms_of(self, connection_id: str) -> frozenset[str]:
        return frozenset(self._memberships.get(connection_id, set()))

    def connection_ids(self) -> Set[str]:
        return set(self._connections)

    def connection_count(self) -> int:
        return len(self._connections)

    async def send_to_connection(self, connection_id: str, message: dict[str, Any]) -> bool:
        """Deliver ``message`` to a single connection."""

        connection = self._connections.get(connection_id)
        if connection is None:
            return False
        try:
            await connection.send_json(message)
        except Exception:
            logger.warning("Dropping unreachable connection %s", connection_id, exc_info=True)
            self.unregister(connection_id)
            return False
        return True

    async def emit(
        self,
        room: str,
        message: dict[str, Any],
        *,
        exclude: Iterable[str] = (),
    ) -> int:
        """Send ``message`` to every member of ``room`` not in ``exclude``."""

        return await self._deliver(self.members(room), message, exclude)

    async def broadcast(
        self, message: dict[str, Any], *, exclude: Iterable[str] = ()
    ) -> int:
        """Send ``message`` to every open connection."""

        return await self._deliver(self.connection_ids(), message, exclude)

    async def close_room(self, room: str, *, code: int = 1000, reason: str | None = None) -> int:
        """Close every connection in ``room`` and drop it from the registry."""

        closed = 0
        for connection_id in self.members(room):
            connection = self._connections.get(connection_id)
            self.unregister(connection_id)
            if connection is None:
                continue
            try:
                await connection.close(code=code, reason=reason)
            except Exception:
                logger.debug("Connection %s was already closed", connection_id, exc_info=True)
            closed += 1
        return closed

    async def _deliver(
        self, targets: Iterable[str], message: dict[str, Any], exclude: Iterable[str]
    ) -> int:
        skipped = set(exclude)
        delivered = 0
        for connection_id in sorted(targets):
            if connection_id in skipped:
                continue
            if await self.send_to_connection(connection_id, message):
                delivered += 1
        return delivered

    def _discard_member(self, room: str, connection_id: str) -> None:
        members = self._rooms.get(room)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            self._rooms.pop(room, None)


connection_manager = ConnectionManager()


__all__ = ["ConnectionManager", "MessageSink", "connection_manager"]
