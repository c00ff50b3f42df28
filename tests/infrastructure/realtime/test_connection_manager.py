"""Tests for connection and room bookkeeping."""

import pytest

from experience_hub.infrastructure.realtime import ConnectionManager

from conftest import FakeSocket

pytestmark = pytest.mark.anyio


def test_join_requires_a_registered_connection() -> None:
    manager = ConnectionManager()

    assert manager.join("ghost", "chat-1") is False
    assert manager.members("chat-1") == set()


def test_unregister_drops_memberships_and_empty_rooms() -> None:
    manager = ConnectionManager()
    first = manager.register(FakeSocket())
    second = manager.register(FakeSocket())
    manager.join(first, "chat-1")
    manager.join(first, "chat-2")
    manager.join(second, "chat-1")

    assert manager.unregister(first) == {"chat-1", "chat-2"}
    assert manager.members("chat-1") == {second}
    assert manager.members("chat-2") == set()
    assert manager.rooms_of(first) == frozenset()
    assert not manager.is_connected(first)


def test_leave_only_affects_the_given_room() -> None:
    manager = ConnectionManager()
    connection_id = manager.register(FakeSocket())
    manager.join(connection_id, "chat-1")
    manager.join(connection_id, "chat-2")

    assert manager.leave(connection_id, "chat-1") is True
    assert manager.leave(connection_id, "chat-1") is False
    assert manager.rooms_of(connection_id) == frozenset({"chat-2"})


async def test_emit_skips_excluded_connections() -> None:
    manager = ConnectionManager()
    sender, receiver = FakeSocket(), FakeSocket()
    sender_id = manager.register(sender)
    receiver_id = manager.register(receiver)
    manager.join(sender_id, "chat-1")
    manager.join(receiver_id, "chat-1")

    delivered = await manager.emit("chat-1", {"type": "hello"}, exclude=[sender_id])

    assert delivered == 1
    assert receiver.messages == [{"type": "hello"}]
    assert sender.messages == []


async def test_emit_to_unknown_room_is_a_no_op() -> None:
    manager = ConnectionManager()
    manager.register(FakeSocket())

    assert await manager.emit("nobody-here", {"type": "hello"}) == 0


async def test_unreachable_connections_are_dropped() -> None:
    manager = ConnectionManager()
    healthy, broken = FakeSocket(), FakeSocket(broken=True)
    healthy_id = manager.register(healthy)
    broken_id = manager.register(broken)
    manager.join(healthy_id, "chat-1")
    manager.join(broken_id, "chat-1")

    delivered = await manager.broadcast({"type": "hello"})

    assert delivered == 1
    assert not manager.is_connected(broken_id)
    assert manager.members("chat-1") == {healthy_id}


async def test_close_room_closes_and_forgets_members() -> None:
    manager = ConnectionManager()
    socket = FakeSocket()
    connection_id = manager.register(socket)
    manager.join(connection_id, "user:42")

    closed = await manager.close_room("user:42", code=1008, reason="bye")

    assert closed == 1
    assert socket.closed_with == (1008, "bye")
    assert manager.connection_count() == 0
