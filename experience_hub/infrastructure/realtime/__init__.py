"""Realtime connection, room and fan-out helpers for the infrastructure layer."""

from .authenticator import (
    ConnectionAuthenticator,
    connection_authenticator,
    extract_token,
)
from .broadcaster import Broadcaster, broadcaster, build_message, serialize_payload
from .manager import ConnectionManager, MessageSink, connection_manager
from .membership import (
    RoomMembershipManager,
    is_reserved_room,
    membership_manager,
    organization_room,
    portfolio_edit_room,
    role_room,
    rooms_for,
    student_room,
    user_room,
)

__all__ = [
    "Broadcaster",
    "ConnectionAuthenticator",
    "ConnectionManager",
    "MessageSink",
    "RoomMembershipManager",
    "broadcaster",
    "build_message",
    "connection_authenticator",
    "connection_manager",
    "extract_token",
    "is_reserved_room",
    "membership_manager",
    "organization_room",
    "portfolio_edit_room",
    "role_room",
    "rooms_for",
    "serialize_payload",
    "student_room",
    "user_room",
]
