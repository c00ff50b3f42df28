"""Room naming rules and identity-scoped room membership."""

from __future__ import annotations

import logging
from typing import Set

from experience_hub.domain.entities import Identity, Role

from .manager import ConnectionManager, connection_manager

logger = logging.getLogger(__name__)

RESERVED_ROOM_PREFIXES = ("user:", "organization:", "student:", "role:", "portfolio:")


def user_room(user_id: str) -> str:
    return f"user:{user_id}"


def organization_room(organization_id: str) -> str:
    return f"organization:{organization_id}"


def student_room(student_id: str) -> str:
    return f"student:{student_id}"


def role_room(role: Role | str) -> str:
    value = role.value if isinstance(role, Role) else str(role)
    return f"role:{value.lower()}"


def portfolio_edit_room(portfolio_id: str) -> str:
    return f"portfolio:{portfolio_id}:editing"


def is_reserved_room(name: str) -> bool:
    """Return ``True`` when ``name`` collides with an identity-scoped room."""

    lowered = name.lower()
    return any(lowered.startswith(prefix) for prefix in RESERVED_ROOM_PREFIXES)


def rooms_for(identity: Identity | None) -> list[str]:
    """Return the rooms a connection holding ``identity`` belongs to."""

    if identity is None:
        return []
    rooms = [user_room(identity.user_id)]
    if identity.is_organization:
        rooms.append(organization_room(identity.organization_id))
    elif identity.is_student:
        rooms.append(student_room(identity.student_id))
    rooms.append(role_room(identity.role))
    return rooms


class RoomMembershipManager:
    """Join and leave the identity-scoped rooms of a connection."""

    def __init__(self, manager: ConnectionManager) -> None:
        self._manager = manager

    def attach(self, connection_id: str, identity: Identity | None) -> list[str]:
        """Join every room ``identity`` entitles the connection to."""

        joined = [room for room in rooms_for(identity) if self._manager.join(connection_id, room)]
        if joined:
            logger.info("Connection %s joined rooms %s", connection_id, joined)
        return joined

    def detach(self, connection_id: str) -> Set[str]:
        """Remove the connection from every room, including ad-hoc ones."""

        rooms = self._manager.unregister(connection_id)
        logger.debug("Connection %s left rooms %s", connection_id, sorted(rooms))
        return rooms


membership_manager = RoomMembershipManager(connection_manager)


__all__ = [
    "RESERVED_ROOM_PREFIXES",
    "RoomMembershipManager",
    "is_reserved_room",
    "membership_manager",
    "organization_room",
    "portfolio_edit_room",
    "role_room",
    "rooms_for",
    "student_room",
    "user_room",
]
