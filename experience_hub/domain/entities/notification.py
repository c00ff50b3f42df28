"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .role import NotificationType


@dataclass
class Notification:
    """Information message delivered to a specific user.

    ``user_id`` is the recipient and never changes once the row exists.
    """

    id: str | None
    user_id: str
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    category: str | None = None
    action_url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    created_at: datetime | None = None
    read_at: datetime | None = None


__all__ = ["Notification"]
