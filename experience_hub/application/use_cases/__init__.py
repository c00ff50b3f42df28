"""Aggregate application use cases."""

from .experiences import verify_experience
from .notifications import notification_bridge, notify_experience_verification

__all__ = [
    "notification_bridge",
    "notify_experience_verification",
    "verify_experience",
]
