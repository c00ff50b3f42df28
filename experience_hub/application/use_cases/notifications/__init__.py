"""Public helpers for emitting domain notifications."""

from .bridge import (
    NOTIFICATION_NEW_EVENT,
    NotificationBridge,
    notification_bridge,
    serialize_notification,
)
from .events import (
    VERIFICATION_UPDATE_EVENT,
    VERIFIED_EVENT,
    notify_experience_verification,
    verification_update_payload,
    verified_payload,
)

__all__ = [
    "NOTIFICATION_NEW_EVENT",
    "NotificationBridge",
    "VERIFICATION_UPDATE_EVENT",
    "VERIFIED_EVENT",
    "notification_bridge",
    "notify_experience_verification",
    "serialize_notification",
    "verification_update_payload",
    "verified_payload",
]
