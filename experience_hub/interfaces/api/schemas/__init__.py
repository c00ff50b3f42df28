from .experience import ExperienceVerificationRead, ExperienceVerificationRequest
from .notification import (
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    NotificationSummary,
)
from .realtime import DisconnectRequest, DisconnectResult, OnlineMembers, RealtimeStats

__all__ = [
    "DisconnectRequest",
    "DisconnectResult",
    "ExperienceVerificationRead",
    "ExperienceVerificationRequest",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "NotificationSummary",
    "OnlineMembers",
    "RealtimeStats",
]
