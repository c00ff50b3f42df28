"""Realtime socket surface: event router and connection sessions."""

from .registry import build_event_router, event_router
from .router import (
    ClientInfo,
    EventContext,
    EventRouter,
    HandlerResult,
    Outcome,
    RealtimeServices,
)
from .session import serve_connection

__all__ = [
    "ClientInfo",
    "EventContext",
    "EventRouter",
    "HandlerResult",
    "Outcome",
    "RealtimeServices",
    "build_event_router",
    "event_router",
    "serve_connection",
]
