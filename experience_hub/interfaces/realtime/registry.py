"""Assemble the process-wide event router from the handler modules."""

from .events import experiences, notifications, organizations, portfolios, rooms, users
from .router import EventRouter


def build_event_router() -> EventRouter:
    """Return a router with every supported socket event registered."""

    router = EventRouter()
    router.include_router(rooms.router)
    router.include_router(users.router)
    router.include_router(experiences.router)
    router.include_router(notifications.router)
    router.include_router(portfolios.router)
    router.include_router(organizations.router)
    return router


event_router = build_event_router()


__all__ = ["build_event_router", "event_router"]
