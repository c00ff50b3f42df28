"""Repository implementations for infrastructure layer."""

from .experience_repository import ExperienceRepository
from .notification_repository import NotificationRepository
from .portfolio_repository import PortfolioRepository
from .user_repository import UserRepository

__all__ = [
    "ExperienceRepository",
    "NotificationRepository",
    "PortfolioRepository",
    "UserRepository",
]
