"""Domain entities exposed by the application."""

from .experience import Experience
from .identity import Identity
from .notification import Notification
from .portfolio import Portfolio, PortfolioView
from .role import NotificationType, Role, VerificationStatus
from .user import OrganizationProfile, StudentProfile, User

__all__ = [
    "Experience",
    "Identity",
    "Notification",
    "NotificationType",
    "OrganizationProfile",
    "Portfolio",
    "PortfolioView",
    "Role",
    "StudentProfile",
    "User",
    "VerificationStatus",
]
