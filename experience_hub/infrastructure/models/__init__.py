"""ORM models used by the application infrastructure."""

from .experience import ExperienceModel
from .notification import NotificationModel
from .portfolio import PortfolioModel, PortfolioViewModel
from .user import OrganizationModel, StudentModel, UserModel

__all__ = [
    "ExperienceModel",
    "NotificationModel",
    "OrganizationModel",
    "PortfolioModel",
    "PortfolioViewModel",
    "StudentModel",
    "UserModel",
]
