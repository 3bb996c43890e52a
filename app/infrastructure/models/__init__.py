"""ORM models used by the application infrastructure."""

from .user import UserModel
from .notification import NotificationModel
from .push_subscription import PushSubscriptionModel
from .view import ViewModel

__all__ = [
    "NotificationModel",
    "PushSubscriptionModel",
    "UserModel",
    "ViewModel",
]
