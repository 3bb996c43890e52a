"""Repository implementations for infrastructure layer."""

from .user_repository import UserRepository
from .notification_repository import NotificationRepository
from .push_subscription_repository import PushSubscriptionRepository
from .view_repository import ViewRepository

__all__ = [
    "NotificationRepository",
    "PushSubscriptionRepository",
    "UserRepository",
    "ViewRepository",
]
