"""Domain entities exposed by the application."""

from .audience import AUDIENCE_ROLES, Audience
from .identity import Identity, tenant_room
from .notification import (
    CATEGORY_BY_TYPE,
    CATEGORY_URLS,
    TYPES_BY_CATEGORY,
    Notification,
    NotificationCategory,
    NotificationType,
    UnreadCounts,
)
from .page import Page
from .push_subscription import PushDeliveryReport, PushMessage, PushSubscription
from .role import Role
from .user import User
from .view import VIEW_READ_TYPES, View, ViewerEntry, ViewTargetType

__all__ = [
    "AUDIENCE_ROLES",
    "Audience",
    "CATEGORY_BY_TYPE",
    "CATEGORY_URLS",
    "Identity",
    "Notification",
    "NotificationCategory",
    "NotificationType",
    "Page",
    "PushDeliveryReport",
    "PushMessage",
    "PushSubscription",
    "Role",
    "TYPES_BY_CATEGORY",
    "UnreadCounts",
    "User",
    "VIEW_READ_TYPES",
    "View",
    "ViewerEntry",
    "ViewTargetType",
    "tenant_room",
]
