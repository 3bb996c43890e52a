"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class NotificationType(str, Enum):
    """Kinds of events a user can be notified about."""

    DOCUMENT_UPLOADED = "document_uploaded"
    ANNOUNCEMENT_POSTED = "announcement_posted"
    TICKET_CREATED = "ticket_created"
    TICKET_COMMENTED = "ticket_commented"
    TICKET_STATUS_UPDATED = "ticket_status_updated"
    RESTAURANT_JOINED = "restaurant_joined"


class NotificationCategory(str, Enum):
    """Buckets the client shows unread badges for."""

    DOCUMENTS = "documents"
    ANNOUNCEMENTS = "announcements"
    TICKETS = "tickets"


CATEGORY_BY_TYPE: Mapping[NotificationType, NotificationCategory] = MappingProxyType(
    {
        NotificationType.DOCUMENT_UPLOADED: NotificationCategory.DOCUMENTS,
        NotificationType.ANNOUNCEMENT_POSTED: NotificationCategory.ANNOUNCEMENTS,
        NotificationType.RESTAURANT_JOINED: NotificationCategory.ANNOUNCEMENTS,
        NotificationType.TICKET_CREATED: NotificationCategory.TICKETS,
        NotificationType.TICKET_COMMENTED: NotificationCategory.TICKETS,
        NotificationType.TICKET_STATUS_UPDATED: NotificationCategory.TICKETS,
    }
)

TYPES_BY_CATEGORY: Mapping[NotificationCategory, tuple[NotificationType, ...]] = (
    MappingProxyType(
        {
            category: tuple(
                notification_type
                for notification_type, mapped in CATEGORY_BY_TYPE.items()
                if mapped is category
            )
            for category in NotificationCategory
        }
    )
)

# Client route opened when a push notification of a category is tapped.
CATEGORY_URLS: Mapping[NotificationCategory, str] = MappingProxyType(
    {
        NotificationCategory.DOCUMENTS: "/documents",
        NotificationCategory.ANNOUNCEMENTS: "/announcements",
        NotificationCategory.TICKETS: "/tickets",
    }
)


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    user_id: int
    tenant_id: int
    type: NotificationType
    target_id: str
    message: str
    is_read: bool = False
    created_at: datetime | None = None

    @property
    def category(self) -> NotificationCategory:
        return CATEGORY_BY_TYPE[self.type]


@dataclass(frozen=True)
class UnreadCounts:
    """Unread notifications per category for a single user."""

    documents: int = 0
    announcements: int = 0
    tickets: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            NotificationCategory.DOCUMENTS.value: self.documents,
            NotificationCategory.ANNOUNCEMENTS.value: self.announcements,
            NotificationCategory.TICKETS.value: self.tickets,
        }


__all__ = [
    "CATEGORY_BY_TYPE",
    "CATEGORY_URLS",
    "Notification",
    "NotificationCategory",
    "NotificationType",
    "TYPES_BY_CATEGORY",
    "UnreadCounts",
]
