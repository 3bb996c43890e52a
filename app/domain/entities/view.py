"""Domain entity recording that a user looked at an item."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .notification import NotificationType
from .user import User


class ViewTargetType(str, Enum):
    """Kinds of items whose views are tracked."""

    DOCUMENT = "document"
    ANNOUNCEMENT = "announcement"
    TICKET = "ticket"


# Notification types that become read once the matching item is viewed.
VIEW_READ_TYPES: Mapping[ViewTargetType, tuple[NotificationType, ...]] = MappingProxyType(
    {
        ViewTargetType.DOCUMENT: (NotificationType.DOCUMENT_UPLOADED,),
        ViewTargetType.ANNOUNCEMENT: (
            NotificationType.ANNOUNCEMENT_POSTED,
            NotificationType.RESTAURANT_JOINED,
        ),
        ViewTargetType.TICKET: (
            NotificationType.TICKET_CREATED,
            NotificationType.TICKET_COMMENTED,
            NotificationType.TICKET_STATUS_UPDATED,
        ),
    }
)


@dataclass
class View:
    """A standing "user has seen this item" fact."""

    id: int | None
    user_id: int
    target_type: ViewTargetType
    target_id: str
    viewed_at: datetime | None = None


@dataclass
class ViewerEntry:
    """A view together with the directory entry of whoever viewed."""

    view: View
    user: User | None


__all__ = ["VIEW_READ_TYPES", "View", "ViewTargetType", "ViewerEntry"]
