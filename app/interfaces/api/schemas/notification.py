"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationType,
    View,
    ViewerEntry,
    ViewTargetType,
)


class CamelModel(BaseModel):
    """Base model exchanging camelCase keys with the web client."""

    model_config = ConfigDict(populate_by_name=True)


class NotificationRead(CamelModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: int = Field(..., alias="userId")
    tenant_id: int = Field(..., alias="tenantId")
    type: NotificationType
    target_id: str = Field(..., alias="targetId")
    message: str
    is_read: bool = Field(..., alias="isRead")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        return cls(
            id=notification.id or 0,
            user_id=notification.user_id,
            tenant_id=notification.tenant_id,
            type=notification.type,
            target_id=notification.target_id,
            message=notification.message,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )


class NotificationPage(CamelModel):
    notifications: list[NotificationRead]
    total: int
    total_pages: int = Field(..., alias="totalPages")


class UnreadCountsRead(BaseModel):
    documents: int
    announcements: int
    tickets: int


class ViewCreate(CamelModel):
    """Payload sent when the client opens an item."""

    target_type: ViewTargetType = Field(..., alias="targetType")
    target_id: Union[int, str] = Field(..., alias="targetId")


class ViewRead(CamelModel):
    id: int
    user_id: int = Field(..., alias="userId")
    target_type: ViewTargetType = Field(..., alias="targetType")
    target_id: str = Field(..., alias="targetId")
    viewed_at: datetime | None = Field(default=None, alias="viewedAt")

    @classmethod
    def from_entity(cls, view: View) -> "ViewRead":
        return cls(
            id=view.id or 0,
            user_id=view.user_id,
            target_type=view.target_type,
            target_id=view.target_id,
            viewed_at=view.viewed_at,
        )


class ViewerRead(CamelModel):
    """A view enriched with the viewer's public profile."""

    id: int
    user_id: int = Field(..., alias="userId")
    name: str | None = None
    email: str | None = None
    role: str | None = None
    viewed_at: datetime | None = Field(default=None, alias="viewedAt")

    @classmethod
    def from_entry(cls, entry: ViewerEntry) -> "ViewerRead":
        user = entry.user
        return cls(
            id=entry.view.id or 0,
            user_id=entry.view.user_id,
            name=user.name if user else None,
            email=user.email if user else None,
            role=user.role.value if user and user.role else None,
            viewed_at=entry.view.viewed_at,
        )


class ViewerPage(CamelModel):
    views: list[ViewerRead]
    total: int
    total_pages: int = Field(..., alias="totalPages")


class MarkAllReadRequest(CamelModel):
    notification_type: NotificationType = Field(..., alias="notificationType")


class MarkCategoryReadRequest(BaseModel):
    category: NotificationCategory


class MarkReadResponse(BaseModel):
    success: bool = True
    updated: int


class CleanupResponse(BaseModel):
    success: bool = True
    deleted: int


__all__ = [
    "CleanupResponse",
    "MarkAllReadRequest",
    "MarkCategoryReadRequest",
    "MarkReadResponse",
    "NotificationPage",
    "NotificationRead",
    "UnreadCountsRead",
    "ViewCreate",
    "ViewRead",
    "ViewerPage",
    "ViewerRead",
]
