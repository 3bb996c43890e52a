"""Use cases for storing and reading user notifications."""

from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy.orm import Session

from app.domain.entities import (
    TYPES_BY_CATEGORY,
    Notification,
    NotificationCategory,
    NotificationType,
    Page,
    UnreadCounts,
)
from app.domain.exceptions import InvalidTargetError, ValidationError
from app.infrastructure.repositories import NotificationRepository
from app.utils import now_utc

DEFAULT_PAGE_SIZE = 50
MAX_TARGET_ID_LENGTH = 64


def normalize_target_id(target_id: Any) -> str:
    """Return ``target_id`` as a trimmed string or raise :class:`InvalidTargetError`.

    Integer identifiers are accepted and converted. ``None``, empty and
    whitespace-only values are rejected so that no notification is ever
    stored without a concrete object to point at. Values longer than
    :data:`MAX_TARGET_ID_LENGTH` do not fit the target columns.
    """

    if target_id is None:
        raise InvalidTargetError()
    normalized = str(target_id).strip()
    if not normalized:
        raise InvalidTargetError()
    if len(normalized) > MAX_TARGET_ID_LENGTH:
        raise InvalidTargetError(
            f"target_id cannot be longer than {MAX_TARGET_ID_LENGTH} characters"
        )
    return normalized


def create_notification(
    session: Session,
    *,
    user_id: int,
    tenant_id: int,
    type: NotificationType,
    target_id: Any,
    message: str,
) -> Notification:
    """Persist one notification for ``user_id``; nothing is written on invalid input."""

    notification = Notification(
        id=None,
        user_id=user_id,
        tenant_id=tenant_id,
        type=NotificationType(type),
        target_id=normalize_target_id(target_id),
        message=message,
        is_read=False,
        created_at=now_utc(),
    )
    return NotificationRepository(session).create(notification)


def list_user_notifications(
    session: Session,
    user_id: int,
    *,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Page[Notification]:
    """Return a newest-first page of the user's notifications."""

    _validate_pagination(page, page_size)
    items, total = NotificationRepository(session).list_for_user(
        user_id, offset=(page - 1) * page_size, limit=page_size
    )
    return Page(items=list(items), total=total, page=page, page_size=page_size)


def mark_read(
    session: Session, user_id: int, type: NotificationType, target_id: Any
) -> int:
    return NotificationRepository(session).mark_read(
        user_id, [NotificationType(type)], target_id=normalize_target_id(target_id)
    )


def mark_all_read_by_type(session: Session, user_id: int, type: NotificationType) -> int:
    return NotificationRepository(session).mark_read(user_id, [NotificationType(type)])


def mark_read_by_types(
    session: Session, user_id: int, types: Iterable[NotificationType]
) -> int:
    unique = list(dict.fromkeys(NotificationType(value) for value in types))
    return NotificationRepository(session).mark_read(user_id, unique)


def mark_category_read(
    session: Session, user_id: int, category: NotificationCategory
) -> int:
    """Mark read every notification type that rolls up into ``category``."""

    return mark_read_by_types(
        session, user_id, TYPES_BY_CATEGORY[NotificationCategory(category)]
    )


def unread_counts(session: Session, user_id: int) -> UnreadCounts:
    return NotificationRepository(session).unread_counts(user_id)


def _validate_pagination(page: int, page_size: int) -> None:
    if page < 1:
        raise ValidationError("page must be greater than or equal to 1")
    if page_size < 1:
        raise ValidationError("page_size must be greater than or equal to 1")


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_TARGET_ID_LENGTH",
    "create_notification",
    "list_user_notifications",
    "mark_all_read_by_type",
    "mark_category_read",
    "mark_read",
    "mark_read_by_types",
    "normalize_target_id",
    "unread_counts",
]
