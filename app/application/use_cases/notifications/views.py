"""Use cases for recording and reporting item views."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from app.domain.entities import VIEW_READ_TYPES, Page, View, ViewerEntry, ViewTargetType
from app.domain.exceptions import ValidationError
from app.infrastructure.repositories import NotificationRepository, ViewRepository

from .store import normalize_target_id

DEFAULT_VIEWERS_PAGE_SIZE = 100


def record_view(
    session: Session, *, user_id: int, target_type: ViewTargetType, target_id: Any
) -> View:
    """Record that ``user_id`` saw the item; repeated calls return the same row."""

    return ViewRepository(session).get_or_create(
        user_id=user_id,
        target_type=ViewTargetType(target_type),
        target_id=normalize_target_id(target_id),
    )


def record_view_and_mark_read(
    session: Session, *, user_id: int, target_type: ViewTargetType, target_id: Any
) -> View:
    """Record a view, then mark read the notifications tied to the same item."""

    target_type = ViewTargetType(target_type)
    view = record_view(
        session, user_id=user_id, target_type=target_type, target_id=target_id
    )
    NotificationRepository(session).mark_read(
        user_id, VIEW_READ_TYPES[target_type], target_id=view.target_id
    )
    return view


def list_viewers(
    session: Session,
    *,
    target_type: ViewTargetType,
    target_id: Any,
    tenant_id: int | None = None,
    page: int = 1,
    page_size: int = DEFAULT_VIEWERS_PAGE_SIZE,
) -> Page[ViewerEntry]:
    """Return who viewed an item, newest first.

    With ``tenant_id`` only viewers belonging to that tenant are listed.
    """

    if page < 1 or page_size < 1:
        raise ValidationError("page and page_size must be greater than or equal to 1")
    items, total = ViewRepository(session).list_for_target(
        target_type=ViewTargetType(target_type),
        target_id=normalize_target_id(target_id),
        tenant_id=tenant_id,
        offset=(page - 1) * page_size,
        limit=page_size,
    )
    return Page(items=list(items), total=total, page=page, page_size=page_size)


__all__ = [
    "DEFAULT_VIEWERS_PAGE_SIZE",
    "list_viewers",
    "record_view",
    "record_view_and_mark_read",
]
