"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from app.domain.entities import (
    TYPES_BY_CATEGORY,
    Notification,
    NotificationCategory,
    NotificationType,
    UnreadCounts,
)
from app.infrastructure.models import NotificationModel
from app.utils import ensure_utc, ensure_utc_naive, now_utc


class NotificationRepository:
    """Provide storage operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            user_id=notification.user_id,
            tenant_id=notification.tenant_id,
            type=notification.type.value,
            target_id=notification.target_id,
            message=notification.message,
            is_read=notification.is_read,
            created_at=ensure_utc_naive(notification.created_at or now_utc()),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_user(
        self,
        user_id: int,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[Sequence[Notification], int]:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        total = query.count()
        models = (
            query.order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [self._to_entity(model) for model in models], total

    def mark_read(
        self,
        user_id: int,
        types: Iterable[NotificationType],
        *,
        target_id: str | None = None,
    ) -> int:
        """Flag unread notifications of ``types`` as read and return how many changed."""

        values = [notification_type.value for notification_type in types]
        if not values:
            return 0
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id,
            NotificationModel.type.in_(values),
            NotificationModel.is_read.is_(False),
        )
        if target_id is not None:
            query = query.filter(NotificationModel.target_id == target_id)
        updated = query.update(
            {NotificationModel.is_read: True}, synchronize_session=False
        )
        self.session.commit()
        return int(updated or 0)

    def unread_counts(self, user_id: int) -> UnreadCounts:
        """Count unread notifications per category in a single aggregate query."""

        columns = [
            func.coalesce(
                func.sum(
                    case(
                        (
                            NotificationModel.type.in_(
                                [notification_type.value for notification_type in types]
                            ),
                            1,
                        ),
                        else_=0,
                    )
                ),
                0,
            ).label(category.value)
            for category, types in TYPES_BY_CATEGORY.items()
        ]
        row = (
            self.session.query(*columns)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .one()
        )
        mapping = row._mapping
        return UnreadCounts(
            documents=int(mapping[NotificationCategory.DOCUMENTS.value] or 0),
            announcements=int(mapping[NotificationCategory.ANNOUNCEMENTS.value] or 0),
            tickets=int(mapping[NotificationCategory.TICKETS.value] or 0),
        )

    def count_for_users(
        self, user_ids: Sequence[int], types: Iterable[NotificationType]
    ) -> int:
        query = self._users_types_query(user_ids, types)
        return query.count() if query is not None else 0

    def delete_for_users(
        self, user_ids: Sequence[int], types: Iterable[NotificationType]
    ) -> int:
        query = self._users_types_query(user_ids, types)
        if query is None:
            return 0
        deleted = query.delete(synchronize_session=False)
        self.session.commit()
        return int(deleted or 0)

    def _users_types_query(
        self, user_ids: Sequence[int], types: Iterable[NotificationType]
    ):
        values = [notification_type.value for notification_type in types]
        if not user_ids or not values:
            return None
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id.in_(list(user_ids)))
            .filter(NotificationModel.type.in_(values))
        )

    def list_blank_targets(self, *, limit: int | None = None) -> Sequence[Notification]:
        query = self._blank_target_query().order_by(NotificationModel.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_blank_targets(self) -> int:
        return self._blank_target_query().count()

    def delete_blank_targets(self) -> int:
        deleted = self._blank_target_query().delete(synchronize_session=False)
        self.session.commit()
        return int(deleted or 0)

    def _blank_target_query(self):
        return self.session.query(NotificationModel).filter(
            or_(
                NotificationModel.target_id.is_(None),
                func.trim(NotificationModel.target_id) == "",
            )
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            tenant_id=model.tenant_id,
            type=NotificationType(model.type),
            target_id=model.target_id or "",
            message=model.message,
            is_read=bool(model.is_read),
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["NotificationRepository"]
