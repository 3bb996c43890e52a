"""Administrative clean-ups for notifications created by past defects."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Notification, NotificationType, Role
from app.infrastructure.repositories import NotificationRepository, UserRepository

logger = logging.getLogger(__name__)

# Managers never receive announcement-style notifications.
MANAGER_EXCLUDED_TYPES = (
    NotificationType.ANNOUNCEMENT_POSTED,
    NotificationType.RESTAURANT_JOINED,
)


def cleanup_manager_announcement_notifications(session: Session) -> int:
    """Delete announcement and restaurant-joined notifications held by managers."""

    manager_ids = UserRepository(session).list_ids_by_role(Role.MANAGER)
    deleted = NotificationRepository(session).delete_for_users(
        manager_ids, MANAGER_EXCLUDED_TYPES
    )
    logger.info("Removed %d announcement notification(s) from managers", deleted)
    return deleted


def count_manager_announcement_notifications(session: Session) -> int:
    manager_ids = UserRepository(session).list_ids_by_role(Role.MANAGER)
    return NotificationRepository(session).count_for_users(
        manager_ids, MANAGER_EXCLUDED_TYPES
    )


def count_blank_target_notifications(session: Session) -> int:
    return NotificationRepository(session).count_blank_targets()


def sample_blank_target_notifications(
    session: Session, *, limit: int = 5
) -> Sequence[Notification]:
    return NotificationRepository(session).list_blank_targets(limit=limit)


def purge_blank_target_notifications(session: Session) -> int:
    """Delete notifications that do not reference any object."""

    deleted = NotificationRepository(session).delete_blank_targets()
    logger.info("Removed %d notification(s) without target", deleted)
    return deleted


__all__ = [
    "MANAGER_EXCLUDED_TYPES",
    "cleanup_manager_announcement_notifications",
    "count_blank_target_notifications",
    "count_manager_announcement_notifications",
    "purge_blank_target_notifications",
    "sample_blank_target_notifications",
]
