"""Create one notification per member of a tenant audience."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import AUDIENCE_ROLES, Audience, Notification, NotificationType, User
from app.domain.exceptions import DirectoryUnavailableError
from app.infrastructure.repositories import UserRepository

from .store import create_notification, normalize_target_id

logger = logging.getLogger(__name__)


class FanOutPolicy(str, Enum):
    """How a fan-out reacts when one recipient's notification fails."""

    FAIL_FAST = "fail_fast"
    BEST_EFFORT = "best_effort"


@dataclass
class FanOutReport:
    """Notifications written by a fan-out and the recipients that failed."""

    notifications: list[Notification] = field(default_factory=list)
    failures: list[tuple[int, Exception]] = field(default_factory=list)

    @property
    def recipient_ids(self) -> list[int]:
        return [notification.user_id for notification in self.notifications]


def resolve_audience(
    session: Session,
    *,
    tenant_id: int,
    audience: Audience,
    exclude_user_id: int | None = None,
) -> Sequence[User]:
    """Return the active users of ``tenant_id`` selected by ``audience``."""

    role = AUDIENCE_ROLES[Audience(audience)]
    try:
        users = UserRepository(session).list_by_tenant(tenant_id, role=role)
    except SQLAlchemyError as exc:
        session.rollback()
        raise DirectoryUnavailableError(
            f"Could not resolve {Audience(audience).value} for tenant {tenant_id}"
        ) from exc
    if exclude_user_id is None:
        return users
    return [user for user in users if user.id != exclude_user_id]


def fan_out_with_report(
    session: Session,
    *,
    tenant_id: int,
    audience: Audience,
    type: NotificationType,
    target_id: Any,
    message: str,
    exclude_user_id: int | None = None,
    policy: FanOutPolicy = FanOutPolicy.FAIL_FAST,
) -> FanOutReport:
    """Notify every user of the audience and report per-recipient outcomes.

    ``target_id`` is validated before the directory is queried. With
    :attr:`FanOutPolicy.FAIL_FAST` the first failing write propagates and the
    remaining recipients are skipped; rows already written stay. With
    :attr:`FanOutPolicy.BEST_EFFORT` failures are logged and collected.
    """

    target = normalize_target_id(target_id)
    recipients = resolve_audience(
        session,
        tenant_id=tenant_id,
        audience=audience,
        exclude_user_id=exclude_user_id,
    )

    report = FanOutReport()
    for user in recipients:
        try:
            notification = create_notification(
                session,
                user_id=user.id,
                tenant_id=tenant_id,
                type=type,
                target_id=target,
                message=message,
            )
        except Exception as exc:
            if policy is FanOutPolicy.FAIL_FAST:
                raise
            session.rollback()
            logger.warning(
                "Could not notify user %s of %s %s: %s",
                user.id,
                NotificationType(type).value,
                target,
                exc,
            )
            report.failures.append((user.id, exc))
            continue
        report.notifications.append(notification)

    logger.debug(
        "Fan-out %s for tenant %s (%s): %d written, %d failed",
        NotificationType(type).value,
        tenant_id,
        Audience(audience).value,
        len(report.notifications),
        len(report.failures),
    )
    return report


def fan_out(
    session: Session,
    *,
    tenant_id: int,
    audience: Audience,
    type: NotificationType,
    target_id: Any,
    message: str,
    exclude_user_id: int | None = None,
    policy: FanOutPolicy = FanOutPolicy.FAIL_FAST,
) -> list[Notification]:
    """Return the notifications created for ``audience`` inside ``tenant_id``."""

    return fan_out_with_report(
        session,
        tenant_id=tenant_id,
        audience=audience,
        type=type,
        target_id=target_id,
        message=message,
        exclude_user_id=exclude_user_id,
        policy=policy,
    ).notifications


__all__ = [
    "FanOutPolicy",
    "FanOutReport",
    "fan_out",
    "fan_out_with_report",
    "resolve_audience",
]
