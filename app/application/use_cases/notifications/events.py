"""Post-commit hooks turning domain actions into notifications.

The documents, announcements, tickets and onboarding features call these
helpers after their own write has committed. Persisting notifications,
emitting realtime events and sending pushes run as separate steps; a failing
step is logged and recorded in the returned :class:`HookOutcome`, and never
propagates to the caller whose primary operation already succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import Audience, Notification, NotificationType
from app.domain.exceptions import ValidationError
from app.infrastructure.notifications import (
    PushSender,
    RealtimeEventPublisher,
    realtime_event_publisher,
)

from .fanout import fan_out
from .push_subscriptions import build_push_message, send_push_to_users
from .store import create_notification, normalize_target_id

logger = logging.getLogger(__name__)


@dataclass
class HookOutcome:
    """What a hook managed to do."""

    notifications: list[Notification] = field(default_factory=list)
    failed_steps: list[str] = field(default_factory=list)

    @property
    def recipient_ids(self) -> list[int]:
        return [notification.user_id for notification in self.notifications]

    @property
    def succeeded(self) -> bool:
        return not self.failed_steps


def _run_step(
    outcome: HookOutcome,
    session: Session,
    step: str,
    action: Callable[..., Any],
    *args: Any,
    **kwargs: Any,
) -> Any:
    try:
        return action(*args, **kwargs)
    except Exception:
        session.rollback()
        logger.exception("Notification step '%s' failed", step)
        outcome.failed_steps.append(step)
        return None


def _validated_target(outcome: HookOutcome, target_id: Any) -> str | None:
    """Return the normalized target, or record a failed persist step."""

    try:
        return normalize_target_id(target_id)
    except ValidationError as exc:
        logger.warning("Notification step 'persist' failed: %s", exc)
        outcome.failed_steps.append("persist")
        return None


def _push(
    outcome: HookOutcome,
    session: Session,
    *,
    user_ids: list[int],
    type: NotificationType,
    target_id: str,
    message: str,
    title: str,
    sender: PushSender | None,
) -> None:
    if not user_ids or not get_settings().push_enabled:
        return
    push_message = build_push_message(type, target_id, message, title=title)
    _run_step(
        outcome,
        session,
        "push",
        send_push_to_users,
        session,
        user_ids,
        push_message,
        sender=sender,
    )


def notify_document_uploaded(
    session: Session,
    *,
    tenant_id: int,
    document_id: Any,
    document_name: str,
    author_id: int | None = None,
    realtime: RealtimeEventPublisher | None = None,
    sender: PushSender | None = None,
) -> HookOutcome:
    """Notify everyone in the tenant except the author about a new document."""

    realtime = realtime or realtime_event_publisher
    outcome = HookOutcome()
    message = f"Nouveau document: {document_name}"
    target = _validated_target(outcome, document_id)
    if target is None:
        return outcome

    notifications = _run_step(
        outcome,
        session,
        "persist",
        fan_out,
        session,
        tenant_id=tenant_id,
        audience=Audience.ALL_IN_TENANT,
        type=NotificationType.DOCUMENT_UPLOADED,
        target_id=target,
        message=message,
        exclude_user_id=author_id,
    )
    outcome.notifications.extend(notifications or [])

    _run_step(
        outcome,
        session,
        "realtime",
        realtime.document_uploaded,
        tenant_id,
        {"id": document_id, "name": document_name, "message": message},
    )
    _push(
        outcome,
        session,
        user_ids=outcome.recipient_ids,
        type=NotificationType.DOCUMENT_UPLOADED,
        target_id=target,
        message=message,
        title="Nouveau document",
        sender=sender,
    )
    return outcome


def notify_announcement_posted(
    session: Session,
    *,
    tenant_id: int,
    announcement_id: Any,
    title: str,
    author_id: int | None = None,
    realtime: RealtimeEventPublisher | None = None,
    sender: PushSender | None = None,
) -> HookOutcome:
    """Notify the tenant's viewers about a new announcement."""

    realtime = realtime or realtime_event_publisher
    outcome = HookOutcome()
    message = f"Nouvelle annonce: {title}"
    target = _validated_target(outcome, announcement_id)
    if target is None:
        return outcome

    notifications = _run_step(
        outcome,
        session,
        "persist",
        fan_out,
        session,
        tenant_id=tenant_id,
        audience=Audience.VIEWERS_ONLY,
        type=NotificationType.ANNOUNCEMENT_POSTED,
        target_id=target,
        message=message,
        exclude_user_id=author_id,
    )
    outcome.notifications.extend(notifications or [])

    _run_step(
        outcome,
        session,
        "realtime",
        realtime.announcement_posted,
        tenant_id,
        {"id": announcement_id, "title": title, "message": message},
    )
    _push(
        outcome,
        session,
        user_ids=outcome.recipient_ids,
        type=NotificationType.ANNOUNCEMENT_POSTED,
        target_id=target,
        message=message,
        title="Nouvelle annonce",
        sender=sender,
    )
    return outcome


def notify_ticket_created(
    session: Session,
    *,
    tenant_id: int,
    ticket_id: Any,
    title: str,
    realtime: RealtimeEventPublisher | None = None,
    sender: PushSender | None = None,
) -> HookOutcome:
    """Notify the tenant's managers, and only them, about a new ticket."""

    realtime = realtime or realtime_event_publisher
    outcome = HookOutcome()
    message = f"Nouveau ticket: {title}"
    target = _validated_target(outcome, ticket_id)
    if target is None:
        return outcome

    notifications = _run_step(
        outcome,
        session,
        "persist",
        fan_out,
        session,
        tenant_id=tenant_id,
        audience=Audience.MANAGERS_ONLY,
        type=NotificationType.TICKET_CREATED,
        target_id=target,
        message=message,
    )
    outcome.notifications.extend(notifications or [])
    manager_ids = outcome.recipient_ids

    _push(
        outcome,
        session,
        user_ids=manager_ids,
        type=NotificationType.TICKET_CREATED,
        target_id=target,
        message=message,
        title="Nouveau ticket",
        sender=sender,
    )
    _run_step(
        outcome,
        session,
        "realtime",
        realtime.ticket_created,
        manager_ids,
        {"id": ticket_id, "title": title, "message": message},
    )
    return outcome


def notify_ticket_status_updated(
    session: Session,
    *,
    tenant_id: int,
    ticket_id: Any,
    title: str,
    status: str,
    creator_id: int,
    realtime: RealtimeEventPublisher | None = None,
    sender: PushSender | None = None,
) -> HookOutcome:
    """Tell the ticket's creator that its status changed."""

    realtime = realtime or realtime_event_publisher
    outcome = HookOutcome()
    message = f"Statut mis à jour: {title} - {status}"
    target = _validated_target(outcome, ticket_id)
    if target is None:
        return outcome

    notification = _run_step(
        outcome,
        session,
        "persist",
        create_notification,
        session,
        user_id=creator_id,
        tenant_id=tenant_id,
        type=NotificationType.TICKET_STATUS_UPDATED,
        target_id=target,
        message=message,
    )
    if notification is not None:
        outcome.notifications.append(notification)

    _push(
        outcome,
        session,
        user_ids=outcome.recipient_ids,
        type=NotificationType.TICKET_STATUS_UPDATED,
        target_id=target,
        message=message,
        title="Ticket mis à jour",
        sender=sender,
    )
    _run_step(
        outcome,
        session,
        "realtime",
        realtime.ticket_updated,
        creator_id,
        {"id": ticket_id, "title": title, "status": status, "message": message},
    )
    return outcome


def notify_ticket_commented(
    session: Session,
    *,
    tenant_id: int,
    ticket_id: Any,
    title: str,
    creator_id: int,
    author_id: int,
    realtime: RealtimeEventPublisher | None = None,
    sender: PushSender | None = None,
) -> HookOutcome:
    """Tell the ticket's creator about a comment written by someone else."""

    outcome = HookOutcome()
    if creator_id == author_id:
        return outcome

    realtime = realtime or realtime_event_publisher
    message = f"Nouveau commentaire sur: {title}"
    target = _validated_target(outcome, ticket_id)
    if target is None:
        return outcome

    notification = _run_step(
        outcome,
        session,
        "persist",
        create_notification,
        session,
        user_id=creator_id,
        tenant_id=tenant_id,
        type=NotificationType.TICKET_COMMENTED,
        target_id=target,
        message=message,
    )
    if notification is not None:
        outcome.notifications.append(notification)

    _push(
        outcome,
        session,
        user_ids=outcome.recipient_ids,
        type=NotificationType.TICKET_COMMENTED,
        target_id=target,
        message=message,
        title="Nouveau commentaire",
        sender=sender,
    )
    _run_step(
        outcome,
        session,
        "realtime",
        realtime.ticket_updated,
        creator_id,
        {"id": ticket_id, "title": title, "message": message, "type": "comment"},
    )
    return outcome


def notify_restaurant_joined(
    session: Session,
    *,
    tenant_id: int,
    announcement_id: Any,
    restaurant_name: str,
    restaurant_city: str | None = None,
    announcement_title: str | None = None,
    realtime: RealtimeEventPublisher | None = None,
    sender: PushSender | None = None,
) -> HookOutcome:
    """Welcome a new restaurant to the tenant's viewers."""

    realtime = realtime or realtime_event_publisher
    outcome = HookOutcome()
    message = f"{restaurant_name} a rejoint l'équipe !"
    target = _validated_target(outcome, announcement_id)
    if target is None:
        return outcome

    notifications = _run_step(
        outcome,
        session,
        "persist",
        fan_out,
        session,
        tenant_id=tenant_id,
        audience=Audience.VIEWERS_ONLY,
        type=NotificationType.RESTAURANT_JOINED,
        target_id=target,
        message=message,
    )
    outcome.notifications.extend(notifications or [])

    _run_step(
        outcome,
        session,
        "realtime",
        realtime.restaurant_joined,
        tenant_id,
        {
            "id": announcement_id,
            "title": announcement_title or message,
            "restaurantName": restaurant_name,
            "restaurantCity": restaurant_city,
            "message": message,
        },
    )
    _push(
        outcome,
        session,
        user_ids=outcome.recipient_ids,
        type=NotificationType.RESTAURANT_JOINED,
        target_id=target,
        message=message,
        title="Bienvenue",
        sender=sender,
    )
    return outcome


__all__ = [
    "HookOutcome",
    "notify_announcement_posted",
    "notify_document_uploaded",
    "notify_restaurant_joined",
    "notify_ticket_commented",
    "notify_ticket_created",
    "notify_ticket_status_updated",
]
