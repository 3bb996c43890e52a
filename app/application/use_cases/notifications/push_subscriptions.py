"""Use cases for push registrations and push delivery."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.domain.entities import (
    CATEGORY_BY_TYPE,
    CATEGORY_URLS,
    Notification,
    NotificationType,
    PushDeliveryReport,
    PushMessage,
    PushSubscription,
)
from app.domain.exceptions import ValidationError
from app.infrastructure.notifications import PushSender, push_sender
from app.infrastructure.repositories import PushSubscriptionRepository, UserRepository
from app.utils import now_utc

from .store import create_notification

logger = logging.getLogger(__name__)

PUSH_TITLE = "FranchiseHUB"


def subscribe(
    session: Session,
    user_id: int,
    *,
    endpoint: str,
    p256dh: str,
    auth: str,
    expiration_time: str | None = None,
    user_agent: str | None = None,
    platform: str | None = None,
) -> PushSubscription:
    """Register a device, refreshing its keys if the endpoint is already known."""

    endpoint = (endpoint or "").strip()
    if not endpoint:
        raise ValidationError("endpoint cannot be empty")
    if not p256dh or not auth:
        raise ValidationError("subscription keys p256dh and auth are required")

    subscription = PushSubscription(
        id=None,
        user_id=user_id,
        endpoint=endpoint,
        p256dh=p256dh,
        auth=auth,
        expiration_time=expiration_time,
        user_agent=user_agent,
        platform=platform,
    )
    return PushSubscriptionRepository(session).upsert(subscription)


def unsubscribe(session: Session, user_id: int) -> int:
    """Remove every device registered by ``user_id``."""

    removed = PushSubscriptionRepository(session).delete_for_user(user_id)
    logger.info("Removed %d push subscription(s) for user %s", removed, user_id)
    return removed


def unsubscribe_endpoint(session: Session, user_id: int, endpoint: str) -> int:
    """Remove a single device of ``user_id``."""

    return PushSubscriptionRepository(session).delete_endpoint(
        user_id=user_id, endpoint=endpoint
    )


def send_push_to_user(
    session: Session,
    user_id: int,
    message: PushMessage,
    *,
    sender: PushSender | None = None,
) -> PushDeliveryReport:
    """Attempt delivery to each device of ``user_id``; failures are logged, never raised."""

    sender = sender or push_sender
    report = PushDeliveryReport()
    try:
        subscriptions = PushSubscriptionRepository(session).list_for_user(user_id)
    except Exception:
        session.rollback()
        logger.exception("Could not load push subscriptions for user %s", user_id)
        return PushDeliveryReport(attempted=1, failed=1)

    if not subscriptions:
        logger.debug("User %s has no push subscription", user_id)
        return report

    for subscription in subscriptions:
        report.attempted += 1
        try:
            delivered = sender.send(subscription, message)
        except Exception:
            logger.exception(
                "Push delivery to user %s failed for endpoint %s",
                user_id,
                subscription.endpoint,
            )
            report.failed += 1
            continue
        if delivered:
            report.delivered += 1
        else:
            report.failed += 1
    return report


def send_push_to_users(
    session: Session,
    user_ids: list[int],
    message: PushMessage,
    *,
    sender: PushSender | None = None,
) -> PushDeliveryReport:
    report = PushDeliveryReport()
    for user_id in dict.fromkeys(user_ids):
        report = report.merge(send_push_to_user(session, user_id, message, sender=sender))
    return report


def send_push_to_tenant(
    session: Session,
    tenant_id: int,
    message: PushMessage,
    *,
    exclude_user_id: int | None = None,
    sender: PushSender | None = None,
) -> PushDeliveryReport:
    """Push ``message`` to every active user of ``tenant_id`` except ``exclude_user_id``."""

    try:
        users = UserRepository(session).list_by_tenant(tenant_id)
    except Exception:
        session.rollback()
        logger.exception("Could not resolve users of tenant %s for push", tenant_id)
        return PushDeliveryReport()

    user_ids = [user.id for user in users if user.id != exclude_user_id]
    return send_push_to_users(session, user_ids, message, sender=sender)


def build_push_message(
    type: NotificationType, target_id: str, message: str, *, title: str = PUSH_TITLE
) -> PushMessage:
    """Return the push payload announcing a notification of ``type``."""

    notification_type = NotificationType(type)
    return PushMessage(
        title=title,
        body=message,
        data={
            "type": notification_type.value,
            "targetId": target_id,
            "url": CATEGORY_URLS[CATEGORY_BY_TYPE[notification_type]],
        },
        tag=f"{notification_type.value}-{target_id}",
    )


def create_notification_with_push(
    session: Session,
    *,
    user_id: int,
    tenant_id: int,
    type: NotificationType,
    target_id: Any,
    message: str,
    sender: PushSender | None = None,
) -> Notification:
    """Persist a notification, then push it; the push never affects the result."""

    notification = create_notification(
        session,
        user_id=user_id,
        tenant_id=tenant_id,
        type=type,
        target_id=target_id,
        message=message,
    )
    send_push_to_user(
        session,
        user_id,
        build_push_message(notification.type, notification.target_id, message),
        sender=sender,
    )
    return notification


def send_test_push(
    session: Session, user_id: int, *, sender: PushSender | None = None
) -> PushDeliveryReport:
    message = PushMessage(
        title=f"Test {PUSH_TITLE}",
        body="Test push notification",
        data={"test": True, "url": "/dashboard", "timestamp": now_utc().isoformat()},
        tag="test-push",
    )
    return send_push_to_user(session, user_id, message, sender=sender)


__all__ = [
    "PUSH_TITLE",
    "build_push_message",
    "create_notification_with_push",
    "send_push_to_tenant",
    "send_push_to_user",
    "send_push_to_users",
    "send_test_push",
    "subscribe",
    "unsubscribe",
    "unsubscribe_endpoint",
]
