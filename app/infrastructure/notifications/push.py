"""Push delivery senders.

No push provider is wired yet: :class:`LoggingPushSender` records what would
be delivered so the surrounding subscription and fan-out flow can run end to
end.
"""

from __future__ import annotations

import json
import logging
from typing import Protocol

from app.config import get_settings
from app.domain.entities import PushMessage, PushSubscription

logger = logging.getLogger(__name__)

VAPID_KEY_PLACEHOLDER = "onesignal-app-id-placeholder"


class PushSender(Protocol):
    """Deliver one message to one registered device."""

    def send(self, subscription: PushSubscription, message: PushMessage) -> bool: ...


class LoggingPushSender:
    """Stub sender that logs the push it would deliver."""

    def send(self, subscription: PushSubscription, message: PushMessage) -> bool:
        logger.info(
            "Would send push notification to user %s via %s: %s",
            subscription.user_id,
            subscription.platform or "web",
            message.title,
        )
        logger.info("Push message: %s", message.body)
        if message.data:
            logger.debug("Push data: %s", json.dumps(message.data, indent=2, default=str))
        return True


def get_vapid_public_key() -> str:
    """Return the key browsers need to register, or the placeholder."""

    settings = get_settings()
    if settings.vapid_public_key:
        return settings.vapid_public_key
    logger.info("VAPID key requested but not configured; returning placeholder")
    return VAPID_KEY_PLACEHOLDER


push_sender: PushSender = LoggingPushSender()


__all__ = [
    "LoggingPushSender",
    "PushSender",
    "VAPID_KEY_PLACEHOLDER",
    "get_vapid_public_key",
    "push_sender",
]
