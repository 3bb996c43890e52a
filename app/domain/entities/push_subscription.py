"""Domain entities for browser push registrations and messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class PushSubscription:
    """Push endpoint registered by one device of a user."""

    id: str | None
    user_id: int
    endpoint: str
    p256dh: str
    auth: str
    expiration_time: str | None = None
    user_agent: str | None = None
    platform: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class PushMessage:
    """Content of a push notification sent to devices."""

    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)
    tag: str | None = None


@dataclass
class PushDeliveryReport:
    """Outcome of a push attempt across one or more recipients."""

    attempted: int = 0
    delivered: int = 0
    failed: int = 0

    def merge(self, other: "PushDeliveryReport") -> "PushDeliveryReport":
        return PushDeliveryReport(
            attempted=self.attempted + other.attempted,
            delivered=self.delivered + other.delivered,
            failed=self.failed + other.failed,
        )


__all__ = ["PushDeliveryReport", "PushMessage", "PushSubscription"]
