"""Pydantic models for push subscription endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.domain.entities import PushDeliveryReport, PushSubscription

from .notification import CamelModel


class PushKeys(BaseModel):
    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)


class BrowserSubscription(CamelModel):
    """Subscription object produced by the browser's PushManager."""

    endpoint: str = Field(..., min_length=1)
    keys: PushKeys
    expiration_time: str | int | None = Field(default=None, alias="expirationTime")


class PushSubscribeRequest(CamelModel):
    subscription: BrowserSubscription
    user_agent: str | None = Field(default=None, alias="userAgent")
    platform: str | None = None


class PushSubscriptionRead(CamelModel):
    id: str
    user_id: int = Field(..., alias="userId")
    endpoint: str
    user_agent: str | None = Field(default=None, alias="userAgent")
    platform: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @classmethod
    def from_entity(cls, subscription: PushSubscription) -> "PushSubscriptionRead":
        return cls(
            id=subscription.id or "",
            user_id=subscription.user_id,
            endpoint=subscription.endpoint,
            user_agent=subscription.user_agent,
            platform=subscription.platform,
            created_at=subscription.created_at,
            updated_at=subscription.updated_at,
        )


class VapidPublicKeyRead(CamelModel):
    public_key: str = Field(..., alias="publicKey")


class UnsubscribeResponse(BaseModel):
    success: bool = True
    removed: int


class PushTestResponse(BaseModel):
    success: bool
    attempted: int
    delivered: int

    @classmethod
    def from_report(cls, report: PushDeliveryReport) -> "PushTestResponse":
        return cls(
            success=report.delivered > 0,
            attempted=report.attempted,
            delivered=report.delivered,
        )


__all__ = [
    "BrowserSubscription",
    "PushKeys",
    "PushSubscribeRequest",
    "PushSubscriptionRead",
    "PushTestResponse",
    "UnsubscribeResponse",
    "VapidPublicKeyRead",
]
