"""Realtime and push delivery for the infrastructure layer."""

from .backplane import EnvelopeScope, LocalBackplane, RealtimeEnvelope, RedisBackplane
from .gateway import NotificationGateway, build_gateway, notification_gateway
from .manager import Connection, ConnectionState, SessionRegistry
from .push import (
    LoggingPushSender,
    PushSender,
    VAPID_KEY_PLACEHOLDER,
    get_vapid_public_key,
    push_sender,
)
from .realtime import RealtimeEventPublisher, realtime_event_publisher

__all__ = [
    "Connection",
    "ConnectionState",
    "EnvelopeScope",
    "LocalBackplane",
    "LoggingPushSender",
    "NotificationGateway",
    "PushSender",
    "RealtimeEnvelope",
    "RealtimeEventPublisher",
    "RedisBackplane",
    "SessionRegistry",
    "VAPID_KEY_PLACEHOLDER",
    "build_gateway",
    "get_vapid_public_key",
    "notification_gateway",
    "push_sender",
    "realtime_event_publisher",
]
