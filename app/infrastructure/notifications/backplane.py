"""Transports carrying realtime envelopes to every gateway instance."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL = "notifications:realtime"


class EnvelopeScope(str, Enum):
    """Who an envelope is addressed to."""

    USERS = "users"
    TENANT = "tenant"


@dataclass
class RealtimeEnvelope:
    """A named event addressed to users or to a tenant room."""

    scope: EnvelopeScope
    targets: list[int]
    event: str
    data: Any = field(default_factory=dict)

    def to_json(self) -> str:
        payload = asdict(self)
        payload["scope"] = self.scope.value
        return json.dumps(payload, default=str)

    @classmethod
    def from_json(cls, raw: str | bytes) -> "RealtimeEnvelope":
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        payload = json.loads(raw)
        return cls(
            scope=EnvelopeScope(payload["scope"]),
            targets=[int(target) for target in payload.get("targets", [])],
            event=str(payload["event"]),
            data=payload.get("data"),
        )


EnvelopeHandler = Callable[[RealtimeEnvelope], Awaitable[int]]


class LocalBackplane:
    """Deliver envelopes straight to the sockets held by this process."""

    def __init__(self) -> None:
        self._handler: Optional[EnvelopeHandler] = None

    def bind(self, handler: EnvelopeHandler) -> None:
        self._handler = handler

    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        return None

    async def publish(self, envelope: RealtimeEnvelope) -> None:
        if self._handler is None:
            logger.debug("No realtime handler bound; dropping %s", envelope.event)
            return
        await self._handler(envelope)


class RedisBackplane:
    """Share envelopes between instances through Redis pub/sub.

    Every instance publishes to the same channel and delivers what it receives
    to the sockets it holds, so an emit reaches users connected anywhere.
    """

    def __init__(self, url: str, *, channel: str = DEFAULT_CHANNEL) -> None:
        self._url = url
        self._channel = channel
        self._handler: Optional[EnvelopeHandler] = None
        self._client: Optional[redis.Redis] = None
        self._pubsub: Optional[redis.client.PubSub] = None
        self._listener: Optional[asyncio.Task] = None

    def bind(self, handler: EnvelopeHandler) -> None:
        self._handler = handler

    async def start(self) -> None:
        if self._client is not None:
            return
        self._client = redis.from_url(self._url, decode_responses=True)
        self._pubsub = self._client.pubsub()
        await self._pubsub.subscribe(self._channel)
        self._listener = asyncio.create_task(self._listen())
        logger.info("Realtime backplane subscribed to %s", self._channel)

    async def stop(self) -> None:
        if self._listener is not None:
            self._listener.cancel()
            try:
                await self._listener
            except asyncio.CancelledError:
                pass
            self._listener = None
        if self._pubsub is not None:
            await self._pubsub.unsubscribe(self._channel)
            await self._pubsub.aclose()
            self._pubsub = None
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        logger.info("Realtime backplane disconnected")

    async def publish(self, envelope: RealtimeEnvelope) -> None:
        if self._client is None:
            await self.start()
        await self._client.publish(self._channel, envelope.to_json())

    async def _listen(self) -> None:
        assert self._pubsub is not None
        async for message in self._pubsub.listen():
            if message.get("type") != "message":
                continue
            try:
                envelope = RealtimeEnvelope.from_json(message["data"])
            except (KeyError, TypeError, ValueError):
                logger.warning("Discarding malformed realtime envelope: %r", message.get("data"))
                continue
            if self._handler is None:
                continue
            try:
                await self._handler(envelope)
            except Exception:
                logger.exception("Failed to deliver realtime envelope %s", envelope.event)


__all__ = [
    "DEFAULT_CHANNEL",
    "EnvelopeScope",
    "LocalBackplane",
    "RealtimeEnvelope",
    "RedisBackplane",
]
