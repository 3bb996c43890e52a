"""Realtime gateway delivering notification events over websockets."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Union

from app.config import get_settings
from app.domain.entities import Identity

from .backplane import EnvelopeScope, LocalBackplane, RealtimeEnvelope, RedisBackplane
from .manager import Connection, SessionRegistry, WebSocketLike

logger = logging.getLogger(__name__)

Backplane = Union[LocalBackplane, RedisBackplane]


class NotificationGateway:
    """Own the live sessions and route events to users and tenant rooms.

    Delivery is best effort and at most once: events for users without a live
    socket are dropped, and the persisted notification rows remain the durable
    record.
    """

    def __init__(
        self,
        registry: SessionRegistry | None = None,
        backplane: Backplane | None = None,
    ) -> None:
        self.registry = registry or SessionRegistry()
        self.backplane = backplane or LocalBackplane()
        self.backplane.bind(self.deliver)

    async def start(self) -> None:
        await self.backplane.start()

    async def stop(self) -> None:
        await self.backplane.stop()

    async def connect(self, websocket: WebSocketLike, identity: Identity) -> Connection:
        """Accept an authenticated socket and join it to its tenant room."""

        connection = Connection(
            user_id=identity.user_id,
            tenant_id=identity.tenant_id,
            websocket=websocket,
        )
        await websocket.accept()
        self.registry.add(connection)
        logger.info(
            "Realtime connection %s opened for user %s in %s",
            connection.id,
            connection.user_id,
            connection.room or "no tenant room",
        )
        return connection

    def disconnect(self, connection: Connection) -> None:
        self.registry.remove(connection)
        logger.info(
            "Realtime connection %s closed for user %s", connection.id, connection.user_id
        )

    async def emit_to_user(self, user_id: int, event: str, payload: Any) -> None:
        await self._publish(EnvelopeScope.USERS, [user_id], event, payload)

    async def emit_to_users(self, user_ids: Iterable[int], event: str, payload: Any) -> None:
        """Send ``event`` to each listed user; not atomic across recipients."""

        for user_id in _unique_ids(user_ids):
            await self.emit_to_user(user_id, event, payload)

    async def emit_to_tenant(self, tenant_id: int, event: str, payload: Any) -> None:
        """Broadcast ``event`` to every socket joined to the tenant room.

        The room is filtered by tenant only; callers decide whether the event
        is appropriate for every role in it.
        """

        await self._publish(EnvelopeScope.TENANT, [tenant_id], event, payload)

    async def deliver(self, envelope: RealtimeEnvelope) -> int:
        """Write ``envelope`` to the matching sockets held by this process."""

        if envelope.scope is EnvelopeScope.TENANT:
            connections = [
                connection
                for tenant_id in envelope.targets
                for connection in self.registry.connections_for_tenant(tenant_id)
            ]
        else:
            connections = [
                connection
                for user_id in envelope.targets
                for connection in self.registry.connections_for_user(user_id)
            ]

        if not connections:
            logger.debug(
                "No live connection for %s %s; %s not delivered",
                envelope.scope.value,
                envelope.targets,
                envelope.event,
            )
            return 0

        message = {"event": envelope.event, "data": envelope.data}
        delivered = 0
        for connection in connections:
            try:
                await connection.websocket.send_json(message)
            except Exception:
                logger.warning(
                    "Dropping realtime connection %s after failed send of %s",
                    connection.id,
                    envelope.event,
                    exc_info=True,
                )
                self.registry.remove(connection)
                continue
            delivered += 1
        return delivered

    async def _publish(
        self, scope: EnvelopeScope, targets: list[int], event: str, payload: Any
    ) -> None:
        envelope = RealtimeEnvelope(scope=scope, targets=targets, event=event, data=payload)
        try:
            await self.backplane.publish(envelope)
        except Exception:
            logger.exception("Failed to publish realtime event %s", event)


def _unique_ids(user_ids: Iterable[int | None]) -> list[int]:
    seen: set[int] = set()
    ordered: list[int] = []
    for user_id in user_ids:
        if not user_id or user_id in seen:
            continue
        seen.add(user_id)
        ordered.append(user_id)
    return ordered


def build_gateway() -> NotificationGateway:
    """Create the process gateway using Redis when ``REDIS_URL`` is set."""

    settings = get_settings()
    if settings.redis_url:
        return NotificationGateway(backplane=RedisBackplane(settings.redis_url))
    return NotificationGateway()


notification_gateway = build_gateway()


__all__ = ["NotificationGateway", "build_gateway", "notification_gateway"]
