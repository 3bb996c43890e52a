"""Helpers to broadcast realtime events from synchronous request code."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Awaitable, Callable, Iterable, Set

from anyio import from_thread

from .gateway import NotificationGateway, notification_gateway

logger = logging.getLogger(__name__)

DOCUMENT_UPLOADED = "document_uploaded"
ANNOUNCEMENT_POSTED = "announcement_posted"
TICKET_CREATED = "ticket_created"
TICKET_UPDATED = "ticket_updated"
RESTAURANT_JOINED = "restaurant_joined"


class RealtimeEventPublisher:
    """Schedule gateway emits without blocking the caller on delivery."""

    def __init__(self, gateway: NotificationGateway) -> None:
        self._gateway = gateway
        self._pending: Set[asyncio.Task] = set()

    def to_user(self, user_id: int | None, event: str, payload: Any) -> None:
        if not user_id:
            return
        self._schedule(self._gateway.emit_to_user, user_id, event, copy.deepcopy(payload))

    def to_users(self, user_ids: Iterable[int], event: str, payload: Any) -> None:
        ids = [user_id for user_id in user_ids if user_id]
        if not ids:
            return
        self._schedule(self._gateway.emit_to_users, ids, event, copy.deepcopy(payload))

    def to_tenant(self, tenant_id: int | None, event: str, payload: Any) -> None:
        if tenant_id is None:
            return
        self._schedule(self._gateway.emit_to_tenant, tenant_id, event, copy.deepcopy(payload))

    def document_uploaded(self, tenant_id: int, data: dict[str, Any]) -> None:
        self.to_tenant(tenant_id, DOCUMENT_UPLOADED, data)

    def announcement_posted(self, tenant_id: int, data: dict[str, Any]) -> None:
        self.to_tenant(tenant_id, ANNOUNCEMENT_POSTED, data)

    def ticket_created(self, manager_ids: Iterable[int], data: dict[str, Any]) -> None:
        self.to_users(manager_ids, TICKET_CREATED, data)

    def ticket_updated(self, user_id: int, data: dict[str, Any]) -> None:
        self.to_user(user_id, TICKET_UPDATED, data)

    def restaurant_joined(self, tenant_id: int, data: dict[str, Any]) -> None:
        self.to_tenant(tenant_id, RESTAURANT_JOINED, data)

    def _schedule(self, emit: Callable[..., Awaitable[None]], *args: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(emit, *args)
            except RuntimeError:
                # Neither on the loop nor in one of its worker threads.
                logger.debug("No event loop available; realtime event %s dropped", args[1])
            return

        task = loop.create_task(emit(*args))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


realtime_event_publisher = RealtimeEventPublisher(notification_gateway)


__all__ = [
    "ANNOUNCEMENT_POSTED",
    "DOCUMENT_UPLOADED",
    "RESTAURANT_JOINED",
    "RealtimeEventPublisher",
    "TICKET_CREATED",
    "TICKET_UPDATED",
    "realtime_event_publisher",
]
