"""Session registry tracking live notification websockets."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, DefaultDict, Protocol, Set
from uuid import uuid4

from app.domain.entities import tenant_room


class WebSocketLike(Protocol):
    """Subset of :class:`fastapi.WebSocket` the gateway relies on."""

    async def accept(self) -> None: ...

    async def send_json(self, data: Any) -> None: ...


class ConnectionState(str, Enum):
    """Lifecycle of a realtime connection."""

    CONNECTING = "connecting"
    AUTHENTICATED = "authenticated"
    DISCONNECTED = "disconnected"


@dataclass(eq=False)
class Connection:
    """A single live websocket bound to an authenticated user."""

    user_id: int
    tenant_id: int | None
    websocket: WebSocketLike
    id: str = field(default_factory=lambda: uuid4().hex)
    state: ConnectionState = ConnectionState.CONNECTING

    @property
    def room(self) -> str | None:
        return tenant_room(self.tenant_id)


class SessionRegistry:
    """Map users and tenant rooms to their live connections.

    Only the gateway's connect and disconnect handlers mutate the registry, and
    they all run on the same event loop. The registry is local to the process;
    cross-instance delivery goes through the backplane.
    """

    def __init__(self) -> None:
        self._by_user: DefaultDict[int, Set[Connection]] = defaultdict(set)
        self._rooms: DefaultDict[str, Set[Connection]] = defaultdict(set)

    def add(self, connection: Connection) -> None:
        """Register ``connection`` for its user and join its tenant room."""

        self._by_user[connection.user_id].add(connection)
        room = connection.room
        if room is not None:
            self._rooms[room].add(connection)
        connection.state = ConnectionState.AUTHENTICATED

    def remove(self, connection: Connection) -> None:
        """Forget ``connection``; removing twice is harmless."""

        connection.state = ConnectionState.DISCONNECTED
        _discard(self._by_user, connection.user_id, connection)
        room = connection.room
        if room is not None:
            _discard(self._rooms, room, connection)

    def connections_for_user(self, user_id: int) -> list[Connection]:
        return list(self._by_user.get(user_id, ()))

    def connections_for_tenant(self, tenant_id: int) -> list[Connection]:
        room = tenant_room(tenant_id)
        if room is None:
            return []
        return list(self._rooms.get(room, ()))

    def is_online(self, user_id: int) -> bool:
        return bool(self._by_user.get(user_id))

    def online_user_ids(self) -> set[int]:
        return set(self._by_user)

    def __len__(self) -> int:
        return sum(len(connections) for connections in self._by_user.values())


def _discard(index: dict, key: Any, connection: Connection) -> None:
    connections = index.get(key)
    if connections is None:
        return
    connections.discard(connection)
    if not connections:
        index.pop(key, None)


__all__ = ["Connection", "ConnectionState", "SessionRegistry", "WebSocketLike"]
