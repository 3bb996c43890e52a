"""Authenticated caller identity derived from a bearer credential."""

from __future__ import annotations

from dataclasses import dataclass

from .role import Role


@dataclass(frozen=True)
class Identity:
    """Who is calling, as asserted by a verified access token."""

    user_id: int
    tenant_id: int | None
    role: Role | None

    def has_role(self, *roles: Role) -> bool:
        return self.role is not None and self.role in roles

    @property
    def room(self) -> str | None:
        """Name of the realtime room shared by the caller's tenant."""

        return tenant_room(self.tenant_id)


def tenant_room(tenant_id: int | None) -> str | None:
    """Return the room name for ``tenant_id``, or ``None`` without a tenant."""

    if tenant_id is None:
        return None
    return f"tenant_{tenant_id}"


__all__ = ["Identity", "tenant_room"]
