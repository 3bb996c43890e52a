"""Audience selectors used when fanning out notifications inside a tenant."""

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .role import Role


class Audience(str, Enum):
    """Which users of a tenant receive a fanned-out notification."""

    ALL_IN_TENANT = "all_in_tenant"
    MANAGERS_ONLY = "managers_only"
    VIEWERS_ONLY = "viewers_only"


# Role filter applied to the directory lookup; ``None`` means every role.
AUDIENCE_ROLES: Mapping[Audience, Role | None] = MappingProxyType(
    {
        Audience.ALL_IN_TENANT: None,
        Audience.MANAGERS_ONLY: Role.MANAGER,
        Audience.VIEWERS_ONLY: Role.VIEWER,
    }
)


__all__ = ["AUDIENCE_ROLES", "Audience"]
