"""Domain entity representing a user from the tenant directory."""

from dataclasses import dataclass
from datetime import datetime

from .role import Role


@dataclass
class User:
    """Directory attributes the notification core reads about a user."""

    id: int
    tenant_id: int | None
    email: str
    name: str
    role: Role
    is_active: bool = True
    created_at: datetime | None = None


__all__ = ["User"]
