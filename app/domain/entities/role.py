"""Domain enumeration of the roles a user can hold inside a tenant."""

from enum import Enum


class Role(str, Enum):
    """Roles gating reads and writes across the intranet."""

    ADMIN = "admin"
    MANAGER = "manager"
    VIEWER = "viewer"

    @classmethod
    def parse(cls, value: "str | Role | None") -> "Role | None":
        """Return the matching role for ``value`` ignoring case, or ``None``."""

        if value is None:
            return None
        if isinstance(value, Role):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


__all__ = ["Role"]
