"""Errors raised by the notification core."""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for failures originating in the notification core."""


class ValidationError(NotificationError, ValueError):
    """Raised when a request is malformed and nothing has been written."""


class InvalidTargetError(ValidationError):
    """Raised when a notification does not reference a concrete object."""

    def __init__(self, message: str = "target_id cannot be null or empty") -> None:
        super().__init__(message)


class AuthenticationError(NotificationError):
    """Raised when a bearer credential is missing, malformed or expired."""


class DependencyFailure(NotificationError):
    """Raised when a collaborator the core relies on is unavailable."""


class DirectoryUnavailableError(DependencyFailure):
    """Raised when the user directory cannot be queried."""


__all__ = [
    "AuthenticationError",
    "DependencyFailure",
    "DirectoryUnavailableError",
    "InvalidTargetError",
    "NotificationError",
    "ValidationError",
]
