"""Application error types."""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base class for errors surfaced to the user.

    Carries a stable machine-readable ``code`` and optional ``details``
    so the CLI can report failures without inspecting messages.
    """

    def __init__(self, message: str, code: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigError(AppError):
    """Invalid configuration key or value."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)


class SyncError(AppError):
    """Sync could not be started (no provider, rclone missing …)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "SYNC_ERROR", details)
