"""Application error types."""

from __future__ import annotations

from app.core.constants import MSG_AUTH_REQUIRED


class AppError(Exception):
    """Error carrying a client-safe message and an HTTP status code."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AuthenticationRequired(AppError):
    """Missing, malformed, invalid or expired bearer credential."""

    status_code = 401

    def __init__(self, message: str = MSG_AUTH_REQUIRED) -> None:
        super().__init__(message)


class ConfigurationError(RuntimeError):
    """Fatal misconfiguration detected at startup."""
