"""Custom exceptions raised by the GoTrue client."""

from __future__ import annotations

from typing import Any, Optional


class GoTrueError(Exception):
    """Base exception for all client specific failures."""


class ConfigurationError(GoTrueError):
    """Raised when the client cannot be configured (e.g. no base URL)."""


class TransportError(GoTrueError):
    """Raised when a request fails on the network or returns a non-2xx status.

    ``status_code`` is ``None`` when no response was received at all.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, response: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response

    def __str__(self) -> str:  # pragma: no cover - repr helper
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


class NotAuthenticatedError(GoTrueError):
    """Raised when an operation needs a current session and there is none."""


class MissingRefreshTokenError(GoTrueError):
    """Raised when the current session carries no refresh token."""


class InternalError(GoTrueError):
    """Raised when a successful response cannot be turned into the expected result."""
