"""Custom exception hierarchy for pyrobovac."""

from __future__ import annotations


class RobovacError(Exception):
    """Base exception for all pyrobovac errors."""


class RobovacConfigError(RobovacError):
    """Invalid or missing configuration."""


class RobovacFetchError(RobovacError):
    """A snapshot could not be fetched.

    This is the only failure category that reaches the view layer; the
    store keeps its last-known state and reports the message once.
    """


class RobovacTransportError(RobovacFetchError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class RobovacTimeoutError(RobovacFetchError):
    """The snapshot source did not answer in time."""


class RobovacApiError(RobovacFetchError):
    """The status service returned an error body."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class RobovacAuthenticationError(RobovacApiError):
    """No authenticated user, or the service rejected the credentials."""
