"""Helpers for safe debug logging of status-service traffic.

Requests carry the anon API key and the user's bearer token in headers and
the user id in the PostgREST filter; response rows are plain telemetry
but may echo the user id. Everything logged by the transport goes through
one of these helpers first.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

REDACTED = "<redacted>"

_SECRET_HEADERS: frozenset[str] = frozenset({"apikey", "authorization", "cookie"})
_IDENTITY_KEYS: frozenset[str] = frozenset({"user_id", "access_token", "refresh_token"})


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return *headers* with credentials masked."""
    return {key: REDACTED if key.lower() in _SECRET_HEADERS else value for key, value in headers.items()}


def redact_params(params: Mapping[str, str]) -> dict[str, str]:
    """Mask the value of identity filters (``user_id=eq.<id>``), keeping the operator."""
    redacted: dict[str, str] = {}
    for key, value in params.items():
        if key.lower() in _IDENTITY_KEYS:
            operator, _, _ = value.partition(".")
            redacted[key] = f"{operator}.{REDACTED}" if "." in value else REDACTED
        else:
            redacted[key] = value
    return redacted


def redact_for_log(body: Any, *, max_string: int = 512) -> Any:
    """Return a copy of a decoded JSON *body* with identity fields masked.

    Long strings are truncated.
    """
    if isinstance(body, dict):
        return {
            key: REDACTED if str(key).lower() in _IDENTITY_KEYS else redact_for_log(value, max_string=max_string)
            for key, value in body.items()
        }
    if isinstance(body, list):
        return [redact_for_log(item, max_string=max_string) for item in body]
    if isinstance(body, str) and len(body) > max_string:
        return f"{body[:max_string]}…<truncated>"
    return body
