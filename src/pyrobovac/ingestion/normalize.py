"""Normalization helpers.

Centralizes defensive parsing and placeholder handling.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any

from pyrobovac._constants import MAP_MAX, MAP_MIN

# Placeholder strings upstream telemetry uses for "not available".
_PLACEHOLDERS = frozenset({"", "--", "NaN", "nan", "null"})


def is_placeholder(value: Any) -> bool:
    """Return True when *value* carries no information."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() in _PLACEHOLDERS:
        return True
    return isinstance(value, float) and math.isnan(value)


def strip_placeholders(values: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is a placeholder so model defaults apply."""
    return {key: value for key, value in values.items() if not is_placeholder(value)}


def safe_float(value: Any) -> float | None:
    if is_placeholder(value) or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def clamp_percent(value: float, upper: float = MAP_MAX) -> float:
    """Clamp *value* into ``[0, upper]`` percentage units."""
    return max(MAP_MIN, min(upper, value))


def normalize_timestamp_seconds(value: Any) -> float | None:
    """Normalize epoch timestamps to seconds.

    - Empty/missing -> None
    - <= 0 -> None
    - Milliseconds (> 1e11) -> seconds
    """

    ts = safe_float(value)
    if ts is None or ts <= 0:
        return None
    if ts > 1e11:
        ts /= 1000.0
    return ts


def parse_timestamp(value: Any) -> datetime | None:
    """Coerce epoch seconds/ms, ISO 8601 strings or datetimes to an aware UTC datetime."""
    if is_placeholder(value):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    seconds = normalize_timestamp_seconds(value)
    if seconds is not None:
        return datetime.fromtimestamp(seconds, tz=UTC)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    return None
