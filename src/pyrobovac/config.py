"""Client configuration for pyrobovac."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyrobovac._constants import DEFAULT_STATUS_TABLE
from pyrobovac.exceptions import RobovacConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise RobovacConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class RobovacConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Base URL of the PostgREST-style status service
        (e.g. ``"https://example.supabase.co"``). Empty selects the mock source.
    api_key : str or None
        Service API key sent as the ``apikey`` header.
    access_token : str or None
        Bearer token of the signed-in user. Falls back to ``api_key``.
    user_id : str or None
        Id of the signed-in user; status rows are filtered on it.
    status_table : str
        Table holding the robot status rows.
    stale_after : float
        Seconds after which map data is flagged as possibly outdated.
    scan_timeout : float or None
        Upper bound in seconds for a single snapshot fetch. ``None``
        waits indefinitely.
    request_timeout : float
        Total HTTP timeout in seconds for REST requests.
    rect_tolerance : float
        Maximum per-edge distance in percent at which a zone reported by
        a snapshot confirms a locally added one.
    mock_enabled : bool
        Serve snapshots from the built-in simulated environment.
    mock_delay : float
        Simulated fetch latency of the mock source in seconds.
    """

    base_url: str = ""
    api_key: str | None = None
    access_token: str | None = None
    user_id: str | None = None
    status_table: str = DEFAULT_STATUS_TABLE
    stale_after: float = 300.0
    scan_timeout: float | None = None
    request_timeout: float = 10.0
    rect_tolerance: float = 1.0
    mock_enabled: bool = False
    mock_delay: float = 1.0

    @property
    def use_mock(self) -> bool:
        """Whether snapshots come from the simulated environment."""
        return self.mock_enabled or not self.base_url

    @classmethod
    def from_env(cls, **overrides: Any) -> RobovacConfig:
        """Create configuration from ``ROBOVAC_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        RobovacConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "ROBOVAC_BASE_URL": "base_url",
            "ROBOVAC_API_KEY": "api_key",
            "ROBOVAC_ACCESS_TOKEN": "access_token",
            "ROBOVAC_USER_ID": "user_id",
            "ROBOVAC_STATUS_TABLE": "status_table",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val.strip()

        _ENV_FLOAT_MAP = {
            "ROBOVAC_STALE_AFTER": "stale_after",
            "ROBOVAC_SCAN_TIMEOUT": "scan_timeout",
            "ROBOVAC_REQUEST_TIMEOUT": "request_timeout",
            "ROBOVAC_RECT_TOLERANCE": "rect_tolerance",
            "ROBOVAC_MOCK_DELAY": "mock_delay",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and val.strip() and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        if "mock_enabled" not in overrides:
            config_kwargs["mock_enabled"] = _env_bool(env.get("ROBOVAC_MOCK_ENABLED"), False)

        config_kwargs.update(overrides)

        if config_kwargs.get("rect_tolerance", 1.0) <= 0:
            raise RobovacConfigError("rect_tolerance must be positive")

        return cls(**config_kwargs)
