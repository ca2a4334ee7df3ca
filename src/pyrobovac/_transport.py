"""HTTP transport for the PostgREST-style status service."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyrobovac._constants import USER_AGENT
from pyrobovac._redact import redact_for_log, redact_headers, redact_params
from pyrobovac.config import RobovacConfig
from pyrobovac.exceptions import (
    RobovacApiError,
    RobovacAuthenticationError,
    RobovacConfigError,
    RobovacTimeoutError,
    RobovacTransportError,
)

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by snapshot sources.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`RestTransport`) concrete.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, str] | None = None) -> Any:
        ...


def _error_from_body(endpoint: str, status: int, body: Any, text: str) -> Exception:
    code = ""
    message = f"HTTP {status} from {endpoint}: {text[:200]}"
    if isinstance(body, dict):
        code = str(body.get("code") or "")
        detail = body.get("message") or body.get("error_description") or body.get("error")
        if detail:
            message = str(detail)
    if status in (401, 403):
        return RobovacAuthenticationError(message, code=code, endpoint=endpoint)
    if code or isinstance(body, dict):
        return RobovacApiError(message, code=code, endpoint=endpoint)
    return RobovacTransportError(message, status_code=status, endpoint=endpoint)


class RestTransport:
    """Authenticated JSON GETs against the status service."""

    def __init__(self, config: RobovacConfig, http_session: aiohttp.ClientSession) -> None:
        if not config.base_url:
            raise RobovacConfigError("base_url is required for the REST transport")
        self._config = config
        self._http = http_session
        self._base_url = config.base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if self._config.api_key:
            headers["apikey"] = self._config.api_key
        token = self._config.access_token or self._config.api_key
        if token:
            headers["authorization"] = f"Bearer {token}"
        return headers

    async def get_json(self, endpoint: str, params: Mapping[str, str] | None = None) -> Any:
        url = f"{self._base_url}{endpoint}"
        headers = self._headers()
        _logger.debug("GET %s params=%s headers=%s", url, redact_params(params or {}), redact_headers(headers))

        try:
            async with self._http.get(
                url,
                params=dict(params or {}),
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self._config.request_timeout),
            ) as resp:
                status = resp.status
                text = await resp.text()
        except TimeoutError as exc:
            raise RobovacTimeoutError(f"Request to {endpoint} timed out") from exc
        except aiohttp.ClientError as exc:
            raise RobovacTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body: Any = json.loads(text) if text.strip() else None
        except json.JSONDecodeError as exc:
            if status >= 400:
                raise _error_from_body(endpoint, status, None, text) from exc
            raise RobovacTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

        if status >= 400:
            raise _error_from_body(endpoint, status, body, text)

        _logger.debug("Response from %s: %s", endpoint, redact_for_log(body))
        return body
