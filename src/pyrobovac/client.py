"""High-level async client for the robot map service."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pyrobovac._transport import RestTransport
from pyrobovac.config import RobovacConfig
from pyrobovac.exceptions import RobovacError
from pyrobovac.models.snapshot import Snapshot
from pyrobovac.sources.base import SnapshotSource
from pyrobovac.sources.mock import MockSnapshotSource
from pyrobovac.sources.rest import RestSnapshotSource
from pyrobovac.state.store import MapStore

_logger = logging.getLogger(__name__)


class RobovacClient:
    """Async client that hands out map stores bound to a snapshot source.

    Usage::

        async with RobovacClient(RobovacConfig.from_env()) as client:
            store = client.open_map()
            result = await store.scan()
    """

    def __init__(
        self,
        config: RobovacConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        source: SnapshotSource | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._override_source = source
        self._source: SnapshotSource | None = None

    @property
    def config(self) -> RobovacConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RobovacClient:
        if self._override_source is not None:
            self._source = self._override_source
        elif self._config.use_mock:
            _logger.debug("Using simulated snapshot source")
            self._source = MockSnapshotSource(delay=self._config.mock_delay)
        else:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = RestTransport(self._config, self._http_session)
            self._source = RestSnapshotSource(self._config, transport)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._source = None

    # ------------------------------------------------------------------
    # Map access
    # ------------------------------------------------------------------

    def _require_source(self) -> SnapshotSource:
        if self._source is None:
            raise RobovacError("Client not initialized. Use 'async with RobovacClient(...) as client:'")
        return self._source

    async def fetch_snapshot(self) -> Snapshot:
        """Fetch one snapshot without touching any map store."""
        return await self._require_source().fetch_snapshot()

    def open_map(self) -> MapStore:
        """Create a fresh map store for a new map session."""
        return MapStore(
            self._require_source(),
            rect_tolerance=self._config.rect_tolerance,
            scan_timeout=self._config.scan_timeout,
            stale_after=self._config.stale_after,
        )
