"""Scan lifecycle around snapshot source calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from pyrobovac._constants import (
    SCAN_DISCARDED_MESSAGE,
    SCAN_FAILURE_MESSAGE,
    SCAN_REJECTED_MESSAGE,
    SCAN_SUCCESS_MESSAGE,
    SCANNING_MESSAGE,
)
from pyrobovac.exceptions import RobovacTimeoutError
from pyrobovac.models.snapshot import Snapshot
from pyrobovac.sources.base import SnapshotSource
from pyrobovac.state.events import ScanOutcome, ScanResult, ScanState

_logger = logging.getLogger(__name__)


class ScanCoordinator:
    """Runs at most one snapshot fetch at a time.

    ``scan()`` while a scan is in flight is rejected, not queued. On success
    the snapshot is handed to ``on_snapshot`` (the reconciliation step),
    which may return ``False`` to report that it discarded the snapshot; on
    failure nothing is applied and the failure is reported once through the
    returned :class:`ScanResult`.
    """

    def __init__(
        self,
        source: SnapshotSource,
        on_snapshot: Callable[[Snapshot], bool | None],
        *,
        timeout: float | None = None,
        on_busy_changed: Callable[[bool], None] | None = None,
    ) -> None:
        self._source = source
        self._on_snapshot = on_snapshot
        self._timeout = timeout
        self._on_busy_changed = on_busy_changed
        self._state = ScanState.IDLE
        self._message = ""
        self._last_result: ScanResult | None = None

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state == ScanState.SCANNING

    @property
    def message(self) -> str:
        return self._message

    @property
    def last_result(self) -> ScanResult | None:
        return self._last_result

    def _set_state(self, state: ScanState, message: str) -> None:
        self._state = state
        self._message = message
        if self._on_busy_changed is not None:
            self._on_busy_changed(self.busy)

    async def _fetch(self) -> Snapshot:
        if self._timeout is None:
            return await self._source.fetch_snapshot()
        try:
            async with asyncio.timeout(self._timeout):
                return await self._source.fetch_snapshot()
        except TimeoutError as exc:
            raise RobovacTimeoutError(f"Scan timed out after {self._timeout:g}s") from exc

    async def scan(self) -> ScanResult:
        if self._state == ScanState.SCANNING:
            _logger.debug("Scan rejected: another scan is in flight")
            return ScanResult(outcome=ScanOutcome.REJECTED, message=SCAN_REJECTED_MESSAGE)

        self._set_state(ScanState.SCANNING, SCANNING_MESSAGE)
        try:
            try:
                snapshot = await self._fetch()
            except Exception as exc:
                _logger.debug("Snapshot fetch failed", exc_info=True)
                result = ScanResult(outcome=ScanOutcome.FAILED, message=str(exc) or SCAN_FAILURE_MESSAGE)
            else:
                if self._on_snapshot(snapshot) is False:
                    result = ScanResult(outcome=ScanOutcome.DISCARDED, message=SCAN_DISCARDED_MESSAGE)
                else:
                    result = ScanResult(outcome=ScanOutcome.SUCCEEDED, message=SCAN_SUCCESS_MESSAGE)
        finally:
            self._set_state(ScanState.IDLE, "")

        self._last_result = result
        _logger.debug("Scan finished: %s", result.outcome)
        return result
