"""Map store: the single source of truth for one map session.

The store owns the map state, the edit journal, the selection and the scan
lifecycle. The view layer reads immutable snapshots (``state``,
``selection``, ``view``) and mutates only through commands.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from pyrobovac._constants import LOCAL_ZONE_PREFIX
from pyrobovac.exceptions import RobovacError
from pyrobovac.models.export import MapExport
from pyrobovac.models.map_state import MapState, Selection
from pyrobovac.models.snapshot import Snapshot
from pyrobovac.models.zone import Zone, ZoneSpec
from pyrobovac.sources.base import SnapshotSource
from pyrobovac.state.coordinator import ScanCoordinator
from pyrobovac.state.events import ScanResult, ScanState
from pyrobovac.state.journal import EditJournal
from pyrobovac.state.reconciler import merge_snapshot
from pyrobovac.state.selection import SelectionController
from pyrobovac.state.view import MapView, derive

_logger = logging.getLogger(__name__)

Listener = Callable[[MapState, Selection], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _local_zone_id() -> str:
    return f"{LOCAL_ZONE_PREFIX}{secrets.token_hex(4)}"


class MapStore:
    """Owned store for one map session.

    Create one when the map screen opens and :meth:`close` it when the
    screen goes away; nothing is persisted.
    """

    def __init__(
        self,
        source: SnapshotSource,
        *,
        rect_tolerance: float = 1.0,
        scan_timeout: float | None = None,
        stale_after: float = 300.0,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _local_zone_id,
    ) -> None:
        self._clock = clock
        self._stale_after = stale_after
        self._id_factory = id_factory
        self._state = MapState()
        self._journal = EditJournal(rect_tolerance=rect_tolerance)
        self._selection = SelectionController(self._state)
        self._coordinator = ScanCoordinator(
            source,
            self._apply_snapshot,
            timeout=scan_timeout,
            on_busy_changed=lambda _busy: self._notify(),
        )
        self._listeners: list[Listener] = []
        self._closed = False

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------

    @property
    def state(self) -> MapState:
        return self._state

    @property
    def selection(self) -> Selection:
        return self._selection.selection

    @property
    def selected_zone(self) -> Zone | None:
        selected = self._selection.selected_zone_id
        return self._state.get_zone(selected) if selected is not None else None

    @property
    def view(self) -> MapView:
        return derive(self._state)

    @property
    def journal(self) -> EditJournal:
        return self._journal

    @property
    def scan_state(self) -> ScanState:
        return self._coordinator.state

    @property
    def busy(self) -> bool:
        return self._coordinator.busy

    @property
    def loading_message(self) -> str:
        return self._coordinator.message

    @property
    def last_result(self) -> ScanResult | None:
        return self._coordinator.last_result

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _notify(self) -> None:
        state = self._state
        selection = self._selection.selection
        for listener in list(self._listeners):
            try:
                listener(state, selection)
            except Exception:
                _logger.debug("Map store listener failed", exc_info=True)

    def _set_state(self, state: MapState) -> None:
        self._state = state
        self._selection.on_state_changed(state)
        self._notify()

    def _ensure_open(self) -> None:
        if self._closed:
            raise RobovacError("Map store is closed")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def scan(self) -> ScanResult:
        """Fetch a snapshot and reconcile it into the map."""
        self._ensure_open()
        return await self._coordinator.scan()

    def _apply_snapshot(self, snapshot: Snapshot) -> bool:
        if self._closed:
            _logger.debug("Discarding snapshot for closed map store")
            return False
        # Read journal and state now, not at scan start: edits made while the
        # fetch was in flight must take part in this merge.
        result = merge_snapshot(self._state, snapshot, self._journal)
        if result.reported_ids is not None:
            self._journal.clear_on_confirmed_snapshot(result.reported_ids, confirmed=result.confirmed)
        selected = self._selection.selected_zone_id
        if selected is not None and selected in result.confirmed:
            # A confirmed local zone keeps its selection under the remote id.
            self._selection.remap(selected, result.confirmed[selected])
        self._set_state(result.state)
        return True

    def delete_zone(self, zone_id: str) -> bool:
        """Remove *zone_id* from the map.

        Returns ``False`` (and changes nothing) when the zone is not on the
        map, so repeated deletes are harmless.
        """
        self._ensure_open()
        if not self._state.has_zone(zone_id):
            _logger.debug("Delete of unknown zone %s ignored", zone_id)
            return False
        self._journal.record_delete(zone_id)
        self._set_state(
            self._state.evolve(
                zones=tuple(zone for zone in self._state.zones if zone.id != zone_id),
                pending_deletes=self._journal.deleted,
            )
        )
        return True

    def add_zone(self, spec: ZoneSpec | Mapping[str, Any]) -> Zone:
        """Add a zone drawn on this device; it stays pending until a snapshot confirms it."""
        self._ensure_open()
        zone_spec = spec if isinstance(spec, ZoneSpec) else ZoneSpec.model_validate(dict(spec))
        zone_id = self._id_factory()
        while self._state.has_zone(zone_id):
            zone_id = self._id_factory()
        zone = self._journal.record_add(
            Zone(id=zone_id, name=zone_spec.name, color=zone_spec.color, rect=zone_spec.rect, pending=True)
        )
        self._set_state(
            self._state.evolve(zones=(*self._state.zones, zone), pending_deletes=self._journal.deleted)
        )
        return zone

    def select_zone(self, zone_id: str) -> bool:
        self._ensure_open()
        changed = self._selection.select(zone_id)
        if changed:
            self._notify()
        return changed

    def toggle_zone(self, zone_id: str) -> bool:
        """Select *zone_id*, or deselect it when tapped again."""
        self._ensure_open()
        changed = self._selection.toggle(zone_id)
        if changed:
            self._notify()
        return changed

    def clear_selection(self) -> bool:
        self._ensure_open()
        changed = self._selection.clear()
        if changed:
            self._notify()
        return changed

    def export_map(self) -> MapExport:
        """Export the current map statistics and zones."""
        self._ensure_open()
        state = self._state
        return MapExport(
            mapped_area_m2=state.mapped_area_m2,
            zone_count=len(state.zones),
            obstacle_count=state.obstacle_count,
            zones=state.zones,
            last_updated=state.last_updated,
            exported_at=self._clock(),
        )

    def is_stale(self, threshold: float | None = None) -> bool:
        """Whether the map data is older than *threshold* seconds.

        Defaults to the store's ``stale_after`` setting.
        """
        limit = self._stale_after if threshold is None else threshold
        return self.view.stale_after(limit, now=self._clock())

    def close(self) -> None:
        """End the map session; further commands raise :class:`RobovacError`."""
        self._closed = True
        self._listeners.clear()
