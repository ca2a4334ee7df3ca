"""Single-zone selection that never points at a missing zone."""

from __future__ import annotations

import logging

from pyrobovac.models.map_state import MapState, Selection

_logger = logging.getLogger(__name__)


class SelectionController:
    """Tracks at most one selected zone id.

    The controller only accepts ids present in the last state it was
    notified of; selecting an unknown id is a no-op.
    """

    def __init__(self, state: MapState | None = None) -> None:
        self._zone_ids: frozenset[str] = frozenset(state.zone_ids) if state is not None else frozenset()
        self._selected: str | None = None

    @property
    def selection(self) -> Selection:
        return Selection(selected_zone_id=self._selected)

    @property
    def selected_zone_id(self) -> str | None:
        return self._selected

    def select(self, zone_id: str) -> bool:
        """Select *zone_id*; return ``False`` when the id is unknown."""
        if zone_id not in self._zone_ids:
            _logger.debug("Ignoring selection of unknown zone %s", zone_id)
            return False
        self._selected = zone_id
        return True

    def toggle(self, zone_id: str) -> bool:
        """Select *zone_id*, or clear the selection if it is already selected.

        Returns ``True`` when the selection changed.
        """
        if self._selected == zone_id:
            self._selected = None
            return True
        return self.select(zone_id)

    def clear(self) -> bool:
        changed = self._selected is not None
        self._selected = None
        return changed

    def remap(self, old_id: str, new_id: str) -> bool:
        """Carry the selection of *old_id* over to *new_id*.

        Used when a local zone is confirmed under a remote id. The next
        :meth:`on_state_changed` still validates *new_id*.
        """
        if self._selected != old_id:
            return False
        self._selected = new_id
        return True

    def on_state_changed(self, state: MapState) -> bool:
        """Track *state*'s zone ids; drop the selection if its zone vanished.

        Returns ``True`` when the selection was cleared.
        """
        self._zone_ids = frozenset(state.zone_ids)
        if self._selected is not None and self._selected not in self._zone_ids:
            _logger.debug("Selected zone %s disappeared; clearing selection", self._selected)
            self._selected = None
            return True
        return False
