"""Deterministic snapshot reconciliation.

Policy: the snapshot wins for the fields it supplies, the journal wins for
identity. Telemetry scalars (pose, area, obstacles, cleaned regions,
timestamp) are replaced wholesale; absent fields keep the current value.

This module has no clock, no randomness and no side effects. Journal
bookkeeping implied by a merge is returned in :class:`MergeResult` and
applied by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pyrobovac.models.map_state import MapState
from pyrobovac.models.snapshot import Snapshot
from pyrobovac.models.zone import Zone
from pyrobovac.state.journal import EditJournal

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Merged state plus the journal updates it implies.

    ``reported_ids`` is ``None`` when the snapshot carried no zone list;
    in that case nothing may be pruned from the journal.
    """

    state: MapState
    reported_ids: frozenset[str] | None = None
    confirmed: dict[str, str] = field(default_factory=dict)


def _merge_zones(
    incoming_zones: tuple[Zone, ...],
    journal: EditJournal,
) -> tuple[tuple[Zone, ...], frozenset[str], dict[str, str]]:
    deleted = journal.deleted
    seen: set[str] = set()
    confirmed: dict[str, str] = {}
    merged: list[Zone] = []

    for zone in incoming_zones:
        if zone.id in seen:
            continue
        seen.add(zone.id)
        if zone.id in deleted:
            continue
        local_id = journal.match_pending(zone, exclude=confirmed)
        if local_id is not None:
            confirmed[local_id] = zone.id
        merged.append(zone.model_copy(update={"pending": False}) if zone.pending else zone)

    # Unconfirmed local adds survive in their original order.
    for local_id, zone in journal.locally_added.items():
        if local_id in confirmed or local_id in seen or local_id in deleted:
            continue
        merged.append(zone)

    return tuple(merged), frozenset(seen), confirmed


def merge_snapshot(current: MapState, incoming: Snapshot, journal: EditJournal) -> MergeResult:
    """Merge *incoming* into *current* under *journal* constraints."""
    deleted = journal.deleted
    timestamp = incoming.effective_timestamp

    if incoming.zones is None:
        zones = tuple(zone for zone in current.zones if zone.id not in deleted)
        reported_ids: frozenset[str] | None = None
        confirmed: dict[str, str] = {}
        pending_deletes = deleted
    else:
        zones, reported_ids, confirmed = _merge_zones(incoming.zones, journal)
        # Mirrors the journal after pruning: only vetoes the remote still reports.
        pending_deletes = deleted & reported_ids

    state = MapState(
        zones=zones,
        cleaned_regions=(
            incoming.cleaned_regions if incoming.cleaned_regions is not None else current.cleaned_regions
        ),
        pose=incoming.pose if incoming.pose is not None else current.pose,
        mapped_area_m2=incoming.mapped_area_m2 if incoming.mapped_area_m2 is not None else current.mapped_area_m2,
        obstacle_count=incoming.obstacle_count if incoming.obstacle_count is not None else current.obstacle_count,
        last_updated=timestamp if timestamp is not None else current.last_updated,
        pending_deletes=pending_deletes,
    )
    _logger.debug(
        "Merged snapshot: %d zones (%d vetoed, %d confirmed)",
        state.zone_count,
        len(deleted & (reported_ids or frozenset())),
        len(confirmed),
    )
    return MergeResult(state=state, reported_ids=reported_ids, confirmed=confirmed)


def reconcile(current: MapState, incoming: Snapshot, journal: EditJournal) -> MapState:
    """Return the map state after applying *incoming*; see :func:`merge_snapshot`."""
    return merge_snapshot(current, incoming, journal).state
