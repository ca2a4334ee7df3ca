"""Journal of local edits not yet confirmed or invalidated by a snapshot."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from pyrobovac.models.zone import Zone

_logger = logging.getLogger(__name__)


class EditJournal:
    """Records local deletes and adds made since the last snapshot.

    ``deleted`` holds zone ids the user removed; every reconciliation
    vetoes them until a snapshot stops reporting them. ``locally_added``
    holds pending zones created on this device, keyed by their local id,
    in insertion order.
    """

    def __init__(self, *, rect_tolerance: float = 1.0) -> None:
        if rect_tolerance <= 0:
            raise ValueError("rect_tolerance must be positive")
        self._rect_tolerance = rect_tolerance
        self._deleted: set[str] = set()
        self._added: dict[str, Zone] = {}

    @property
    def deleted(self) -> frozenset[str]:
        return frozenset(self._deleted)

    @property
    def locally_added(self) -> Mapping[str, Zone]:
        return dict(self._added)

    @property
    def rect_tolerance(self) -> float:
        return self._rect_tolerance

    def record_delete(self, zone_id: str) -> None:
        """Record that *zone_id* was removed locally.

        Idempotent. A pending local zone never reached the remote, so it is
        simply dropped instead of being vetoed.
        """
        if self._added.pop(zone_id, None) is not None:
            _logger.debug("Dropped unconfirmed local zone %s", zone_id)
            return
        self._deleted.add(zone_id)

    def record_add(self, zone: Zone) -> Zone:
        """Record a zone created on this device and return it tagged pending."""
        pending = zone if zone.pending else zone.model_copy(update={"pending": True})
        self._added[pending.id] = pending
        self._deleted.discard(pending.id)
        return pending

    def match_pending(self, remote: Zone, *, exclude: Iterable[str] = ()) -> str | None:
        """Return the local id of the pending zone *remote* confirms, if any.

        A remote zone with the same id confirms it directly; otherwise the
        first pending zone whose rect matches within the tolerance does.
        """
        if remote.id in self._added:
            return remote.id
        skipped = set(exclude)
        for local_id, local in self._added.items():
            if local_id in skipped:
                continue
            if local.rect.matches(remote.rect, self._rect_tolerance):
                return local_id
        return None

    def clear_on_confirmed_snapshot(self, ids: Iterable[str], *, confirmed: Iterable[str] = ()) -> None:
        """Prune entries settled by an applied snapshot.

        *ids* are the zone ids the snapshot reported. Deletes the remote no
        longer reports have caught up and are dropped. *confirmed* local ids
        were matched to a remote zone and leave the journal.
        """
        reported = set(ids)
        caught_up = self._deleted - reported
        if caught_up:
            _logger.debug("Remote caught up with deletes: %s", sorted(caught_up))
            self._deleted -= caught_up
        for local_id in confirmed:
            if self._added.pop(local_id, None) is not None:
                _logger.debug("Local zone %s confirmed by snapshot", local_id)
