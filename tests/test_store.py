"""Behavioural tests for the map store command surface."""

from __future__ import annotations

import asyncio
import itertools
from datetime import UTC, datetime, timedelta

import pytest

from pyrobovac.exceptions import RobovacError, RobovacTransportError
from pyrobovac.models.map_state import MapState, Selection
from pyrobovac.models.snapshot import Snapshot
from pyrobovac.models.zone import Rect, Zone, ZoneSpec
from pyrobovac.state.events import ScanOutcome
from pyrobovac.state.store import MapStore

_NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


class _ScriptedSource:
    """Returns queued snapshots in order; the last one repeats."""

    def __init__(self, *snapshots: Snapshot) -> None:
        self.snapshots = list(snapshots)
        self.gate: asyncio.Event | None = None
        self.error: Exception | None = None
        self.calls = 0

    async def fetch_snapshot(self) -> Snapshot:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if len(self.snapshots) > 1:
            return self.snapshots.pop(0)
        return self.snapshots[0]


def _snapshot(*zone_ids: str, **kwargs: object) -> Snapshot:
    return Snapshot.model_validate({"zones": [{"id": zone_id} for zone_id in zone_ids], **kwargs})


def _store(source: _ScriptedSource) -> MapStore:
    counter = itertools.count(1)
    return MapStore(source, clock=lambda: _NOW, id_factory=lambda: f"local-{next(counter)}")


# ------------------------------------------------------------------
# Scenarios
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_selection_cleared_when_zone_disappears_upstream() -> None:
    store = _store(_ScriptedSource(_snapshot("z1"), _snapshot()))
    await store.scan()
    assert store.select_zone("z1")
    assert store.selection == Selection(selected_zone_id="z1")

    await store.scan()

    assert store.selection.selected_zone_id is None
    assert store.state.zones == ()


@pytest.mark.asyncio
async def test_deleted_zone_stays_deleted_after_stale_refresh() -> None:
    store = _store(_ScriptedSource(_snapshot("z1", "z2")))
    await store.scan()

    store.delete_zone("z1")
    await store.scan()

    assert store.state.zone_ids == ("z2",)
    assert store.journal.deleted == frozenset({"z1"})


@pytest.mark.asyncio
async def test_delete_veto_pruned_once_remote_catches_up() -> None:
    store = _store(_ScriptedSource(_snapshot("z1", "z2"), _snapshot("z1", "z2"), _snapshot("z2")))
    await store.scan()
    store.delete_zone("z1")
    await store.scan()

    await store.scan()

    assert store.journal.deleted == frozenset()
    assert store.state.pending_deletes == frozenset()
    assert store.state.zone_ids == ("z2",)


@pytest.mark.asyncio
async def test_back_to_back_scans_mutate_state_once() -> None:
    source = _ScriptedSource(_snapshot("z1"))
    source.gate = asyncio.Event()
    store = _store(source)
    initial = store.state
    seen: list[MapState] = [initial]
    store.add_listener(lambda state, _selection: seen.append(state))

    first = asyncio.create_task(store.scan())
    await asyncio.sleep(0)
    second = await store.scan()
    source.gate.set()
    first_result = await first

    assert second.outcome == ScanOutcome.REJECTED
    assert first_result.ok
    assert source.calls == 1
    transitions = sum(1 for before, after in itertools.pairwise(seen) if before is not after)
    assert transitions == 1


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_delete_twice_equals_delete_once() -> None:
    store = _store(_ScriptedSource(_snapshot("z1", "z2")))
    await store.scan()

    assert store.delete_zone("z1") is True
    once = store.state
    assert store.delete_zone("z1") is False

    assert store.state == once


@pytest.mark.asyncio
async def test_delete_clears_selection_of_deleted_zone() -> None:
    store = _store(_ScriptedSource(_snapshot("z1", "z2")))
    await store.scan()
    store.select_zone("z1")

    store.delete_zone("z1")

    assert store.selection.selected_zone_id is None
    assert store.state.pending_deletes == frozenset({"z1"})


@pytest.mark.asyncio
async def test_selection_consistent_after_every_reconciliation() -> None:
    source = _ScriptedSource(_snapshot("a", "b"), _snapshot("b", "c"), _snapshot("c"), _snapshot())
    store = _store(source)
    await store.scan()
    store.select_zone("b")

    for _ in range(3):
        await store.scan()
        selected = store.selection.selected_zone_id
        assert selected is None or store.state.has_zone(selected)


@pytest.mark.asyncio
async def test_failed_scan_keeps_last_known_state() -> None:
    source = _ScriptedSource(_snapshot("z1", mapped_area=142))
    store = _store(source)
    await store.scan()
    before = store.state

    source.error = RobovacTransportError("Service unavailable")
    result = await store.scan()

    assert result.outcome == ScanOutcome.FAILED
    assert result.message == "Service unavailable"
    assert store.state is before
    assert store.last_result == result


@pytest.mark.asyncio
async def test_edits_during_scan_survive_its_reconciliation() -> None:
    source = _ScriptedSource(_snapshot("z1", "z2"))
    store = _store(source)
    await store.scan()

    source.gate = asyncio.Event()
    task = asyncio.create_task(store.scan())
    await asyncio.sleep(0)
    store.delete_zone("z1")
    added = store.add_zone({"name": "Desk", "x": 70, "y": 70, "width": 10, "height": 10})
    source.gate.set()
    await task

    assert store.state.zone_ids == ("z2", added.id)


def test_add_zone_is_pending_and_clamped() -> None:
    store = _store(_ScriptedSource(_snapshot()))

    zone = store.add_zone(ZoneSpec(name="Corner", rect=Rect(x=90, y=90, width=30, height=30)))

    assert zone.id == "local-1"
    assert zone.pending is True
    assert zone.rect.as_tuple() == (90.0, 90.0, 10.0, 10.0)
    assert store.state.zones == (zone,)
    assert store.view.zone_count == 1


def test_deleting_unconfirmed_local_zone_drops_it() -> None:
    store = _store(_ScriptedSource(_snapshot()))
    zone = store.add_zone({"name": "Rug"})

    store.delete_zone(zone.id)

    assert store.state.zones == ()
    assert store.journal.deleted == frozenset()
    assert store.journal.locally_added == {}


@pytest.mark.asyncio
async def test_confirmed_local_zone_keeps_selection_under_remote_id() -> None:
    remote = {"id": "zone_9", "name": "Desk", "x": 10.3, "y": 9.7, "width": 20, "height": 20}
    source = _ScriptedSource(Snapshot.model_validate({"zones": [remote]}))
    store = _store(source)
    local = store.add_zone({"name": "Desk", "x": 10, "y": 10, "width": 20, "height": 20})
    store.select_zone(local.id)

    await store.scan()

    assert store.state.zone_ids == ("zone_9",)
    assert store.selection.selected_zone_id == "zone_9"
    assert store.journal.locally_added == {}


@pytest.mark.asyncio
async def test_confirmation_keeps_selection_in_a_single_notification() -> None:
    remote = {"id": "zone_9", "name": "Desk", "x": 10.3, "y": 9.7, "width": 20, "height": 20}
    store = _store(_ScriptedSource(Snapshot.model_validate({"zones": [remote]})))
    local = store.add_zone({"name": "Desk", "x": 10, "y": 10, "width": 20, "height": 20})
    store.select_zone(local.id)
    seen: list[str | None] = []
    store.add_listener(lambda _state, selection: seen.append(selection.selected_zone_id))

    await store.scan()

    assert None not in seen
    assert seen[-1] == "zone_9"


@pytest.mark.asyncio
async def test_scan_finishing_after_close_is_discarded() -> None:
    source = _ScriptedSource(_snapshot("z1"))
    source.gate = asyncio.Event()
    store = _store(source)

    task = asyncio.create_task(store.scan())
    await asyncio.sleep(0)
    store.close()
    source.gate.set()
    result = await task

    assert result.outcome == ScanOutcome.DISCARDED
    assert not result.ok
    assert result.message != "Environment scanned and map updated!"
    assert store.state.zones == ()


def test_toggle_and_clear_selection() -> None:
    store = _store(_ScriptedSource(_snapshot()))
    zone = store.add_zone({"name": "Rug"})

    assert store.toggle_zone(zone.id)
    assert store.selected_zone == zone
    assert store.toggle_zone(zone.id)
    assert store.selection.selected_zone_id is None
    assert store.select_zone("missing") is False
    assert store.clear_selection() is False


def test_listeners_notified_and_unsubscribed() -> None:
    store = _store(_ScriptedSource(_snapshot()))
    calls: list[tuple[MapState, Selection]] = []
    unsubscribe = store.add_listener(lambda state, selection: calls.append((state, selection)))

    store.add_zone({"name": "Rug"})
    unsubscribe()
    store.add_zone({"name": "Mat"})

    assert len(calls) == 1
    assert calls[0][0].zone_count == 1


def test_failing_listener_does_not_break_store() -> None:
    store = _store(_ScriptedSource(_snapshot()))

    def _boom(_state: MapState, _selection: Selection) -> None:
        raise RuntimeError("listener bug")

    store.add_listener(_boom)
    zone = store.add_zone({"name": "Rug"})

    assert store.state.zones == (zone,)


@pytest.mark.asyncio
async def test_export_map_summary() -> None:
    store = _store(_ScriptedSource(_snapshot("a", "b", mapped_area=142, obstacles=3)))
    await store.scan()

    export = store.export_map()

    assert export.zone_count == 2
    assert export.exported_at == _NOW
    assert export.summary == "Mapped Area: 142m²\nDetected Zones: 2\nObstacles: 3"


@pytest.mark.asyncio
async def test_is_stale_uses_store_clock() -> None:
    stamp = (_NOW - timedelta(minutes=10)).isoformat()
    store = _store(_ScriptedSource(_snapshot("a", last_updated=stamp)))
    await store.scan()

    assert store.is_stale(300) is True
    assert store.is_stale(900) is False


@pytest.mark.asyncio
async def test_is_stale_defaults_to_store_threshold() -> None:
    stamp = (_NOW - timedelta(minutes=10)).isoformat()
    source = _ScriptedSource(_snapshot("a", last_updated=stamp))
    lenient = MapStore(source, stale_after=900.0, clock=lambda: _NOW)
    strict = MapStore(source, stale_after=300.0, clock=lambda: _NOW)
    await lenient.scan()
    await strict.scan()

    assert lenient.is_stale() is False
    assert strict.is_stale() is True


@pytest.mark.asyncio
async def test_closed_store_rejects_commands() -> None:
    store = _store(_ScriptedSource(_snapshot()))
    store.close()

    assert store.closed
    with pytest.raises(RobovacError):
        await store.scan()
    with pytest.raises(RobovacError):
        store.delete_zone("z1")


def test_zone_lookup_helpers() -> None:
    store = _store(_ScriptedSource(_snapshot()))
    zone = store.add_zone({"name": "Rug"})
    assert store.state.get_zone(zone.id) == zone
    assert isinstance(store.state.zones[0], Zone)
