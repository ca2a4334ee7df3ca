from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pyrobovac.models.map_state import MapState
from pyrobovac.models.zone import Zone
from pyrobovac.state.view import derive

_UPDATED = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def test_derive_aggregates() -> None:
    state = MapState(zones=(Zone(id="a"), Zone(id="b")), mapped_area_m2=142.0, obstacle_count=3)
    view = derive(state)
    assert view.mapped_area_m2 == 142.0
    assert view.obstacle_count == 3
    assert view.zone_count == 2


def test_stale_after_threshold() -> None:
    view = derive(MapState(last_updated=_UPDATED))
    now = _UPDATED + timedelta(seconds=90)

    assert view.stale_after(60, now=now) is True
    assert view.stale_after(timedelta(minutes=2), now=now) is False


def test_exact_threshold_is_not_stale() -> None:
    view = derive(MapState(last_updated=_UPDATED))
    assert view.stale_after(30, now=_UPDATED + timedelta(seconds=30)) is False


def test_never_updated_map_is_stale() -> None:
    view = derive(MapState())
    assert view.age() is None
    assert view.stale_after(3600) is True


def test_stale_uses_wall_clock_by_default() -> None:
    view = derive(MapState(last_updated=datetime.now(UTC)))
    assert view.stale_after(3600) is False
