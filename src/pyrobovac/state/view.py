"""Pure derivation of renderable map aggregates."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict

from pyrobovac.models.map_state import MapState


class MapView(BaseModel):
    """Aggregates the map screen renders.

    ``zone_count`` is always ``len(state.zones)``. Staleness is evaluated
    against the wall clock on every call and never cached.
    """

    model_config = ConfigDict(frozen=True)

    mapped_area_m2: float
    obstacle_count: int
    zone_count: int
    last_updated: datetime | None

    def age(self, *, now: datetime | None = None) -> timedelta | None:
        if self.last_updated is None:
            return None
        return (now or datetime.now(UTC)) - self.last_updated

    def stale_after(self, threshold: timedelta | float, *, now: datetime | None = None) -> bool:
        """Return ``True`` when the data is older than *threshold* (seconds or timedelta).

        A map that was never updated counts as stale.
        """
        age = self.age(now=now)
        if age is None:
            return True
        limit = threshold if isinstance(threshold, timedelta) else timedelta(seconds=threshold)
        return age > limit


def derive(state: MapState) -> MapView:
    return MapView(
        mapped_area_m2=state.mapped_area_m2,
        obstacle_count=state.obstacle_count,
        zone_count=len(state.zones),
        last_updated=state.last_updated,
    )
