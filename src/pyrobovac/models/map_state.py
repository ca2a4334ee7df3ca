"""Root map aggregate and selection models."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyrobovac.models.zone import CleanedRegion, RobotPose, Zone

_logger = logging.getLogger(__name__)


class MapState(BaseModel):
    """Immutable view of the environment map.

    Invariants: ``zones`` holds no duplicate ids, and right after a
    reconciliation no id in ``pending_deletes`` appears in ``zones``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    zones: tuple[Zone, ...] = ()
    cleaned_regions: tuple[CleanedRegion, ...] = ()
    pose: RobotPose = Field(default_factory=RobotPose)
    mapped_area_m2: float = 0.0
    obstacle_count: int = 0
    last_updated: datetime | None = None
    pending_deletes: frozenset[str] = frozenset()

    @field_validator("zones")
    @classmethod
    def _drop_duplicate_ids(cls, value: tuple[Zone, ...]) -> tuple[Zone, ...]:
        seen: set[str] = set()
        unique: list[Zone] = []
        for zone in value:
            if zone.id in seen:
                _logger.debug("Dropping duplicate zone id %s", zone.id)
                continue
            seen.add(zone.id)
            unique.append(zone)
        return tuple(unique)

    @property
    def zone_count(self) -> int:
        return len(self.zones)

    @property
    def zone_ids(self) -> tuple[str, ...]:
        return tuple(zone.id for zone in self.zones)

    def has_zone(self, zone_id: str) -> bool:
        return any(zone.id == zone_id for zone in self.zones)

    def get_zone(self, zone_id: str) -> Zone | None:
        for zone in self.zones:
            if zone.id == zone_id:
                return zone
        return None

    def evolve(self, **changes: Any) -> MapState:
        """Return a validated copy with *changes* applied."""
        return MapState.model_validate({**self._fields(), **changes})

    def _fields(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in type(self).model_fields}


class Selection(BaseModel):
    """At most one active zone."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    selected_zone_id: str | None = None
