"""Map export summary model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from pyrobovac.models.zone import Zone


class MapExport(BaseModel):
    """Point-in-time export of the environment map."""

    model_config = ConfigDict(frozen=True)

    mapped_area_m2: float
    zone_count: int
    obstacle_count: int
    zones: tuple[Zone, ...]
    last_updated: datetime | None
    exported_at: datetime

    @property
    def summary(self) -> str:
        """Human-readable summary, one statistic per line."""
        return (
            f"Mapped Area: {self.mapped_area_m2:g}m²\n"
            f"Detected Zones: {self.zone_count}\n"
            f"Obstacles: {self.obstacle_count}"
        )
