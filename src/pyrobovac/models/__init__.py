"""Data models for map telemetry and map state."""

from pyrobovac.models._base import RobovacBaseModel
from pyrobovac.models.export import MapExport
from pyrobovac.models.map_state import MapState, Selection
from pyrobovac.models.snapshot import Snapshot
from pyrobovac.models.zone import CleanedRegion, Rect, RobotPose, Zone, ZoneSpec

__all__ = [
    "CleanedRegion",
    "MapExport",
    "MapState",
    "Rect",
    "RobotPose",
    "RobovacBaseModel",
    "Selection",
    "Snapshot",
    "Zone",
    "ZoneSpec",
]
