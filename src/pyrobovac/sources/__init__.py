"""Snapshot sources: the boundary between the map store and telemetry."""

from pyrobovac.sources.base import SnapshotSource
from pyrobovac.sources.mock import MockSnapshotSource
from pyrobovac.sources.rest import RestSnapshotSource

__all__ = ["MockSnapshotSource", "RestSnapshotSource", "SnapshotSource"]
