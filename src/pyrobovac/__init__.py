"""pyrobovac - Async map state layer for a robotic vacuum companion app."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyrobovac")
except PackageNotFoundError:
    __version__ = "0+local"
from pyrobovac.client import RobovacClient
from pyrobovac.config import RobovacConfig
from pyrobovac.exceptions import (
    RobovacApiError,
    RobovacAuthenticationError,
    RobovacConfigError,
    RobovacError,
    RobovacFetchError,
    RobovacTimeoutError,
    RobovacTransportError,
)
from pyrobovac.models import (
    CleanedRegion,
    MapExport,
    MapState,
    Rect,
    RobotPose,
    Selection,
    Snapshot,
    Zone,
    ZoneSpec,
)
from pyrobovac.sources import MockSnapshotSource, RestSnapshotSource, SnapshotSource
from pyrobovac.state.coordinator import ScanCoordinator
from pyrobovac.state.events import ScanOutcome, ScanResult, ScanState
from pyrobovac.state.journal import EditJournal
from pyrobovac.state.reconciler import MergeResult, merge_snapshot, reconcile
from pyrobovac.state.selection import SelectionController
from pyrobovac.state.store import MapStore
from pyrobovac.state.view import MapView, derive

__all__ = [
    "__version__",
    "CleanedRegion",
    "EditJournal",
    "MapExport",
    "MapState",
    "MapStore",
    "MapView",
    "MergeResult",
    "MockSnapshotSource",
    "Rect",
    "RestSnapshotSource",
    "RobotPose",
    "RobovacApiError",
    "RobovacAuthenticationError",
    "RobovacClient",
    "RobovacConfig",
    "RobovacConfigError",
    "RobovacError",
    "RobovacFetchError",
    "RobovacTimeoutError",
    "RobovacTransportError",
    "ScanCoordinator",
    "ScanOutcome",
    "ScanResult",
    "ScanState",
    "Selection",
    "SelectionController",
    "Snapshot",
    "SnapshotSource",
    "Zone",
    "ZoneSpec",
    "derive",
    "merge_snapshot",
    "reconcile",
]
