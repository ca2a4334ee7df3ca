"""Internal constants shared across the library."""

USER_AGENT = "pyrobovac/0.1"
DEFAULT_STATUS_TABLE = "robot_status"

#: PostgREST code for "no rows returned" on single-row queries; not an error.
NO_ROWS_CODE = "PGRST116"

SCANNING_MESSAGE = "Scanning environment..."
SCAN_SUCCESS_MESSAGE = "Environment scanned and map updated!"
SCAN_FAILURE_MESSAGE = "Failed to scan environment."
SCAN_REJECTED_MESSAGE = "A scan is already in progress."
SCAN_DISCARDED_MESSAGE = "Map closed before the scan finished."

DEFAULT_ZONE_COLOR = "#3B82F6"

#: Map bounds in percentage units.
MAP_MIN = 0.0
MAP_MAX = 100.0

LOCAL_ZONE_PREFIX = "local-"
