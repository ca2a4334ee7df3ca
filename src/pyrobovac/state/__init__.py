"""State/store layer.

This package is the single source of truth for how fetched snapshots and
local edits are merged into a deterministic map state.
"""
