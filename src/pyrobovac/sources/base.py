"""Structural snapshot source interface."""

from __future__ import annotations

from typing import Protocol

from pyrobovac.models.snapshot import Snapshot


class SnapshotSource(Protocol):
    """Anything that can asynchronously produce a :class:`Snapshot`.

    Implementations may raise; the scan coordinator absorbs the failure
    and keeps the last-known map.
    """

    async def fetch_snapshot(self) -> Snapshot:
        ...
