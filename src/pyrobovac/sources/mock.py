"""Simulated snapshot source.

Serves the sample environment the companion app shows before a real
telemetry backend is connected: three zones, two cleaned regions and a
robot pose jittered around the centre of the map.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from pyrobovac.models.snapshot import Snapshot
from pyrobovac.models.zone import CleanedRegion, Rect, RobotPose, Zone

_logger = logging.getLogger(__name__)

SAMPLE_ZONES: tuple[Zone, ...] = (
    Zone(id="zone_1", name="Living Room", color="#10B981", rect=Rect(x=5, y=5, width=50, height=45)),
    Zone(id="zone_2", name="Kitchen Area", color="#F59E0B", rect=Rect(x=60, y=10, width=30, height=35)),
    Zone(id="zone_3", name="Hallway", color="#3B82F6", rect=Rect(x=55, y=50, width=40, height=20)),
)

SAMPLE_CLEANED_REGIONS: tuple[CleanedRegion, ...] = (
    CleanedRegion(rect=Rect(x=10, y=15, width=35, height=30)),
    CleanedRegion(rect=Rect(x=55, y=40, width=25, height=25)),
)

SAMPLE_MAPPED_AREA_M2 = 142.0
SAMPLE_OBSTACLE_COUNT = 3


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MockSnapshotSource:
    """Snapshot source backed by hard-coded sample data.

    Parameters
    ----------
    delay : float
        Simulated fetch latency in seconds.
    zones : sequence of Zone, optional
        Zones to report; defaults to :data:`SAMPLE_ZONES`. Mutable through
        :attr:`zones` so demos can simulate upstream changes.
    rng : random.Random, optional
        Generator used to jitter the robot pose.
    fail_with : Exception, optional
        When set, every fetch raises this exception after the delay.
    """

    def __init__(
        self,
        *,
        delay: float = 1.0,
        zones: Sequence[Zone] | None = None,
        rng: random.Random | None = None,
        fail_with: Exception | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.delay = delay
        self.zones: list[Zone] = list(SAMPLE_ZONES if zones is None else zones)
        self.fail_with = fail_with
        self._rng = rng or random.Random()
        self._clock = clock
        self.calls = 0

    def _pose(self) -> RobotPose:
        return RobotPose(x=45 + self._rng.random() * 10, y=45 + self._rng.random() * 10)

    async def fetch_snapshot(self) -> Snapshot:
        self.calls += 1
        _logger.debug("Mock snapshot fetch #%d (delay=%.2fs)", self.calls, self.delay)
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        now = self._clock()
        return Snapshot(
            mapped_area_m2=SAMPLE_MAPPED_AREA_M2,
            obstacle_count=SAMPLE_OBSTACLE_COUNT,
            zones=tuple(self.zones),
            pose=self._pose(),
            cleaned_regions=SAMPLE_CLEANED_REGIONS,
            timestamp=now,
            observed_at=now,
        )
