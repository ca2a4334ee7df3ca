"""Scan lifecycle states and outcomes reported to the view layer."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ScanState(StrEnum):
    IDLE = "idle"
    SCANNING = "scanning"


class ScanOutcome(StrEnum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REJECTED = "rejected"
    DISCARDED = "discarded"


class ScanResult(BaseModel):
    """Result of one ``scan()`` attempt.

    A failure is reported exactly once, through the result of the attempt
    that hit it; the coordinator itself always returns to idle.
    """

    model_config = ConfigDict(frozen=True)

    outcome: ScanOutcome
    message: str
    finished_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def ok(self) -> bool:
        return self.outcome == ScanOutcome.SUCCEEDED

    @property
    def retryable(self) -> bool:
        return self.outcome == ScanOutcome.FAILED
