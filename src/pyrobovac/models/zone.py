"""Zone, cleaned-region and robot pose models.

All coordinates are percentages of the map bounds. Upstream telemetry is
untrusted, so out-of-range values are clamped into the map instead of
being rejected.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import Field, field_validator, model_validator

from pyrobovac._constants import DEFAULT_ZONE_COLOR, MAP_MAX
from pyrobovac.ingestion.normalize import clamp_percent, safe_float, safe_str
from pyrobovac.models._base import RobovacBaseModel

_logger = logging.getLogger(__name__)

_RECT_KEYS = ("x", "y", "width", "height")


def _nest_flat_rect(values: Any) -> Any:
    """Accept ``{"x": .., "y": .., "width": .., "height": ..}`` at the top level."""
    if not isinstance(values, dict) or "rect" in values:
        return values
    if not any(key in values for key in _RECT_KEYS):
        return values
    nested = dict(values)
    nested["rect"] = {key: nested.pop(key) for key in _RECT_KEYS if key in nested}
    return nested


class Rect(RobovacBaseModel):
    """Axis-aligned rectangle in percentage units of the map bounds.

    Invariant after validation: every edge lies in ``[0, 100]``,
    ``x + width <= 100`` and ``y + height <= 100``.
    """

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @field_validator("x", "y", "width", "height", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float:
        parsed = safe_float(value)
        return 0.0 if parsed is None else parsed

    @model_validator(mode="after")
    def _clamp_to_bounds(self) -> Rect:
        x = clamp_percent(self.x)
        y = clamp_percent(self.y)
        clamped = (x, y, clamp_percent(self.width, MAP_MAX - x), clamp_percent(self.height, MAP_MAX - y))
        original = self.as_tuple()
        if clamped != original:
            _logger.debug("Clamped out-of-bounds rect %s -> %s", original, clamped)
            for name, value in zip(_RECT_KEYS, clamped, strict=True):
                object.__setattr__(self, name, value)
        return self

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    def edges(self) -> tuple[float, float, float, float]:
        """Return ``(left, top, right, bottom)``."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def matches(self, other: Rect, tolerance: float = 1.0) -> bool:
        """Return ``True`` when every edge of *other* is within *tolerance* percent of ours."""
        return all(abs(a - b) <= tolerance for a, b in zip(self.edges(), other.edges(), strict=True))


class Zone(RobovacBaseModel):
    """A named area of the map.

    Identity is ``id``. ``pending`` marks zones added on this device that
    no snapshot has confirmed yet.
    """

    id: str
    name: str = ""
    color: str = DEFAULT_ZONE_COLOR
    rect: Rect = Field(default_factory=Rect)
    pending: bool = False

    @model_validator(mode="before")
    @classmethod
    def _accept_flat_rect(cls, values: Any) -> Any:
        return _nest_flat_rect(values)

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> str:
        zone_id = safe_str(value)
        if zone_id is None:
            raise ValueError("zone id must be non-empty")
        return zone_id

    @field_validator("name", "color", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return safe_str(value) or ""


class CleanedRegion(RobovacBaseModel):
    """Area already covered by the robot; display-only, no identity."""

    rect: Rect = Field(default_factory=Rect)

    @model_validator(mode="before")
    @classmethod
    def _accept_flat_rect(cls, values: Any) -> Any:
        return _nest_flat_rect(values)


class RobotPose(RobovacBaseModel):
    """Live robot position in percentage coordinates."""

    x: float = 50.0
    y: float = 50.0

    @field_validator("x", "y", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float:
        parsed = safe_float(value)
        return 50.0 if parsed is None else parsed

    @model_validator(mode="after")
    def _clamp_to_bounds(self) -> RobotPose:
        x, y = clamp_percent(self.x), clamp_percent(self.y)
        if (x, y) != (self.x, self.y):
            _logger.debug("Clamped out-of-bounds pose (%s, %s) -> (%s, %s)", self.x, self.y, x, y)
            object.__setattr__(self, "x", x)
            object.__setattr__(self, "y", y)
        return self


class ZoneSpec(RobovacBaseModel):
    """User input for a zone drawn on this device; the store assigns the id."""

    name: str = ""
    color: str = DEFAULT_ZONE_COLOR
    rect: Rect = Field(default_factory=Rect)

    @model_validator(mode="before")
    @classmethod
    def _accept_flat_rect(cls, values: Any) -> Any:
        return _nest_flat_rect(values)

    @field_validator("name", "color", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return safe_str(value) or ""
