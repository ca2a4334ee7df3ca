"""Snapshot payload model.

A :class:`Snapshot` is one fetched telemetry payload. Every field is
optional: an absent field means "no information", and the reconciler
keeps the previous map value for it instead of resetting to zero.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from pyrobovac.ingestion.normalize import parse_timestamp, safe_float, safe_int, strip_placeholders
from pyrobovac.models.zone import CleanedRegion, RobotPose, Zone

_logger = logging.getLogger(__name__)

_ZONE_KEYS = ("zones", "detectedZones", "detected_zones")
_CLEANED_KEYS = ("cleanedRegions", "cleaned_regions", "cleanedAreas", "cleaned_areas")
_POSE_KEYS = ("pose", "robotPosition", "robot_position")
_OBSTACLE_KEYS = ("obstacleCount", "obstacle_count", "obstacles")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _parse_items(model: type[Zone] | type[CleanedRegion], items: list[Any]) -> list[Any]:
    """Validate list entries one by one, dropping the ones that cannot be parsed."""
    parsed: list[Any] = []
    for item in items:
        try:
            parsed.append(item if isinstance(item, model) else model.model_validate(item))
        except ValidationError:
            _logger.debug("Dropping malformed %s entry: %r", model.__name__, item, exc_info=True)
    return parsed


class Snapshot(BaseModel):
    """Telemetry snapshot describing zones, pose and map statistics.

    Parameters
    ----------
    mapped_area_m2 : float or None
        Total mapped floor area in square metres.
    obstacle_count : int or None
        Number of detected obstacles. A list of obstacle names is
        accepted and counted.
    zones : tuple of Zone or None
        Detected zones. A bare integer count is ignored; the zone count
        is always derived from the list.
    pose : RobotPose or None
        Robot position. Flat ``robot_x``/``robot_y`` columns are accepted.
    cleaned_regions : tuple of CleanedRegion or None
        Areas already cleaned.
    timestamp : datetime or None
        When the payload was produced upstream.
    observed_at : datetime
        When the payload was received on this device.
    raw : dict
        Original payload (as received).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    mapped_area_m2: float | None = Field(
        default=None,
        validation_alias=AliasChoices("mapped_area_m2", "mappedAreaM2", "mappedArea", "mapped_area"),
    )
    obstacle_count: int | None = Field(default=None, validation_alias=AliasChoices(*_OBSTACLE_KEYS))
    zones: tuple[Zone, ...] | None = Field(default=None, validation_alias=AliasChoices(*_ZONE_KEYS))
    pose: RobotPose | None = Field(default=None, validation_alias=AliasChoices(*_POSE_KEYS))
    cleaned_regions: tuple[CleanedRegion, ...] | None = Field(
        default=None,
        validation_alias=AliasChoices(*_CLEANED_KEYS),
    )
    timestamp: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("timestamp", "lastUpdated", "last_updated", "updatedAt", "updated_at"),
    )
    observed_at: datetime = Field(default_factory=_utcnow)
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _normalize_payload(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = strip_placeholders(values)

        for key in _ZONE_KEYS:
            if key not in merged:
                continue
            # Reported counts are never trusted; only a zone list is.
            if isinstance(merged[key], (list, tuple)):
                merged[key] = _parse_items(Zone, list(merged[key]))
            else:
                merged.pop(key)

        for key in _CLEANED_KEYS:
            if key in merged:
                items = merged[key]
                merged[key] = _parse_items(CleanedRegion, list(items)) if isinstance(items, (list, tuple)) else []

        for key in _OBSTACLE_KEYS:
            if key in merged and isinstance(merged[key], (list, tuple)):
                merged[key] = len(merged[key])

        if not any(key in merged for key in _POSE_KEYS) and "robot_x" in merged and "robot_y" in merged:
            merged["pose"] = {"x": merged["robot_x"], "y": merged["robot_y"]}

        merged.setdefault("raw", dict(values))
        return merged

    @field_validator("mapped_area_m2", mode="before")
    @classmethod
    def _coerce_area(cls, value: Any) -> float | None:
        parsed = safe_float(value)
        if parsed is None or parsed < 0:
            return None
        return parsed

    @field_validator("obstacle_count", mode="before")
    @classmethod
    def _coerce_obstacles(cls, value: Any) -> int | None:
        parsed = safe_int(value)
        if parsed is None or parsed < 0:
            return None
        return parsed

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def has_telemetry(self) -> bool:
        """Whether the payload carries any map or robot data at all."""
        return any(
            value is not None
            for value in (self.mapped_area_m2, self.obstacle_count, self.zones, self.pose, self.cleaned_regions)
        )

    @property
    def effective_timestamp(self) -> datetime | None:
        """Upstream timestamp, else the receive time for a payload with data.

        An empty payload (no row yet) carries no freshness information and
        yields ``None``.
        """
        if self.timestamp is not None:
            return self.timestamp
        return self.observed_at if self.has_telemetry else None
