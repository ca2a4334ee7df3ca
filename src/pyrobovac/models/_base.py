"""Base model for map telemetry.

Every zone/pose model inherits from :class:`RobovacBaseModel` which
provides:

* frozen instances, so a :class:`~pyrobovac.models.map_state.MapState`
  can be shared with the view layer without defensive copies;
* a ``model_validator(mode="before")`` that strips placeholder values
  (``""``, ``"--"``, NaN, ``None``) so the field default is used.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from pyrobovac.ingestion.normalize import strip_placeholders


class RobovacBaseModel(BaseModel):
    """Base for telemetry-derived models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _strip_placeholders(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return strip_placeholders(values)
