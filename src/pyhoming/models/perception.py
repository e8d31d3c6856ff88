"""Detector-facing models: colors, bounding regions and snapshots."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, model_validator

from pyhoming.models.geometry import Position


class Color(enum.StrEnum):
    """Marker colors the detector can search for."""

    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    MAGENTA = "magenta"
    CYAN = "cyan"


class TeamColors(BaseModel):
    """Color assignment of the vehicle marker and the target marker."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    car: Color = Color.BLUE
    target: Color = Color.GREEN

    @model_validator(mode="after")
    def _distinct(self) -> TeamColors:
        if self.car == self.target:
            raise ValueError(f"car and target must use different colors, both are {self.car.value!r}")
        return self


class Region(BaseModel):
    """Axis-aligned bounding box reported by the detector.

    Parameters
    ----------
    x_min, y_min : float
        Top-left corner in camera-frame pixels.
    x_max, y_max : float
        Bottom-right corner in camera-frame pixels.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @model_validator(mode="after")
    def _ordered(self) -> Region:
        if self.x_max < self.x_min or self.y_max < self.y_min:
            raise ValueError(f"inverted bounding box: {self!r}")
        return self

    @property
    def center(self) -> Position:
        return Position((self.x_min + self.x_max) / 2.0, (self.y_min + self.y_max) / 2.0)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Vehicle and target positions taken from a single detector call."""

    vehicle: Position
    target: Position
