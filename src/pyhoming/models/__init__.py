"""Data models for pyhoming."""

from pyhoming.models.control import Angle, Direction, Hint, Mode, StepOutcome, StepReport
from pyhoming.models.geometry import Position, Vector, angle_between, vector_from
from pyhoming.models.perception import Color, Region, Snapshot, TeamColors

__all__ = [
    "Angle",
    "Color",
    "Direction",
    "Hint",
    "Mode",
    "Position",
    "Region",
    "Snapshot",
    "StepOutcome",
    "StepReport",
    "TeamColors",
    "Vector",
    "angle_between",
    "vector_from",
]
