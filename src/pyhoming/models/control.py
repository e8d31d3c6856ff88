"""Actuation and control-loop models."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from pyhoming._constants import STEERING_LIMIT
from pyhoming.exceptions import AngleOutOfRange

# ------------------------------------------------------------------
# Actuation
# ------------------------------------------------------------------


class Direction(enum.StrEnum):
    """Drive direction for fixed-duration translations."""

    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def velocity(self) -> float:
        return 1.0 if self is Direction.FORWARD else -1.0


@dataclass(frozen=True, slots=True)
class Angle:
    """Steering deflection accepted by the wheels.

    Construction fails with :class:`AngleOutOfRange` when the magnitude
    exceeds :data:`STEERING_LIMIT`.
    """

    value: float

    def __post_init__(self) -> None:
        if not abs(self.value) <= STEERING_LIMIT:
            raise AngleOutOfRange(self.value, STEERING_LIMIT)

    @classmethod
    def straight(cls) -> Angle:
        """Zero deflection."""
        return cls(0.0)

    @classmethod
    def try_from(cls, value: float, *, limit: float = STEERING_LIMIT) -> Angle:
        """Build an angle, rejecting values beyond a (possibly tighter) *limit*."""
        if not abs(value) <= limit:
            raise AngleOutOfRange(value, limit)
        return cls(value)

    @property
    def is_straight(self) -> bool:
        return self.value == 0.0


# ------------------------------------------------------------------
# Navigation state
# ------------------------------------------------------------------


class Hint(enum.StrEnum):
    """Why the approach routine handed control back."""

    TARGET_WAS_HIT = "target_was_hit"
    ORIENTATION_IS_OFF = "orientation_is_off"


class Mode(enum.StrEnum):
    """Control mode of the navigation state machine.

    ``TURNING``
        Re-measure the heading and steer toward the target in small
        damped corrections until it is within the alignment threshold.
    ``APPROACHING``
        Delegate to the approach routine, which moves in small increments
        and re-measures until the target is hit or the heading drifted.
    ``IDLE``
        Sit on the target and wait for it to move away.
    """

    TURNING = "turning"
    APPROACHING = "approaching"
    IDLE = "idle"


class StepOutcome(enum.StrEnum):
    """What a single step observed; input to the transition function."""

    ALIGNED = "aligned"
    CORRECTED = "corrected"
    TARGET_WAS_HIT = "target_was_hit"
    ORIENTATION_IS_OFF = "orientation_is_off"
    TARGET_MOVED = "target_moved"

    @classmethod
    def from_hint(cls, hint: Hint) -> StepOutcome:
        return cls(hint.value)


class StepReport(BaseModel):
    """Record of one executed step.

    Parameters
    ----------
    mode : Mode
        Mode the step ran in.
    outcome : StepOutcome
        What the step observed.
    next_mode : Mode
        Mode after the transition.
    correction : float or None
        Measured correction angle in radians (turning only).
    steering : float or None
        Applied steering deflection (turning with a correction only).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: Mode
    outcome: StepOutcome
    next_mode: Mode
    correction: float | None = None
    steering: float | None = None
