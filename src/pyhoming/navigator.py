"""Navigation state machine driving the vehicle onto the target.

The loop alternates between three modes:

* **turning**: reverse briefly, infer the heading from the displacement,
  and steer a damped fraction of the correction angle toward the target
  until the remaining correction is within the alignment threshold;
* **approaching**: hand over to the approach routine until it reports
  the target was hit or the heading drifted;
* **idle**: hand over to the idle routine until the target moves away.

:func:`transition` is the pure mode transition. :class:`NavigationStateMachine`
performs the I/O of one step and applies the transition only after the
step completed, so a failed step never changes the mode.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar

from pyhoming.config import NavigatorConfig
from pyhoming.exceptions import CollaboratorError, HomingError
from pyhoming.hardware import DriveActuator, SteerActuator
from pyhoming.heading import estimate_orientation
from pyhoming.models.control import Angle, Direction, Hint, Mode, StepOutcome, StepReport
from pyhoming.models.geometry import angle_between, vector_from
from pyhoming.perception import Detector, capture_snapshot
from pyhoming.routines import ApproachRoutine, IdleRoutine

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRANSITIONS: dict[tuple[Mode, StepOutcome], Mode] = {
    (Mode.TURNING, StepOutcome.ALIGNED): Mode.APPROACHING,
    (Mode.TURNING, StepOutcome.CORRECTED): Mode.TURNING,
    (Mode.APPROACHING, StepOutcome.TARGET_WAS_HIT): Mode.IDLE,
    (Mode.APPROACHING, StepOutcome.ORIENTATION_IS_OFF): Mode.TURNING,
    (Mode.IDLE, StepOutcome.TARGET_MOVED): Mode.TURNING,
}


def transition(mode: Mode, outcome: StepOutcome) -> Mode:
    """Return the mode following *outcome* observed in *mode*.

    Raises :class:`ValueError` for outcomes that cannot occur in *mode*.
    """
    try:
        return _TRANSITIONS[(mode, outcome)]
    except KeyError:
        raise ValueError(f"outcome {outcome.value!r} is not valid in mode {mode.value!r}") from None


def steering_for(correction: float, config: NavigatorConfig) -> Angle:
    """Damped steering deflection for a measured *correction* angle.

    Raises :class:`~pyhoming.exceptions.AngleOutOfRange` if the damped value
    still exceeds ``config.max_steering_angle``.
    """
    return Angle.try_from(correction / config.damping_factor, limit=config.max_steering_angle)


class NavigationStateMachine:
    """Turning / approaching / idle control loop over the hardware handles.

    Usage::

        machine = NavigationStateMachine(config, camera, motor, wheels, approach=..., idle=...)
        await machine.run()
    """

    def __init__(
        self,
        config: NavigatorConfig,
        detector: Detector,
        drive: DriveActuator,
        steer: SteerActuator,
        *,
        approach: ApproachRoutine,
        idle: IdleRoutine,
        initial_mode: Mode = Mode.TURNING,
    ) -> None:
        self._config = config
        self._detector = detector
        self._drive = drive
        self._steer = steer
        self._approach = approach
        self._idle = idle
        self._mode = initial_mode

    @property
    def mode(self) -> Mode:
        return self._mode

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def step(self) -> StepReport:
        """Execute one iteration in the current mode and apply the transition."""
        mode = self._mode
        correction: float | None = None
        steering: float | None = None
        if mode is Mode.TURNING:
            outcome, correction, steering = await self._turn()
        elif mode is Mode.APPROACHING:
            outcome = await self._approach_target()
        else:
            outcome = await self._idle_on_target()

        next_mode = transition(mode, outcome)
        self._mode = next_mode
        report = StepReport(
            mode=mode,
            outcome=outcome,
            next_mode=next_mode,
            correction=correction,
            steering=steering,
        )
        if next_mode is not mode:
            _logger.info("Mode %s -> %s (%s)", mode.value, next_mode.value, outcome.value)
        return report

    async def run(self, max_steps: int | None = None) -> None:
        """Step until an error propagates, or *max_steps* steps have run."""
        # Heading measurement assumes straight wheels on the first reverse.
        await self._steer.set_angle(Angle.straight())
        steps = 0
        while max_steps is None or steps < max_steps:
            report = await self.step()
            steps += 1
            _logger.debug("Step %d: %s", steps, report)

    async def _turn(self) -> tuple[StepOutcome, float, float | None]:
        config = self._config
        before = await capture_snapshot(self._detector, config.colors)
        await self._drive.drive_for(Direction.BACKWARD, config.drive_duration)
        after = await capture_snapshot(self._detector, config.colors)

        # Displacement while reversing serves as the "forward" reference.
        orientation = estimate_orientation(before, after, min_displacement=config.min_heading_displacement)
        car_to_target = vector_from(after.vehicle, after.target)
        correction = angle_between(orientation, car_to_target)
        _logger.debug(
            "Orientation %s, car->target %s, correction %.4f rad",
            orientation,
            car_to_target,
            correction,
        )

        if abs(correction) <= config.alignment_threshold:
            return StepOutcome.ALIGNED, correction, None

        angle = steering_for(correction, config)
        await self._steer.set_angle(angle)
        try:
            await self._drive.drive_for(Direction.FORWARD, config.drive_duration)
        finally:
            await self._steer.set_angle(Angle.straight())
        return StepOutcome.CORRECTED, correction, angle.value

    async def _approach_target(self) -> StepOutcome:
        result = await self._delegate(
            "approach",
            self._approach(self._config.colors, self._detector, self._drive, self._steer),
        )
        try:
            hint = Hint(result)
        except (TypeError, ValueError):
            raise CollaboratorError(
                f"approach routine returned unexpected value {result!r}",
                routine="approach",
            ) from None
        return StepOutcome.from_hint(hint)

    async def _idle_on_target(self) -> StepOutcome:
        await self._delegate(
            "idle",
            self._idle(self._config.colors, self._detector, self._drive, self._steer),
        )
        return StepOutcome.TARGET_MOVED

    @staticmethod
    async def _delegate(name: str, call: Awaitable[T]) -> T:
        """Await an external routine, wrapping foreign failures in :class:`CollaboratorError`."""
        try:
            return await call
        except HomingError:
            raise
        except Exception as exc:
            raise CollaboratorError(f"{name} routine failed: {exc!r}", routine=name) from exc

