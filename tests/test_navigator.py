"""Tests for the navigation state machine using scripted hardware fakes."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

import pytest

from pyhoming.config import NavigatorConfig
from pyhoming.exceptions import (
    ActuationError,
    AngleOutOfRange,
    CollaboratorError,
    DegenerateGeometryError,
    PerceptionError,
)
from pyhoming.models.control import Angle, Direction, Hint, Mode, StepOutcome
from pyhoming.models.perception import Color, Region, TeamColors
from pyhoming.navigator import NavigationStateMachine, steering_for, transition

Point = tuple[float, float]


def _point_region(point: Point) -> Region:
    x, y = point
    return Region(x_min=x, y_min=y, x_max=x, y_max=y)


class ScriptedDetector:
    """Plays back (vehicle, target) pairs; ``None`` entries simulate a lost marker."""

    def __init__(self, frames: Iterable[tuple[Point, Point] | None]) -> None:
        self._frames: Iterator[tuple[Point, Point] | None] = iter(frames)
        self.calls = 0

    async def locate(self, color_a: Color, color_b: Color) -> tuple[Region | None, Region | None]:
        self.calls += 1
        frame = next(self._frames)
        if frame is None:
            raise PerceptionError(f"{color_a.value} marker not found", color=color_a.value)
        vehicle, target = frame
        return _point_region(vehicle), _point_region(target)


@dataclass
class RecordingDrive:
    calls: list[tuple[Direction, float]] = field(default_factory=list)
    fail: bool = False
    fail_on: Direction | None = None

    async def drive_for(self, direction: Direction, duration: float) -> None:
        if self.fail or direction is self.fail_on:
            raise ActuationError("motor link down", endpoint="/motor/velocity")
        self.calls.append((direction, duration))


@dataclass
class RecordingSteer:
    angles: list[Angle] = field(default_factory=list)

    async def set_angle(self, angle: Angle) -> None:
        self.angles.append(angle)


@dataclass
class ScriptedRoutine:
    """Returns queued results in order; exceptions in the queue are raised."""

    results: list[Any] = field(default_factory=list)
    calls: list[tuple[Any, ...]] = field(default_factory=list)

    async def __call__(self, colors: TeamColors, detector: Any, drive: Any, steer: Any) -> Any:
        self.calls.append((colors, detector, drive, steer))
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


def _turning_frames(correction: float) -> list[tuple[Point, Point]]:
    """Two frames whose measured correction angle is exactly *correction*."""
    return [
        ((0.0, 0.0), (50.0, 50.0)),
        ((1.0, 0.0), (1.0 + 10.0 * math.cos(correction), 10.0 * math.sin(correction))),
    ]


def _machine(
    frames: Iterable[tuple[Point, Point] | None] = (),
    *,
    config: NavigatorConfig | None = None,
    approach: ScriptedRoutine | None = None,
    idle: ScriptedRoutine | None = None,
    initial_mode: Mode = Mode.TURNING,
) -> tuple[NavigationStateMachine, RecordingDrive, RecordingSteer]:
    drive = RecordingDrive()
    steer = RecordingSteer()
    machine = NavigationStateMachine(
        config or NavigatorConfig(),
        ScriptedDetector(frames),
        drive,
        steer,
        approach=approach or ScriptedRoutine(),
        idle=idle or ScriptedRoutine(),
        initial_mode=initial_mode,
    )
    return machine, drive, steer


# ------------------------------------------------------------------
# Pure transition function
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    ("mode", "outcome", "expected"),
    [
        (Mode.TURNING, StepOutcome.ALIGNED, Mode.APPROACHING),
        (Mode.TURNING, StepOutcome.CORRECTED, Mode.TURNING),
        (Mode.APPROACHING, StepOutcome.TARGET_WAS_HIT, Mode.IDLE),
        (Mode.APPROACHING, StepOutcome.ORIENTATION_IS_OFF, Mode.TURNING),
        (Mode.IDLE, StepOutcome.TARGET_MOVED, Mode.TURNING),
    ],
)
def test_transition_table(mode: Mode, outcome: StepOutcome, expected: Mode) -> None:
    assert transition(mode, outcome) is expected


@pytest.mark.parametrize(
    ("mode", "outcome"),
    [
        (Mode.TURNING, StepOutcome.TARGET_WAS_HIT),
        (Mode.APPROACHING, StepOutcome.ALIGNED),
        (Mode.IDLE, StepOutcome.CORRECTED),
    ],
)
def test_transition_rejects_impossible_outcomes(mode: Mode, outcome: StepOutcome) -> None:
    with pytest.raises(ValueError):
        transition(mode, outcome)


def test_steering_is_damped_correction() -> None:
    assert steering_for(0.5, NavigatorConfig()).value == pytest.approx(0.1)
    assert steering_for(-0.5, NavigatorConfig(damping_factor=2.0)).value == pytest.approx(-0.25)


def test_initial_mode_is_turning() -> None:
    machine, _, _ = _machine()
    assert machine.mode is Mode.TURNING


# ------------------------------------------------------------------
# Turning
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_perpendicular_heading_steers_a_fifth_of_the_correction() -> None:
    # Vehicle reverses from (0, -1) to (0, 0): orientation (0, 1), target straight along +x.
    machine, drive, steer = _machine([((0.0, -1.0), (10.0, 0.0)), ((0.0, 0.0), (10.0, 0.0))])

    report = await machine.step()

    assert report.outcome is StepOutcome.CORRECTED
    # Target lies clockwise of the heading, so both angles are negative.
    assert report.correction == pytest.approx(-math.pi / 2)
    assert report.steering == pytest.approx(-math.pi / 10)
    assert machine.mode is Mode.TURNING
    assert drive.calls == [(Direction.BACKWARD, 1.0), (Direction.FORWARD, 1.0)]
    assert [a.value for a in steer.angles] == [pytest.approx(report.steering), 0.0]
    assert steer.angles[-1].is_straight


@pytest.mark.asyncio
async def test_nearly_aligned_heading_switches_to_approaching() -> None:
    # Orientation (1, 0); vehicle-to-target (1, 0.001).
    machine, drive, steer = _machine([((0.0, 0.0), (5.0, 5.0)), ((1.0, 0.0), (2.0, 0.001))])

    report = await machine.step()

    assert report.outcome is StepOutcome.ALIGNED
    assert report.correction == pytest.approx(0.001, rel=1e-3)
    assert report.steering is None
    assert machine.mode is Mode.APPROACHING
    assert drive.calls == [(Direction.BACKWARD, 1.0)]
    assert steer.angles == []


@pytest.mark.asyncio
async def test_correction_within_threshold_counts_as_aligned() -> None:
    config = NavigatorConfig(alignment_threshold=0.25)
    machine, _, steer = _machine(_turning_frames(0.2), config=config)

    await machine.step()

    assert machine.mode is Mode.APPROACHING
    assert steer.angles == []


@pytest.mark.asyncio
async def test_damped_corrections_converge_to_approaching() -> None:
    corrections = [0.5 * (1 / 5) ** k for k in range(10)]
    frames = [frame for c in corrections for frame in _turning_frames(c)]
    machine, _, steer = _machine(frames)

    steps = 0
    while machine.mode is Mode.TURNING:
        report = await machine.step()
        steps += 1
        assert steps <= 10
        if report.outcome is StepOutcome.CORRECTED:
            assert report.steering == pytest.approx(corrections[steps - 1] / 5)

    assert machine.mode is Mode.APPROACHING
    assert steps == 4
    # Each correction is followed by a reset to straight.
    assert [a.is_straight for a in steer.angles] == [False, True] * 3


@pytest.mark.asyncio
async def test_configured_duration_is_used() -> None:
    machine, drive, _ = _machine(_turning_frames(1.0), config=NavigatorConfig(drive_duration=0.25))

    await machine.step()

    assert drive.calls == [(Direction.BACKWARD, 0.25), (Direction.FORWARD, 0.25)]


@pytest.mark.asyncio
@pytest.mark.parametrize("failing_frame", [0, 1])
async def test_detector_failure_aborts_turning_without_mode_change(failing_frame: int) -> None:
    frames: list[tuple[Point, Point] | None] = list(_turning_frames(1.0))
    frames[failing_frame] = None
    machine, drive, steer = _machine(frames)

    with pytest.raises(PerceptionError):
        await machine.step()

    assert machine.mode is Mode.TURNING
    assert steer.angles == []
    assert len(drive.calls) == failing_frame


@pytest.mark.asyncio
async def test_correction_beyond_steering_limit_is_fatal() -> None:
    config = NavigatorConfig(max_steering_angle=0.1)
    machine, drive, steer = _machine(_turning_frames(math.pi / 2), config=config)

    with pytest.raises(AngleOutOfRange) as exc_info:
        await machine.step()

    assert exc_info.value.limit == 0.1
    assert exc_info.value.value == pytest.approx(math.pi / 10)
    assert machine.mode is Mode.TURNING
    assert steer.angles == []
    assert drive.calls == [(Direction.BACKWARD, 1.0)]


@pytest.mark.asyncio
async def test_stalled_vehicle_is_reported() -> None:
    machine, _, _ = _machine([((3.0, 3.0), (9.0, 9.0)), ((3.0, 3.0), (9.0, 9.0))])

    with pytest.raises(DegenerateGeometryError):
        await machine.step()
    assert machine.mode is Mode.TURNING


@pytest.mark.asyncio
async def test_actuation_failure_propagates() -> None:
    machine, drive, _ = _machine(_turning_frames(1.0))
    drive.fail = True

    with pytest.raises(ActuationError):
        await machine.step()
    assert machine.mode is Mode.TURNING


@pytest.mark.asyncio
async def test_failed_forward_drive_still_straightens_wheels() -> None:
    machine, drive, steer = _machine(_turning_frames(1.0))
    drive.fail_on = Direction.FORWARD

    with pytest.raises(ActuationError):
        await machine.step()

    assert [a.value for a in steer.angles] == [pytest.approx(0.2), 0.0]
    assert steer.angles[-1].is_straight
    assert machine.mode is Mode.TURNING


# ------------------------------------------------------------------
# Approaching / idle
# ------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("hint", "expected"),
    [
        (Hint.TARGET_WAS_HIT, Mode.IDLE),
        (Hint.ORIENTATION_IS_OFF, Mode.TURNING),
        ("target_was_hit", Mode.IDLE),
    ],
)
async def test_approach_hint_selects_next_mode(hint: Any, expected: Mode) -> None:
    approach = ScriptedRoutine([hint])
    config = NavigatorConfig(colors=TeamColors(car=Color.RED, target=Color.YELLOW))
    machine, drive, steer = _machine(config=config, approach=approach, initial_mode=Mode.APPROACHING)

    report = await machine.step()

    assert machine.mode is expected
    assert report.mode is Mode.APPROACHING
    assert report.next_mode is expected
    colors, _, passed_drive, passed_steer = approach.calls[0]
    assert colors == config.colors
    assert passed_drive is drive
    assert passed_steer is steer


@pytest.mark.asyncio
async def test_unexpected_approach_result_is_collaborator_error() -> None:
    machine, _, _ = _machine(approach=ScriptedRoutine(["lost"]), initial_mode=Mode.APPROACHING)

    with pytest.raises(CollaboratorError) as exc_info:
        await machine.step()

    assert exc_info.value.routine == "approach"
    assert machine.mode is Mode.APPROACHING


@pytest.mark.asyncio
async def test_foreign_routine_failure_is_wrapped() -> None:
    cause = RuntimeError("encoder overflow")
    machine, _, _ = _machine(approach=ScriptedRoutine([cause]), initial_mode=Mode.APPROACHING)

    with pytest.raises(CollaboratorError) as exc_info:
        await machine.step()

    assert exc_info.value.__cause__ is cause
    assert machine.mode is Mode.APPROACHING


@pytest.mark.asyncio
async def test_homing_errors_from_routine_are_not_wrapped() -> None:
    idle = ScriptedRoutine([PerceptionError("target lost", color="green")])
    machine, _, _ = _machine(idle=idle, initial_mode=Mode.IDLE)

    with pytest.raises(PerceptionError):
        await machine.step()
    assert machine.mode is Mode.IDLE


@pytest.mark.asyncio
async def test_idle_return_always_goes_back_to_turning() -> None:
    idle = ScriptedRoutine([None])
    machine, _, _ = _machine(idle=idle, initial_mode=Mode.IDLE)

    report = await machine.step()

    assert report.outcome is StepOutcome.TARGET_MOVED
    assert machine.mode is Mode.TURNING
    assert len(idle.calls) == 1


# ------------------------------------------------------------------
# Driver loop
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_run_cycles_through_all_modes() -> None:
    approach = ScriptedRoutine([Hint.TARGET_WAS_HIT])
    idle = ScriptedRoutine([None])
    machine, _, _ = _machine(_turning_frames(0.0), approach=approach, idle=idle)

    await machine.run(max_steps=3)

    assert machine.mode is Mode.TURNING
    assert len(approach.calls) == 1
    assert len(idle.calls) == 1


@pytest.mark.asyncio
async def test_run_stops_on_first_error() -> None:
    approach = ScriptedRoutine([Hint.ORIENTATION_IS_OFF])
    frames: list[tuple[Point, Point] | None] = [*_turning_frames(0.0), None]
    machine, _, _ = _machine(frames, approach=approach)

    with pytest.raises(PerceptionError):
        await machine.run()

    assert machine.mode is Mode.TURNING


@pytest.mark.asyncio
async def test_run_straightens_wheels_before_first_step() -> None:
    machine, drive, steer = _machine([None])

    with pytest.raises(PerceptionError):
        await machine.run()

    assert steer.angles == [Angle.straight()]
    assert drive.calls == []
