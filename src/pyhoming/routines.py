"""Approach and idle routine interfaces.

Both routines run their own inner loops on the shared hardware handles
and return control to the navigator when they are done. They are
resolved from ``"module:attribute"`` references so different behaviours
can be plugged in without touching the navigator.
"""

from __future__ import annotations

import importlib
from typing import Any, Protocol, cast

from pyhoming.exceptions import HomingConfigError
from pyhoming.hardware import DriveActuator, SteerActuator
from pyhoming.models.control import Hint
from pyhoming.models.perception import TeamColors
from pyhoming.perception import Detector


class ApproachRoutine(Protocol):
    """Move toward the target in increments until it is hit or the heading drifts."""

    async def __call__(
        self,
        colors: TeamColors,
        detector: Detector,
        drive: DriveActuator,
        steer: SteerActuator,
    ) -> Hint: ...


class IdleRoutine(Protocol):
    """Hold position and return once the target moved away from the vehicle."""

    async def __call__(
        self,
        colors: TeamColors,
        detector: Detector,
        drive: DriveActuator,
        steer: SteerActuator,
    ) -> None: ...


def load_routine(reference: str) -> Any:
    """Import the callable named by a ``"package.module:attribute"`` reference.

    Raises :class:`HomingConfigError` for malformed references, missing
    modules or attributes, and non-callable targets.
    """
    module_name, sep, attr_path = reference.strip().partition(":")
    if not sep or not module_name or not attr_path:
        raise HomingConfigError(f"Routine reference must look like 'module:attribute', got {reference!r}")
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise HomingConfigError(f"Cannot import routine module {module_name!r}: {exc}") from exc
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise HomingConfigError(f"Module {module_name!r} has no attribute {attr_path!r}") from exc
    if not callable(target):
        raise HomingConfigError(f"Routine {reference!r} is not callable")
    return target


def load_approach_routine(reference: str) -> ApproachRoutine:
    return cast(ApproachRoutine, load_routine(reference))


def load_idle_routine(reference: str) -> IdleRoutine:
    return cast(IdleRoutine, load_routine(reference))
