"""Snapshot capture from the color detector."""

from __future__ import annotations

import logging
from typing import Protocol

from pyhoming.exceptions import PerceptionError
from pyhoming.models.perception import Color, Region, Snapshot, TeamColors

_logger = logging.getLogger(__name__)


class Detector(Protocol):
    """Structural detector interface.

    Implementations return the best-matching bounding region for each
    requested color in the latest frame, in request order. A color that is
    not visible is reported as ``None`` or by raising :class:`PerceptionError`.
    """

    async def locate(self, color_a: Color, color_b: Color) -> tuple[Region | None, Region | None]:
        ...


async def capture_snapshot(detector: Detector, colors: TeamColors) -> Snapshot:
    """Locate vehicle and target with one detector call.

    Both positions come from the same frame. Failures are not retried here.
    """
    car_region, target_region = await detector.locate(colors.car, colors.target)
    if car_region is None:
        raise PerceptionError(f"vehicle marker ({colors.car.value}) not found in frame", color=colors.car.value)
    if target_region is None:
        raise PerceptionError(
            f"target marker ({colors.target.value}) not found in frame",
            color=colors.target.value,
        )
    snapshot = Snapshot(vehicle=car_region.center, target=target_region.center)
    _logger.debug("Snapshot vehicle=%s target=%s", snapshot.vehicle, snapshot.target)
    return snapshot
