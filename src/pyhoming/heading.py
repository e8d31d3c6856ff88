"""Vehicle heading from two snapshots around a straight drive."""

from __future__ import annotations

from pyhoming._constants import MIN_HEADING_DISPLACEMENT
from pyhoming.exceptions import DegenerateGeometryError
from pyhoming.models.geometry import Vector, vector_from
from pyhoming.models.perception import Snapshot


def estimate_orientation(
    before: Snapshot,
    after: Snapshot,
    *,
    min_displacement: float = MIN_HEADING_DISPLACEMENT,
) -> Vector:
    """Return the vehicle displacement between *before* and *after*.

    The two snapshots must bracket exactly one straight translation of
    known duration; a turn in between makes the result meaningless.

    Raises :class:`DegenerateGeometryError` when the vehicle moved less
    than *min_displacement* (stalled motor, wheel slip or a frozen frame).
    """
    orientation = vector_from(before.vehicle, after.vehicle)
    if orientation.length < min_displacement or orientation.is_zero:
        raise DegenerateGeometryError(
            f"vehicle moved {orientation.length:.6f} (< {min_displacement}) during heading measurement"
        )
    return orientation
