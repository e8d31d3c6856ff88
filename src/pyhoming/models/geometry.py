"""Planar position and vector value types.

Coordinates are camera-frame floats. Angles follow the ``atan2``
convention: rotating counter-clockwise (x right, y up) is positive.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from pyhoming.exceptions import DegenerateGeometryError


@dataclass(frozen=True, slots=True)
class Position:
    """A point in camera-frame coordinates."""

    x: float
    y: float


@dataclass(frozen=True, slots=True)
class Vector:
    """A planar displacement."""

    dx: float
    dy: float

    @property
    def length(self) -> float:
        return math.hypot(self.dx, self.dy)

    @property
    def is_zero(self) -> bool:
        return self.dx == 0.0 and self.dy == 0.0

    def dot(self, other: Vector) -> float:
        return self.dx * other.dx + self.dy * other.dy

    def cross(self, other: Vector) -> float:
        """Z component of the 3-D cross product (signed parallelogram area)."""
        return self.dx * other.dy - self.dy * other.dx


def vector_from(tail: Position, head: Position) -> Vector:
    """Return the displacement ``head - tail``."""
    return Vector(head.x - tail.x, head.y - tail.y)


def angle_between(a: Vector, b: Vector) -> float:
    """Signed angle in radians that rotates *a* onto *b*.

    The result lies in ``(-pi, pi]``. Positive means counter-clockwise.

    Raises :class:`DegenerateGeometryError` if either vector has zero
    length, since no direction is defined.
    """
    if a.is_zero or b.is_zero:
        raise DegenerateGeometryError(f"angle undefined for zero-length vector: a={a}, b={b}")
    angle = math.atan2(a.cross(b), a.dot(b))
    # atan2 yields -pi for a negative-zero cross product; keep the half-open range.
    if angle == -math.pi:
        return math.pi
    return angle
