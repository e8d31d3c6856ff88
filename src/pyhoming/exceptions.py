"""Custom exception hierarchy for pyhoming."""

from __future__ import annotations


class HomingError(Exception):
    """Base exception for all pyhoming errors."""


class HomingConfigError(HomingError):
    """Invalid or missing configuration."""


class HomingTransportError(HomingError):
    """HTTP-level failure talking to the hardware bridge (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class PerceptionError(HomingError):
    """The detector could not locate a required colored object in the frame."""

    def __init__(self, message: str, *, color: str | None = None) -> None:
        self.color = color
        super().__init__(message)


class DegenerateGeometryError(HomingError):
    """A vector is too short to define a direction.

    Raised for zero-length inputs to :func:`~pyhoming.models.geometry.angle_between`
    and when the vehicle barely moved during the heading measurement
    (stalled motor or wheel slip).
    """


class AngleOutOfRange(HomingError, ValueError):
    """Steering deflection outside the actuator limits."""

    def __init__(self, value: float, limit: float) -> None:
        self.value = value
        self.limit = limit
        super().__init__(f"steering angle {value:.4f} exceeds limit ±{limit:.4f}")


class ActuationError(HomingError):
    """Drive or steering hardware call failed."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class CollaboratorError(HomingError):
    """The external approach or idle routine failed internally.

    The original exception (if any) is chained as ``__cause__``.
    """

    def __init__(self, message: str, *, routine: str = "") -> None:
        self.routine = routine
        super().__init__(message)
