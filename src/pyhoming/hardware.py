"""Actuation protocols and bridge-backed hardware handles.

The navigator only depends on :class:`DriveActuator`, :class:`SteerActuator`
and :class:`~pyhoming.perception.Detector`. The ``Bridge*`` classes
implement them on top of the hardware bridge's JSON endpoints.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from pydantic import ValidationError

from pyhoming._constants import CAMERA_LOCATE_ENDPOINT, MOTOR_VELOCITY_ENDPOINT, WHEELS_ANGLE_ENDPOINT
from pyhoming._transport import Transport
from pyhoming.exceptions import ActuationError, HomingTransportError
from pyhoming.models.control import Angle, Direction
from pyhoming.models.perception import Color, Region

_logger = logging.getLogger(__name__)


class DriveActuator(Protocol):
    async def drive_for(self, direction: Direction, duration: float) -> None:
        """Translate at constant velocity for *duration* seconds, then stop."""
        ...


class SteerActuator(Protocol):
    async def set_angle(self, angle: Angle) -> None:
        """Set the steering deflection (``Angle.straight()`` for none)."""
        ...


def _parse_region(value: Any, endpoint: str) -> Region | None:
    if value is None:
        return None
    try:
        return Region.model_validate(value)
    except ValidationError as exc:
        raise HomingTransportError(f"Malformed region from {endpoint}: {value!r}", endpoint=endpoint) from exc


class BridgeCamera:
    """Overhead camera detector served by the bridge."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def locate(self, color_a: Color, color_b: Color) -> tuple[Region | None, Region | None]:
        response = await self._transport.post_json(
            CAMERA_LOCATE_ENDPOINT,
            {"colors": [color_a.value, color_b.value]},
        )
        regions = response.get("regions")
        if not isinstance(regions, list) or len(regions) != 2:
            raise HomingTransportError(
                f"Expected two regions from {CAMERA_LOCATE_ENDPOINT}, got {regions!r}",
                endpoint=CAMERA_LOCATE_ENDPOINT,
            )
        return (
            _parse_region(regions[0], CAMERA_LOCATE_ENDPOINT),
            _parse_region(regions[1], CAMERA_LOCATE_ENDPOINT),
        )


class BridgeMotor:
    """Drive motor controlled through the bridge."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def _set_velocity(self, velocity: float) -> None:
        try:
            await self._transport.post_json(MOTOR_VELOCITY_ENDPOINT, {"velocity": velocity})
        except HomingTransportError as exc:
            raise ActuationError(f"Setting motor velocity {velocity} failed: {exc}", endpoint=exc.endpoint) from exc

    async def drive_for(self, direction: Direction, duration: float) -> None:
        _logger.debug("Driving %s for %.2fs", direction.value, duration)
        await self._set_velocity(direction.velocity)
        try:
            await asyncio.sleep(duration)
        finally:
            await self._set_velocity(0.0)


class BridgeWheels:
    """Steering servo controlled through the bridge."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def set_angle(self, angle: Angle) -> None:
        _logger.debug("Steering to %.4f", angle.value)
        try:
            await self._transport.post_json(WHEELS_ANGLE_ENDPOINT, {"angle": angle.value})
        except HomingTransportError as exc:
            raise ActuationError(f"Setting steering angle {angle.value} failed: {exc}", endpoint=exc.endpoint) from exc
