"""Navigator configuration for pyhoming."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pydantic import ValidationError

from pyhoming._constants import (
    ALIGNMENT_THRESHOLD_RAD,
    BRIDGE_URL,
    DAMPING_FACTOR,
    DRIVE_DURATION_S,
    MIN_HEADING_DISPLACEMENT,
    STEERING_LIMIT,
)
from pyhoming.exceptions import HomingConfigError
from pyhoming.models.perception import Color, TeamColors


def _env_color(value: str, env_key: str) -> Color:
    try:
        return Color(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(c.value for c in Color)
        raise HomingConfigError(f"{env_key}={value!r} is not a known color (expected one of: {choices})") from exc


def _env_float(value: str, env_key: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise HomingConfigError(f"{env_key}={value!r} is not a number") from exc


@dataclasses.dataclass(frozen=True)
class NavigatorConfig:
    """Navigator configuration.

    Parameters
    ----------
    colors : TeamColors
        Marker colors of the vehicle and the target.
    bridge_url : str
        Base URL of the hardware bridge serving camera and motors.
    request_timeout : float
        Total timeout in seconds for a single bridge request.
    drive_duration : float
        Seconds of each fixed-duration drive command in turning mode.
    alignment_threshold : float
        Correction angle in radians at or below which the heading is
        considered aligned with the target.
    damping_factor : float
        The measured correction is divided by this before steering, so
        the vehicle converges in several small turns instead of one.
    max_steering_angle : float
        Largest steering deflection the navigator may request. Must not
        exceed the actuator range.
    min_heading_displacement : float
        Smallest vehicle displacement (camera units) accepted as a heading
        measurement.
    approach_routine : str or None
        ``"module:attribute"`` reference of the approach routine.
    idle_routine : str or None
        ``"module:attribute"`` reference of the idle routine.
    """

    colors: TeamColors = dataclasses.field(default_factory=TeamColors)
    bridge_url: str = BRIDGE_URL
    request_timeout: float = 10.0
    drive_duration: float = DRIVE_DURATION_S
    alignment_threshold: float = ALIGNMENT_THRESHOLD_RAD
    damping_factor: float = DAMPING_FACTOR
    max_steering_angle: float = STEERING_LIMIT
    min_heading_displacement: float = MIN_HEADING_DISPLACEMENT
    approach_routine: str | None = None
    idle_routine: str | None = None

    def __post_init__(self) -> None:
        if self.drive_duration <= 0:
            raise HomingConfigError(f"drive_duration must be positive, got {self.drive_duration}")
        if self.request_timeout <= 0:
            raise HomingConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.damping_factor <= 0:
            raise HomingConfigError(f"damping_factor must be positive, got {self.damping_factor}")
        if self.alignment_threshold < 0:
            raise HomingConfigError(f"alignment_threshold must not be negative, got {self.alignment_threshold}")
        if self.min_heading_displacement < 0:
            raise HomingConfigError(
                f"min_heading_displacement must not be negative, got {self.min_heading_displacement}"
            )
        if not 0 < self.max_steering_angle <= STEERING_LIMIT:
            raise HomingConfigError(
                f"max_steering_angle must be in (0, {STEERING_LIMIT}], got {self.max_steering_angle}"
            )
        if not self.bridge_url.startswith(("http://", "https://")):
            raise HomingConfigError(f"bridge_url must be an http(s) URL, got {self.bridge_url!r}")

    @classmethod
    def from_env(cls, **overrides: Any) -> NavigatorConfig:
        """Create configuration from environment variables.

        Reads optional ``HOMING_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        NavigatorConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        if "colors" not in overrides:
            color_kwargs: dict[str, Color] = {}
            for env_key, field_name in (("HOMING_CAR_COLOR", "car"), ("HOMING_TARGET_COLOR", "target")):
                val = env.get(env_key)
                if val is not None:
                    color_kwargs[field_name] = _env_color(val, env_key)
            if color_kwargs:
                try:
                    config_kwargs["colors"] = TeamColors(**color_kwargs)
                except ValidationError as exc:
                    raise HomingConfigError(f"Invalid color assignment: {exc}") from exc

        _ENV_STR_MAP = {
            "HOMING_BRIDGE_URL": "bridge_url",
            "HOMING_APPROACH_ROUTINE": "approach_routine",
            "HOMING_IDLE_ROUTINE": "idle_routine",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "HOMING_REQUEST_TIMEOUT": "request_timeout",
            "HOMING_DRIVE_DURATION": "drive_duration",
            "HOMING_ALIGNMENT_THRESHOLD": "alignment_threshold",
            "HOMING_DAMPING_FACTOR": "damping_factor",
            "HOMING_MAX_STEERING_ANGLE": "max_steering_angle",
            "HOMING_MIN_HEADING_DISPLACEMENT": "min_heading_displacement",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(val, env_key)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
