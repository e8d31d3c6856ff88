"""Process entry point: build the hardware handles once and loop forever."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from collections.abc import Sequence
from typing import Any

import aiohttp

from pyhoming._transport import BridgeTransport
from pyhoming.config import NavigatorConfig
from pyhoming.exceptions import HomingConfigError, HomingError
from pyhoming.hardware import BridgeCamera, BridgeMotor, BridgeWheels
from pyhoming.models.perception import Color, TeamColors
from pyhoming.navigator import NavigationStateMachine
from pyhoming.routines import ApproachRoutine, IdleRoutine, load_approach_routine, load_idle_routine

_logger = logging.getLogger(__name__)


async def run_navigator(
    config: NavigatorConfig,
    *,
    approach: ApproachRoutine,
    idle: IdleRoutine,
    max_steps: int | None = None,
    session: aiohttp.ClientSession | None = None,
) -> None:
    """Connect to the bridge and run the navigation loop.

    The camera, motor and wheel handles share one HTTP session and live for
    the whole loop. Errors propagate to the caller.
    """
    own_session = session is None
    http = session if session is not None else aiohttp.ClientSession()
    try:
        transport = BridgeTransport(config, http)
        machine = NavigationStateMachine(
            config,
            BridgeCamera(transport),
            BridgeMotor(transport),
            BridgeWheels(transport),
            approach=approach,
            idle=idle,
        )
        _logger.info(
            "Homing on %s target with %s vehicle via %s",
            config.colors.target.value,
            config.colors.car.value,
            config.bridge_url,
        )
        await machine.run(max_steps=max_steps)
    finally:
        if own_session:
            await http.close()


def _build_parser() -> argparse.ArgumentParser:
    colors = [c.value for c in Color]
    parser = argparse.ArgumentParser(
        prog="pyhoming",
        description="Drive the vehicle onto the colored target using overhead camera feedback.",
    )
    parser.add_argument("--bridge-url", help="Hardware bridge base URL (env: HOMING_BRIDGE_URL)")
    parser.add_argument("--car-color", choices=colors, help="Vehicle marker color (env: HOMING_CAR_COLOR)")
    parser.add_argument("--target-color", choices=colors, help="Target marker color (env: HOMING_TARGET_COLOR)")
    parser.add_argument("--approach", help="Approach routine as module:attribute (env: HOMING_APPROACH_ROUTINE)")
    parser.add_argument("--idle", help="Idle routine as module:attribute (env: HOMING_IDLE_ROUTINE)")
    parser.add_argument("--max-steps", type=int, help="Stop after this many steps (default: run forever)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def _config_from_args(args: argparse.Namespace) -> NavigatorConfig:
    overrides: dict[str, Any] = {}
    if args.bridge_url:
        overrides["bridge_url"] = args.bridge_url
    if args.approach:
        overrides["approach_routine"] = args.approach
    if args.idle:
        overrides["idle_routine"] = args.idle
    config = NavigatorConfig.from_env(**overrides)
    if args.car_color or args.target_color:
        try:
            colors = TeamColors(
                car=args.car_color or config.colors.car,
                target=args.target_color or config.colors.target,
            )
        except ValueError as exc:
            raise HomingConfigError(f"Invalid color assignment: {exc}") from exc
        config = dataclasses.replace(config, colors=colors)
    return config


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _config_from_args(args)
        if not config.approach_routine or not config.idle_routine:
            raise HomingConfigError("Both an approach and an idle routine must be configured")
        approach = load_approach_routine(config.approach_routine)
        idle = load_idle_routine(config.idle_routine)
        asyncio.run(run_navigator(config, approach=approach, idle=idle, max_steps=args.max_steps))
    except KeyboardInterrupt:
        _logger.info("Interrupted")
        return 130
    except HomingError as exc:
        _logger.error("Navigation stopped: %s", exc, exc_info=args.verbose)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
