"""Venstar Thermostat Control Script - Main Entry Point."""

import argparse
import asyncio
import logging
import os
import sys

from venstar import Thermostat, __version__, find_thermostat
from venstar.constants import DEFAULT_DISCOVERY_TIMEOUT
from venstar.exceptions import (
    DeviceCommandError,
    DeviceConnectionError,
    DeviceError,
    DiscoveryError,
    HTTPStatusError,
    StateFetchError,
    ValidationError,
    VenstarError,
)

from . import commands as cmds
from .rich_output import get_formatter

_logger = logging.getLogger(__name__)
_formatter = get_formatter()


def _default_timeout() -> float:
    raw = os.getenv("VENSTAR_DISCOVERY_TIMEOUT")
    if raw is None:
        return DEFAULT_DISCOVERY_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        _logger.warning(
            f"Ignoring VENSTAR_DISCOVERY_TIMEOUT={raw!r}, "
            f"using {DEFAULT_DISCOVERY_TIMEOUT}s"
        )
        return DEFAULT_DISCOVERY_TIMEOUT


async def _resolve_thermostat(args: argparse.Namespace) -> Thermostat | None:
    if args.url:
        return Thermostat(args.url)
    descriptor = await find_thermostat(args.zone, args.timeout)
    if descriptor is None:
        _formatter.print_error(
            f"No thermostat named {args.zone!r} answered within "
            f"{args.timeout:g}s",
            title="Zone Not Found",
        )
        return None
    _logger.info(f"Using thermostat: {descriptor}")
    return Thermostat.from_descriptor(descriptor)


async def _dispatch(thermostat: Thermostat, args: argparse.Namespace) -> None:
    cmd = args.command
    if cmd == "set":
        await cmds.handle_set_temps_request(thermostat, args.heat, args.cool)
    elif cmd == "status":
        await cmds.handle_status_request(thermostat, args.raw)
    elif cmd == "mode":
        await cmds.handle_set_mode_request(thermostat, args.name)
    elif cmd == "fan":
        await cmds.handle_set_fan_request(thermostat, args.name)
    elif cmd == "away":
        await cmds.handle_set_away_request(thermostat, args.state)
    elif cmd == "schedule":
        await cmds.handle_set_schedule_request(thermostat, args.state == "on")
    elif cmd == "units":
        await cmds.handle_set_units_request(thermostat, args.name)
    elif cmd == "humidity":
        await cmds.handle_set_humidity_request(
            thermostat, args.humidify, args.dehumidify
        )
    elif cmd == "sensors":
        await cmds.handle_sensors_request(thermostat)
    elif cmd == "alerts":
        await cmds.handle_alerts_request(thermostat)
    elif cmd == "runtimes":
        await cmds.handle_runtimes_request(thermostat)


async def async_main(args: argparse.Namespace) -> int:
    """Asynchronous main function."""
    try:
        if args.command == "discover":
            await cmds.handle_discover_request(args.timeout)
            return 0

        thermostat = await _resolve_thermostat(args)
        if thermostat is None:
            return 1
        async with thermostat:
            await _dispatch(thermostat, args)
        return 0

    except ValidationError as e:
        _logger.error(f"Validation error: {e}")
        _formatter.print_error(str(e), title="Validation Error")
    except DeviceCommandError as e:
        _logger.error(f"Command rejected: {e}")
        _formatter.print_error(str(e), title="Command Rejected")
    except StateFetchError as e:
        _logger.error(f"Snapshot failed: {e}")
        _formatter.print_error(str(e), title="Could Not Read Settings")
    except (DeviceConnectionError, HTTPStatusError) as e:
        _logger.error(f"Connection error: {e}")
        _formatter.print_error(str(e), title="Connection Error")
    except DeviceError as e:
        _logger.error(f"Device error: {e}")
        _formatter.print_error(str(e), title="Device Error")
    except DiscoveryError as e:
        _logger.error(f"Discovery error: {e}")
        _formatter.print_error(str(e), title="Discovery Error")
    except VenstarError as e:
        _logger.error(f"Library error: {e}")
        _formatter.print_error(str(e), title="Library Error")
    except Exception as e:
        _logger.error(f"Unexpected error: {e}", exc_info=True)
        _formatter.print_error(str(e), title="Unexpected Error")
    return 1


def _add_target_args(parser: argparse.ArgumentParser) -> None:
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--zone", help="Thermostat name (case-insensitive), found by discovery"
    )
    target.add_argument(
        "--url", help="Base URL of the thermostat, skipping discovery"
    )


def parse_args(args: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Venstar thermostat CLI")
    parser.add_argument(
        "--version", action="version", version=f"venstar-ecp {__version__}"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=_default_timeout(),
        help="Seconds to wait for discovery responses "
        "(default: $VENSTAR_DISCOVERY_TIMEOUT or %(default)s)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        dest="loglevel",
        action="store_const",
        const=logging.INFO,
    )
    parser.add_argument(
        "-vv",
        "--very-verbose",
        dest="loglevel",
        action="store_const",
        const=logging.DEBUG,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "discover", help="List thermostats answering on the local network"
    )

    set_temps = subparsers.add_parser(
        "set", help="Set heat and/or cool setpoints"
    )
    _add_target_args(set_temps)
    set_temps.add_argument("--heat", type=float, help="Heat setpoint")
    set_temps.add_argument("--cool", type=float, help="Cool setpoint")

    status = subparsers.add_parser(
        "status", help="Show current thermostat state"
    )
    _add_target_args(status)
    status.add_argument("--raw", action="store_true")

    mode = subparsers.add_parser("mode", help="Set operating mode")
    _add_target_args(mode)
    mode.add_argument("name", choices=["off", "heat", "cool", "auto"])

    fan = subparsers.add_parser("fan", help="Set fan mode")
    _add_target_args(fan)
    fan.add_argument("name", choices=["auto", "on"])

    away = subparsers.add_parser("away", help="Set home/away")
    _add_target_args(away)
    away.add_argument("state", choices=["home", "away"])

    schedule = subparsers.add_parser(
        "schedule", help="Enable or disable the schedule"
    )
    _add_target_args(schedule)
    schedule.add_argument("state", choices=["on", "off"])

    units = subparsers.add_parser("units", help="Set display units")
    _add_target_args(units)
    units.add_argument("name", choices=["fahrenheit", "celsius"])

    humidity = subparsers.add_parser(
        "humidity", help="Set humidify/dehumidify setpoints"
    )
    _add_target_args(humidity)
    humidity.add_argument("--humidify", type=float, help="Percent")
    humidity.add_argument("--dehumidify", type=float, help="Percent")

    for name, help_text in (
        ("sensors", "Show sensor readings"),
        ("alerts", "Show alert flags"),
        ("runtimes", "Show daily equipment runtimes"),
    ):
        _add_target_args(subparsers.add_parser(name, help=help_text))

    return parser.parse_args(args)


def main(args_list: list[str]) -> None:
    args = parse_args(args_list)
    logging.basicConfig(
        level=logging.WARNING,
        stream=sys.stdout,
        format="[%(asctime)s] %(levelname)s:%(name)s:%(message)s",
    )
    logging.getLogger("venstar").setLevel(args.loglevel or logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    try:
        sys.exit(asyncio.run(async_main(args)))
    except KeyboardInterrupt:
        _logger.info("Interrupted.")


def run() -> None:
    main(sys.argv[1:])


if __name__ == "__main__":
    run()
