"""Command handlers for CLI operations."""

import logging
from datetime import datetime

from venstar import (
    AwayState,
    FanSetting,
    ScheduleState,
    TempUnits,
    Thermostat,
    ThermostatInfo,
    ThermostatMode,
    discover,
)

from .rich_output import get_formatter

_logger = logging.getLogger(__name__)
_formatter = get_formatter()


def _temp(value: float, units: TempUnits) -> str:
    return f"{value:g}{units}"


def _who(thermostat: Thermostat) -> str:
    return thermostat.name or str(thermostat.base_url)


def status_items(info: ThermostatInfo) -> list[tuple[str, str, str]]:
    """Flatten a snapshot into (category, label, value) rows."""
    units = info.temp_units
    return [
        ("Thermostat", "Name", info.name or "(unnamed)"),
        ("Thermostat", "Mode", str(info.mode)),
        ("Thermostat", "State", str(info.state)),
        ("Thermostat", "Active stage", str(info.active_stage)),
        ("Thermostat", "Available modes", str(info.available_modes)),
        ("Temperature", "Current", _temp(info.space_temp, units)),
        ("Temperature", "Heat setpoint", _temp(info.heat_temp, units)),
        ("Temperature", "Cool setpoint", _temp(info.cool_temp, units)),
        (
            "Temperature",
            "Heat range",
            f"{_temp(info.heat_temp_min, units)} - "
            f"{_temp(info.heat_temp_max, units)}",
        ),
        (
            "Temperature",
            "Cool range",
            f"{_temp(info.cool_temp_min, units)} - "
            f"{_temp(info.cool_temp_max, units)}",
        ),
        ("Temperature", "Setpoint delta", f"{info.setpoint_delta:g}"),
        ("Fan", "Setting", str(info.fan)),
        ("Fan", "Running", str(info.fan_state)),
        ("Schedule", "Schedule", str(info.schedule)),
        ("Schedule", "Period", str(info.schedule_part)),
        ("Schedule", "Away", str(info.away)),
        ("Schedule", "Holiday", str(info.holiday)),
        ("Schedule", "Override", str(info.override)),
        ("Schedule", "Override minutes", str(info.override_time)),
        ("Humidity", "Current", f"{info.humidity:g}%"),
        ("Humidity", "Humidify setpoint", f"{info.hum_setpoint:g}%"),
        ("Humidity", "Dehumidify setpoint", f"{info.dehum_setpoint:g}%"),
        ("Humidity", "Humidifier", str(info.humidifier)),
    ]


async def handle_discover_request(timeout: float) -> list[str]:
    """Run one discovery pass and list the zones that answered."""
    stream = await discover(timeout)
    found = await stream.collect()
    _logger.info(f"Discovered {len(found)} thermostat(s)")
    _formatter.print_zone_list([(d.name, str(d.base_url)) for d in found])
    if stream.dropped:
        _formatter.print_info(
            f"{stream.dropped} result(s) dropped before they could be shown"
        )
    return [d.name for d in found]


async def handle_set_temps_request(
    thermostat: Thermostat, heat: float | None, cool: float | None
) -> None:
    """Apply heat and/or cool setpoints, then show the result."""
    if heat is None and cool is None:
        _formatter.print_error(
            "Give --heat and/or --cool", title="Nothing to do"
        )
        return
    if heat is not None and cool is not None:
        await thermostat.set_heat_cool_temps(heat, cool)
    elif heat is not None:
        await thermostat.set_heat_temp(heat)
    elif cool is not None:
        await thermostat.set_cool_temp(cool)

    info = await thermostat.info()
    units = info.temp_units
    zone = info.name or _who(thermostat)
    _formatter.print_status_table(
        [
            (zone, "Mode", str(info.mode)),
            (zone, "Current", _temp(info.space_temp, units)),
            (zone, "Heat", _temp(info.heat_temp, units)),
            (zone, "Cool", _temp(info.cool_temp, units)),
        ]
    )


async def handle_status_request(thermostat: Thermostat, raw: bool) -> None:
    info = await thermostat.info()
    if raw:
        _formatter.print_json_highlighted(
            info.model_dump(mode="json", by_alias=True)
        )
    else:
        _formatter.print_status_table(status_items(info))


async def handle_set_mode_request(thermostat: Thermostat, name: str) -> None:
    mode = ThermostatMode.from_label(name)
    await thermostat.set_mode(mode)
    _formatter.print_success(f"{_who(thermostat)}: mode {mode}")


async def handle_set_fan_request(thermostat: Thermostat, name: str) -> None:
    fan = FanSetting.from_label(name)
    await thermostat.set_fan_mode(fan)
    _formatter.print_success(f"{_who(thermostat)}: fan {fan}")


async def handle_set_away_request(thermostat: Thermostat, name: str) -> None:
    away = AwayState.from_label(name)
    await thermostat.set_away(away)
    _formatter.print_success(f"{_who(thermostat)}: {away}")


async def handle_set_schedule_request(
    thermostat: Thermostat, enabled: bool
) -> None:
    schedule = ScheduleState.ENABLED if enabled else ScheduleState.DISABLED
    await thermostat.set_schedule(schedule)
    _formatter.print_success(f"{_who(thermostat)}: schedule {schedule}")


async def handle_set_units_request(thermostat: Thermostat, name: str) -> None:
    units = TempUnits.from_label(name)
    await thermostat.set_temp_units(units)
    _formatter.print_success(f"{_who(thermostat)}: units {units}")


async def handle_set_humidity_request(
    thermostat: Thermostat,
    humidify: float | None,
    dehumidify: float | None,
) -> None:
    """Apply humidify/dehumidify setpoints, one settings write each."""
    if humidify is None and dehumidify is None:
        _formatter.print_error(
            "Give --humidify and/or --dehumidify", title="Nothing to do"
        )
        return
    if humidify is not None:
        await thermostat.set_humidify_setpoint(humidify)
        _formatter.print_success(f"Humidify setpoint {humidify:g}%")
    if dehumidify is not None:
        await thermostat.set_dehumidify_setpoint(dehumidify)
        _formatter.print_success(f"Dehumidify setpoint {dehumidify:g}%")


async def handle_sensors_request(thermostat: Thermostat) -> None:
    sensors = await thermostat.sensors()
    rows = [
        [
            name,
            str(sensor.type),
            f"{sensor.temp:g}",
            f"{sensor.humidity:g}%" if sensor.humidity else "",
            f"{sensor.battery:g}%" if sensor.battery else "",
        ]
        for name, sensor in sensors.items()
    ]
    _formatter.print_table(
        "Sensors", ["Name", "Type", "Temp", "Humidity", "Battery"], rows
    )


async def handle_alerts_request(thermostat: Thermostat) -> None:
    alerts = await thermostat.alerts()
    rows = [
        [name, "active" if alert.active else "-"]
        for name, alert in alerts.items()
    ]
    _formatter.print_table("Alerts", ["Alert", "State"], rows)


async def handle_runtimes_request(thermostat: Thermostat) -> None:
    """Print daily runtime minutes per stage."""
    runtimes = await thermostat.runtimes()
    rows = [
        [
            datetime.fromtimestamp(r.timestamp).strftime("%Y-%m-%d"),
            f"{r.heat_stage1:g}",
            f"{r.heat_stage2:g}",
            f"{r.cool_stage1:g}",
            f"{r.cool_stage2:g}",
            f"{r.auxiliary_stage1:g}",
            f"{r.free_cooling:g}",
        ]
        for r in runtimes
    ]
    _formatter.print_table(
        "Runtimes (minutes)",
        ["Day", "Heat 1", "Heat 2", "Cool 1", "Cool 2", "Aux 1", "Free cool"],
        rows,
    )
