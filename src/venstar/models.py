"""Data models for the Venstar local (ECP) API.

Query responses are parsed into pydantic models using the device's own
lowercase JSON keys as aliases. Mutation requests are expressed as frozen
intent models: seed one from a :class:`ThermostatInfo` snapshot, then chain
``with_*`` calls, each of which returns a modified copy.

Example snapshot (``GET /query/info``)::

    {"name":"THERMOSTAT","mode":3,"state":1,"activestage":1,"fan":0,
     "fanstate":0,"tempunits":0,"schedule":0,"schedulepart":0,"holiday":0,
     "override":0,"overridetime":0,"forceunocc":0,"spacetemp":71.0,
     "heattemp":73.0,"cooltemp":81.0,"cooltempmin":35.0,"cooltempmax":99.0,
     "heattempmin":35.0,"heattempmax":99.0,"setpointdelta":2,
     "availablemodes":0}
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Annotated, Any, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .constants import MIN_SETPOINT_SPREAD
from .encoding import FormField
from .enums import (
    AvailableModes,
    AwayState,
    DemandStage,
    DeviceIntEnum,
    FanSetting,
    FanState,
    ForceUnoccState,
    HolidayState,
    HumidifierState,
    OverrideState,
    SchedulePart,
    ScheduleState,
    SensorType,
    TempUnits,
    ThermostatMode,
    ThermostatState,
)
from .exceptions import SetpointSpreadError

_logger = logging.getLogger(__name__)

__all__ = [
    "VenstarBaseModel",
    "ThermostatInfo",
    "SensorInfo",
    "SensorsResponse",
    "AlertInfo",
    "AlertsResponse",
    "RuntimeInfo",
    "RuntimesResponse",
    "ControlIntent",
    "SettingsIntent",
]


# ============================================================================
# Conversion Helpers & Validators
# ============================================================================


def enum_validator(enum_class: type[DeviceIntEnum]) -> Callable[[Any], Any]:
    """Create a validator converting raw codes to ``enum_class``.

    Unknown codes become pseudo-members rather than validation errors.
    """

    def validate(value: Any) -> Any:
        if isinstance(value, enum_class):
            return value
        if isinstance(value, bool):
            return enum_class(int(value))
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(
                    f"{enum_class.__name__} code must be integral, "
                    f"got {value!r}"
                )
            return enum_class(int(value))
        if isinstance(value, int):
            return enum_class(value)
        return enum_class(int(value))

    return validate


def _sensor_type_validator(value: Any) -> Any:
    """Keep unrecognized sensor types as plain strings."""
    if isinstance(value, SensorType):
        return value
    try:
        return SensorType(value)
    except ValueError:
        _logger.debug(f"Unknown sensor type {value!r}")
        return str(value)


Mode = Annotated[
    ThermostatMode, BeforeValidator(enum_validator(ThermostatMode))
]
State = Annotated[
    ThermostatState, BeforeValidator(enum_validator(ThermostatState))
]
Stage = Annotated[DemandStage, BeforeValidator(enum_validator(DemandStage))]
Fan = Annotated[FanSetting, BeforeValidator(enum_validator(FanSetting))]
FanRunning = Annotated[FanState, BeforeValidator(enum_validator(FanState))]
Units = Annotated[TempUnits, BeforeValidator(enum_validator(TempUnits))]
Schedule = Annotated[
    ScheduleState, BeforeValidator(enum_validator(ScheduleState))
]
Part = Annotated[SchedulePart, BeforeValidator(enum_validator(SchedulePart))]
Away = Annotated[AwayState, BeforeValidator(enum_validator(AwayState))]
Holiday = Annotated[
    HolidayState, BeforeValidator(enum_validator(HolidayState))
]
Override = Annotated[
    OverrideState, BeforeValidator(enum_validator(OverrideState))
]
ForceUnocc = Annotated[
    ForceUnoccState, BeforeValidator(enum_validator(ForceUnoccState))
]
Humidifier = Annotated[
    HumidifierState, BeforeValidator(enum_validator(HumidifierState))
]
Modes = Annotated[
    AvailableModes, BeforeValidator(enum_validator(AvailableModes))
]


class VenstarBaseModel(BaseModel):
    """Base model for all Venstar models."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",  # Firmware adds keys between releases
    )


# ============================================================================
# Query models
# ============================================================================


class ThermostatInfo(VenstarBaseModel):
    """Point-in-time state of a thermostat from ``/query/info``."""

    name: str = ""
    mode: Mode = ThermostatMode.OFF
    state: State = ThermostatState.IDLE
    active_stage: Stage = Field(default=DemandStage.OFF, alias="activestage")
    fan: Fan = FanSetting.AUTO
    fan_state: FanRunning = Field(default=FanState.OFF, alias="fanstate")
    temp_units: Units = Field(default=TempUnits.FAHRENHEIT, alias="tempunits")
    schedule: Schedule = ScheduleState.DISABLED
    schedule_part: Part = Field(
        default=SchedulePart.INACTIVE, alias="schedulepart"
    )
    away: Away = AwayState.HOME
    holiday: Holiday = HolidayState.NOT_HOLIDAY
    override: Override = OverrideState.OFF
    override_time: int = Field(
        default=0,
        alias="overridetime",
        description="Remaining override time",
        json_schema_extra={"unit_of_measurement": "min"},
    )
    force_unocc: ForceUnocc = Field(
        default=ForceUnoccState.OFF, alias="forceunocc"
    )
    space_temp: float = Field(
        default=0.0,
        alias="spacetemp",
        description="Current space temperature",
    )
    heat_temp: float = Field(
        default=0.0, alias="heattemp", description="Heat setpoint"
    )
    cool_temp: float = Field(
        default=0.0, alias="cooltemp", description="Cool setpoint"
    )
    cool_temp_min: float = Field(default=0.0, alias="cooltempmin")
    cool_temp_max: float = Field(default=0.0, alias="cooltempmax")
    heat_temp_min: float = Field(default=0.0, alias="heattempmin")
    heat_temp_max: float = Field(default=0.0, alias="heattempmax")
    setpoint_delta: float = Field(
        default=0.0,
        alias="setpointdelta",
        description="Minimum heat/cool separation configured on the device",
    )
    humidity: float = Field(
        default=0.0,
        alias="hum",
        json_schema_extra={"unit_of_measurement": "%"},
    )
    hum_setpoint: float = 0.0
    dehum_setpoint: float = 0.0
    humidifier: Humidifier = Field(
        default=HumidifierState.OFF, alias="hum_active"
    )
    available_modes: Modes = Field(
        default=AvailableModes.ALL, alias="availablemodes"
    )

    def control_intent(self) -> ControlIntent:
        """Seed a control request from this snapshot."""
        return ControlIntent(
            mode=self.mode,
            fan=self.fan,
            heat_temp=self.heat_temp,
            cool_temp=self.cool_temp,
        )

    def settings_intent(self) -> SettingsIntent:
        """Seed a settings request from this snapshot."""
        return SettingsIntent(
            temp_units=self.temp_units,
            away=self.away,
            schedule=self.schedule,
            hum_setpoint=self.hum_setpoint,
            dehum_setpoint=self.dehum_setpoint,
        )


class SensorInfo(VenstarBaseModel):
    """One sensor reading from ``/query/sensors``."""

    name: str = ""
    temp: float = 0.0
    humidity: float = Field(default=0.0, alias="hum")
    light: float = Field(default=0.0, alias="intensity")
    indoor_air_quality: float = Field(default=0.0, alias="iaq")
    co2_ppm: float = Field(default=0.0, alias="co2")
    battery: float = 0.0
    type: Annotated[
        Union[SensorType, str], BeforeValidator(_sensor_type_validator)
    ] = ""


class SensorsResponse(VenstarBaseModel):
    sensors: list[SensorInfo] = Field(default_factory=list)


class AlertInfo(VenstarBaseModel):
    """A named alert flag from ``/query/alerts``."""

    name: str = ""
    active: bool = False


class AlertsResponse(VenstarBaseModel):
    alerts: list[AlertInfo] = Field(default_factory=list)


class RuntimeInfo(VenstarBaseModel):
    """Daily equipment runtime sample from ``/query/runtimes``.

    Runtimes are reported in minutes for the day starting at ``timestamp``.
    """

    timestamp: float = Field(default=0.0, alias="ts")
    heat: float = 0.0
    heat_stage1: float = Field(default=0.0, alias="heat1")
    heat_stage2: float = Field(default=0.0, alias="heat2")
    cool: float = 0.0
    cool_stage1: float = Field(default=0.0, alias="cool1")
    cool_stage2: float = Field(default=0.0, alias="cool2")
    auxiliary_stage1: float = Field(default=0.0, alias="aux1")
    auxiliary_stage2: float = Field(default=0.0, alias="aux2")
    free_cooling: float = Field(default=0.0, alias="fc")
    override: float = Field(default=0.0, alias="ov")
    filter_hours: float = Field(default=0.0, alias="filterHours")
    filter_days: float = Field(default=0.0, alias="filterDays")


class RuntimesResponse(VenstarBaseModel):
    runtimes: list[RuntimeInfo] = Field(default_factory=list)


# ============================================================================
# Mutation intents
# ============================================================================


class _IntentModel(VenstarBaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class ControlIntent(_IntentModel):
    """Body of a ``POST /control`` request.

    The device needs all four fields on every request, so intents are always
    derived from a fresh snapshot via :meth:`ThermostatInfo.control_intent`.
    """

    mode: Mode
    fan: Fan
    heat_temp: Annotated[float, FormField("heattemp")]
    cool_temp: Annotated[float, FormField("cooltemp")]

    def with_mode(self, mode: ThermostatMode) -> ControlIntent:
        return self.model_copy(update={"mode": ThermostatMode(mode)})

    def with_fan(self, fan: FanSetting) -> ControlIntent:
        return self.model_copy(update={"fan": FanSetting(fan)})

    def with_heat_temp(self, temp: float) -> ControlIntent:
        return self.model_copy(update={"heat_temp": float(temp)})

    def with_cool_temp(self, temp: float) -> ControlIntent:
        return self.model_copy(update={"cool_temp": float(temp)})

    def check_setpoints(
        self, min_spread: float = MIN_SETPOINT_SPREAD
    ) -> None:
        """Ensure the cool setpoint sits far enough above the heat setpoint.

        Raises:
            SetpointSpreadError: If ``cool_temp - heat_temp < min_spread``
        """
        if self.cool_temp - self.heat_temp < min_spread:
            raise SetpointSpreadError(
                self.heat_temp, self.cool_temp, min_spread
            )


class SettingsIntent(_IntentModel):
    """Body of a ``POST /settings`` request."""

    temp_units: Annotated[Units, FormField("tempunits")]
    away: Away
    schedule: Schedule
    hum_setpoint: float
    dehum_setpoint: float

    def with_temp_units(self, units: TempUnits) -> SettingsIntent:
        return self.model_copy(update={"temp_units": TempUnits(units)})

    def with_away(self, away: AwayState) -> SettingsIntent:
        return self.model_copy(update={"away": AwayState(away)})

    def with_schedule(self, schedule: ScheduleState) -> SettingsIntent:
        return self.model_copy(update={"schedule": ScheduleState(schedule)})

    def with_humidify_setpoint(self, setpoint: float) -> SettingsIntent:
        return self.model_copy(update={"hum_setpoint": float(setpoint)})

    def with_dehumidify_setpoint(self, setpoint: float) -> SettingsIntent:
        return self.model_copy(update={"dehum_setpoint": float(setpoint)})
