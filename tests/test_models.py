"""Tests for query models and mutation intents."""

import pydantic
import pytest

from venstar.enums import (
    AvailableModes,
    AwayState,
    DemandStage,
    FanSetting,
    HolidayState,
    HumidifierState,
    SchedulePart,
    TempUnits,
    ThermostatMode,
    ThermostatState,
)
from venstar.exceptions import SetpointSpreadError, ValidationError
from venstar.models import (
    ControlIntent,
    SensorInfo,
    SettingsIntent,
    ThermostatInfo,
)

INFO_PAYLOAD = {
    "name": "THERMOSTAT",
    "mode": 3,
    "state": 1,
    "activestage": 1,
    "fan": 0,
    "fanstate": 0,
    "tempunits": 1,
    "schedule": 0,
    "schedulepart": 0,
    "away": 1,
    "holiday": 0,
    "override": 0,
    "overridetime": 0,
    "forceunocc": 0,
    "spacetemp": 21.5,
    "heattemp": 20.0,
    "cooltemp": 26.0,
    "cooltempmin": 2.0,
    "cooltempmax": 37.0,
    "heattempmin": 2.0,
    "heattempmax": 37.0,
    "setpointdelta": 2,
    "hum": 45,
    "hum_setpoint": 30,
    "dehum_setpoint": 60,
    "hum_active": 1,
    "availablemodes": 1,
}


def test_thermostat_info_from_device_json():
    info = ThermostatInfo.model_validate(INFO_PAYLOAD)

    assert info.name == "THERMOSTAT"
    assert info.mode is ThermostatMode.AUTO
    assert info.state is ThermostatState.HEATING
    assert info.active_stage is DemandStage.HEATING1
    assert info.temp_units is TempUnits.CELSIUS
    assert info.schedule_part is SchedulePart.MORNING
    assert info.away is AwayState.AWAY
    assert info.holiday is HolidayState.NOT_HOLIDAY
    assert info.humidifier is HumidifierState.ON
    assert info.available_modes is AvailableModes.HEAT_COOL
    assert info.heat_temp_min == 2.0
    assert info.heat_temp_max == 37.0
    assert info.humidity == 45


def test_thermostat_info_tolerates_missing_and_extra_keys():
    info = ThermostatInfo.model_validate({"name": "Den", "newfield": 7})
    assert info.name == "Den"
    assert info.mode is ThermostatMode.OFF
    assert info.schedule_part is SchedulePart.INACTIVE


def test_unknown_enum_codes_preserved():
    info = ThermostatInfo.model_validate({"mode": 9, "state": 12})
    assert info.mode == 9
    assert info.mode.label == "ThermostatMode9"
    assert info.state == 12


def test_float_enum_codes_accepted():
    info = ThermostatInfo.model_validate({"mode": 2.0})
    assert info.mode is ThermostatMode.COOL


@pytest.mark.parametrize("code", [2.5, -0.1, 7.999])
def test_fractional_enum_codes_rejected(code):
    with pytest.raises(pydantic.ValidationError, match="integral"):
        ThermostatInfo.model_validate({"mode": code})


def test_populate_by_field_name():
    info = ThermostatInfo(heat_temp=65, cool_temp=72)
    assert info.heat_temp == 65
    assert info.cool_temp == 72


def test_control_intent_seeded_from_snapshot():
    info = ThermostatInfo.model_validate(INFO_PAYLOAD)
    intent = info.control_intent()
    assert intent == ControlIntent(
        mode=ThermostatMode.AUTO,
        fan=FanSetting.AUTO,
        heat_temp=20.0,
        cool_temp=26.0,
    )


def test_settings_intent_seeded_from_snapshot():
    info = ThermostatInfo.model_validate(INFO_PAYLOAD)
    intent = info.settings_intent()
    assert intent.temp_units is TempUnits.CELSIUS
    assert intent.away is AwayState.AWAY
    assert intent.hum_setpoint == 30
    assert intent.dehum_setpoint == 60


def test_intent_builders_return_copies():
    original = ControlIntent(mode=0, fan=0, heat_temp=60, cool_temp=70)
    changed = original.with_mode(ThermostatMode.HEAT).with_heat_temp(62.5)

    assert original.mode is ThermostatMode.OFF
    assert original.heat_temp == 60
    assert changed.mode is ThermostatMode.HEAT
    assert changed.heat_temp == 62.5
    assert changed.cool_temp == 70


def test_intents_are_frozen():
    intent = ControlIntent(mode=0, fan=0, heat_temp=60, cool_temp=70)
    with pytest.raises(pydantic.ValidationError):
        intent.heat_temp = 65


def test_intents_reject_unknown_fields():
    with pytest.raises(pydantic.ValidationError):
        SettingsIntent(
            temp_units=0,
            away=0,
            schedule=0,
            hum_setpoint=0,
            dehum_setpoint=0,
            holiday=1,
        )


@pytest.mark.parametrize("heat, cool", [(60, 62), (60, 70), (-5, 40)])
def test_check_setpoints_accepts_spread(heat, cool):
    intent = ControlIntent(mode=3, fan=0, heat_temp=heat, cool_temp=cool)
    intent.check_setpoints()


@pytest.mark.parametrize("heat, cool", [(60, 61.9), (60, 60), (70, 60)])
def test_check_setpoints_rejects_narrow_spread(heat, cool):
    intent = ControlIntent(mode=3, fan=0, heat_temp=heat, cool_temp=cool)
    with pytest.raises(SetpointSpreadError) as excinfo:
        intent.check_setpoints()

    error = excinfo.value
    assert isinstance(error, ValidationError)
    assert error.spread == pytest.approx(cool - heat)
    assert error.to_dict()["heat_temp"] == heat


def test_check_setpoints_custom_minimum():
    intent = ControlIntent(mode=3, fan=0, heat_temp=60, cool_temp=63)
    with pytest.raises(SetpointSpreadError, match="less than 4 degrees"):
        intent.check_setpoints(min_spread=4)


def test_sensor_battery_and_air_quality():
    sensor = SensorInfo.model_validate(
        {"name": "Remote", "temp": 70, "battery": 88, "iaq": 120, "co2": 600}
    )
    assert sensor.battery == 88
    assert sensor.indoor_air_quality == 120
    assert sensor.co2_ppm == 600
