"""Tests for device enumerations."""

import pytest

from venstar.enums import (
    AvailableModes,
    HolidayState,
    SchedulePart,
    TempUnits,
    ThermostatMode,
    ThermostatState,
)


def test_known_codes_map_to_members():
    assert ThermostatMode(0) is ThermostatMode.OFF
    assert ThermostatMode(3) is ThermostatMode.AUTO
    assert ThermostatState(4) is ThermostatState.ERROR
    assert SchedulePart(255) is SchedulePart.INACTIVE


def test_labels_are_lowercase_names():
    assert str(ThermostatMode.AUTO) == "auto"
    assert f"{ThermostatState.HEATING}" == "heating"
    assert ThermostatMode.HEAT.label == "heat"


def test_label_overrides():
    assert TempUnits.FAHRENHEIT.label == "°F"
    assert TempUnits.CELSIUS.label == "°C"
    assert HolidayState.NOT_HOLIDAY.label == "regular"
    assert AvailableModes.HEAT_COOL.label == "heat/cool"


def test_unknown_code_keeps_raw_value():
    mode = ThermostatMode(7)
    assert isinstance(mode, ThermostatMode)
    assert mode == 7
    assert int(mode) == 7
    assert not mode.is_known
    assert mode.label == "ThermostatMode7"
    assert str(mode) == "ThermostatMode7"


def test_known_member_is_known():
    assert ThermostatMode.COOL.is_known


def test_non_integer_lookup_still_fails():
    with pytest.raises(ValueError):
        ThermostatMode("auto")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("auto", ThermostatMode.AUTO),
        ("AUTO", ThermostatMode.AUTO),
        (" heat ", ThermostatMode.HEAT),
        ("2", ThermostatMode.COOL),
    ],
)
def test_from_label(text, expected):
    assert ThermostatMode.from_label(text) is expected


def test_from_label_matches_name_or_override():
    assert TempUnits.from_label("celsius") is TempUnits.CELSIUS
    assert TempUnits.from_label("°F") is TempUnits.FAHRENHEIT


def test_from_label_rejects_unknown_text():
    with pytest.raises(ValueError, match="ThermostatMode"):
        ThermostatMode.from_label("turbo")
