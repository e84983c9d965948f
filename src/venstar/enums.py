"""Integer-coded enumerations reported by Venstar thermostats.

Every enumeration is closed in the sense that the documented codes have
named members, but firmware updates occasionally add new codes. Instead of
rejecting those, lookups of an unknown code return a pseudo-member that
carries the raw value and a fallback label such as ``ThermostatMode7``.

Examples:
    >>> ThermostatMode(3)
    <ThermostatMode.AUTO: 3>
    >>> str(ThermostatMode.AUTO)
    'auto'
    >>> ThermostatMode(7).label
    'ThermostatMode7'
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any

__all__ = [
    "DeviceIntEnum",
    "ThermostatMode",
    "ThermostatState",
    "DemandStage",
    "FanSetting",
    "FanState",
    "TempUnits",
    "ScheduleState",
    "SchedulePart",
    "AwayState",
    "HolidayState",
    "OverrideState",
    "ForceUnoccState",
    "HumidifierState",
    "AvailableModes",
    "SensorType",
]


class DeviceIntEnum(IntEnum):
    """Base for device enumerations with lowercase labels."""

    @classmethod
    def _missing_(cls, value: Any) -> Any:
        if not isinstance(value, int) or isinstance(value, bool):
            return None
        pseudo = int.__new__(cls, value)
        pseudo._name_ = f"{cls.__name__}{value}"
        pseudo._value_ = value
        return pseudo

    @property
    def is_known(self) -> bool:
        """False for codes this library has no member for."""
        return self._name_ in type(self).__members__

    @property
    def label(self) -> str:
        """Canonical display label."""
        if not self.is_known:
            return self._name_
        override = _LABEL_OVERRIDES.get(type(self), {}).get(self._value_)
        return override or self._name_.lower()

    @classmethod
    def from_label(cls, text: str) -> DeviceIntEnum:
        """Look up a member by label, member name or numeric code.

        Raises:
            ValueError: If nothing matches
        """
        wanted = text.strip().lower()
        for member in cls:
            if wanted in (member.label.lower(), member.name.lower()):
                return member
        if wanted.isdigit():
            return cls(int(wanted))
        raise ValueError(f"{text!r} is not a valid {cls.__name__}")

    def __str__(self) -> str:
        return self.label

    def __format__(self, format_spec: str) -> str:
        return format(self.label, format_spec)


class ThermostatMode(DeviceIntEnum):
    """Operating mode selected on the thermostat."""

    OFF = 0
    HEAT = 1
    COOL = 2
    AUTO = 3


class ThermostatState(DeviceIntEnum):
    """What the equipment is doing right now."""

    IDLE = 0
    HEATING = 1
    COOLING = 2
    LOCKOUT = 3
    ERROR = 4


class DemandStage(DeviceIntEnum):
    OFF = 0
    HEATING1 = 1
    HEATING2 = 2
    COOLING1 = 3
    COOLING2 = 4


class FanSetting(DeviceIntEnum):
    AUTO = 0
    ON = 1


class FanState(DeviceIntEnum):
    OFF = 0
    ON = 1


class TempUnits(DeviceIntEnum):
    FAHRENHEIT = 0
    CELSIUS = 1


class ScheduleState(DeviceIntEnum):
    DISABLED = 0
    ENABLED = 1


class SchedulePart(DeviceIntEnum):
    """Active schedule period (255 when no schedule is running)."""

    MORNING = 0
    DAY = 1
    EVENING = 2
    NIGHT = 3
    INACTIVE = 255


class AwayState(DeviceIntEnum):
    HOME = 0
    AWAY = 1


class HolidayState(DeviceIntEnum):
    NOT_HOLIDAY = 0
    HOLIDAY = 1


class OverrideState(DeviceIntEnum):
    OFF = 0
    ON = 1


class ForceUnoccState(DeviceIntEnum):
    OFF = 0
    ON = 1


class HumidifierState(DeviceIntEnum):
    OFF = 0
    ON = 1


class AvailableModes(DeviceIntEnum):
    """Modes the installed equipment supports."""

    ALL = 0
    HEAT_COOL = 1
    HEAT = 2
    COOL = 3


class SensorType(str, Enum):
    """Remote sensor placement reported by ``/query/sensors``."""

    OUTDOOR = "Outdoor"
    RETURN = "Return"
    REMOTE = "Remote"
    SUPPLY = "Supply"


_LABEL_OVERRIDES: dict[type[DeviceIntEnum], dict[int, str]] = {
    TempUnits: {0: "°F", 1: "°C"},
    HolidayState: {0: "regular"},
    AvailableModes: {1: "heat/cool"},
}
