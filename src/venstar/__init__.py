"""Local-network discovery and control for Venstar thermostats."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("venstar-ecp")
except PackageNotFoundError:  # pragma: no cover - running from a checkout
    __version__ = "unknown"

from .descriptor import DeviceDescriptor, parse_descriptor
from .device import Thermostat
from .discovery import DiscoveryStream, discover, find_thermostat
from .encoding import FormField, encode_form
from .enums import (
    AvailableModes,
    AwayState,
    DemandStage,
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
from .exceptions import (
    DescriptorParseError,
    DeviceCommandError,
    DeviceConnectionError,
    DeviceError,
    DiscoveryError,
    EncodingError,
    HTTPStatusError,
    ProtocolError,
    SetpointSpreadError,
    StateFetchError,
    ValidationError,
    VenstarError,
)
from .models import (
    AlertInfo,
    ControlIntent,
    RuntimeInfo,
    SensorInfo,
    SettingsIntent,
    ThermostatInfo,
)
from .status import AckEnvelope, interpret_ack

__all__ = [
    "__version__",
    # Discovery
    "discover",
    "find_thermostat",
    "DiscoveryStream",
    "DeviceDescriptor",
    "parse_descriptor",
    # Control
    "Thermostat",
    "ThermostatInfo",
    "SensorInfo",
    "AlertInfo",
    "RuntimeInfo",
    "ControlIntent",
    "SettingsIntent",
    "AckEnvelope",
    "interpret_ack",
    "FormField",
    "encode_form",
    # Enums
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
    # Exceptions
    "VenstarError",
    "DiscoveryError",
    "DescriptorParseError",
    "DeviceError",
    "DeviceConnectionError",
    "HTTPStatusError",
    "ProtocolError",
    "StateFetchError",
    "DeviceCommandError",
    "ValidationError",
    "SetpointSpreadError",
    "EncodingError",
]
