"""Constants for Venstar ECP discovery and local API communication."""

# SSDP discovery
SSDP_ADDR = "239.255.255.250"
SSDP_PORT = 1900
SSDP_SEARCH_TARGET = "ssdp:all"
SSDP_MX = 10  # Seconds a responder may delay its reply

# Service type advertised by Venstar thermostats. Responses carrying any
# other ST header are ignored.
VENSTAR_SERVICE_TYPE = "venstar:thermostat:ecp"

# Pending results held by a discovery stream before the oldest is dropped
DISCOVERY_QUEUE_SIZE = 10

DEFAULT_DISCOVERY_TIMEOUT = 2.0  # seconds
DEFAULT_REQUEST_TIMEOUT = 5.0  # seconds

# Minimum gap between cool and heat setpoints accepted by the firmware,
# in whatever unit the device currently reports.
MIN_SETPOINT_SPREAD = 2.0

# Local API endpoints, relative to the discovered base address
QUERY_INFO_PATH = ("query", "info")
QUERY_SENSORS_PATH = ("query", "sensors")
QUERY_ALERTS_PATH = ("query", "alerts")
QUERY_RUNTIMES_PATH = ("query", "runtimes")
CONTROL_PATH = ("control",)
SETTINGS_PATH = ("settings",)

# Note for maintainers:
# /control takes the complete mode/fan/heattemp/cooltemp set on every
# request and /settings takes every writable setting. Mutations fill both
# from a fresh /query/info snapshot.
