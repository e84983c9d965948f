"""Exception hierarchy for the Venstar ECP client.

All library exceptions derive from :class:`VenstarError` so callers can
catch a single type for any library-specific failure::

    VenstarError
    ├── DiscoveryError
    ├── DescriptorParseError
    ├── DeviceError
    │   ├── DeviceConnectionError
    │   ├── HTTPStatusError
    │   ├── ProtocolError
    │   ├── StateFetchError
    │   └── DeviceCommandError
    ├── ValidationError
    │   └── SetpointSpreadError
    └── EncodingError
"""

from __future__ import annotations

from typing import Any

__all__ = [
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


class VenstarError(Exception):
    """Base exception for all library errors."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for structured logging."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            **self.details,
        }


class DiscoveryError(VenstarError):
    """The SSDP search endpoint could not be opened or used."""


class DescriptorParseError(VenstarError):
    """A discovery response is not a well-formed SSDP header block.

    Attributes:
        raw: The offending payload
    """

    def __init__(self, message: str, raw: bytes = b"") -> None:
        super().__init__(message)
        self.raw = raw


class DeviceError(VenstarError):
    """Base for failures talking to a thermostat's local API."""


class DeviceConnectionError(DeviceError):
    """Transport-level failure (connection refused, timeout, reset)."""


class HTTPStatusError(DeviceError):
    """The thermostat answered with a non-2xx HTTP status.

    Attributes:
        status: HTTP status code
        reason: HTTP status text
    """

    def __init__(self, status: int, reason: str | None = None) -> None:
        self.status = status
        self.reason = reason or ""
        super().__init__(
            f"{status} {self.reason}".strip(), status=status, reason=reason
        )


class ProtocolError(DeviceError):
    """The thermostat's reply could not be decoded."""


class StateFetchError(DeviceError):
    """Reading current state before a mutation failed.

    The original failure is available as ``__cause__``.
    """


class DeviceCommandError(DeviceError):
    """The thermostat rejected a control or settings request.

    Attributes:
        reason: Reason text reported by the device
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason or "device reported an error", reason=reason)


class ValidationError(VenstarError):
    """A requested change fails local validation; nothing was sent."""


class SetpointSpreadError(ValidationError):
    """Heat and cool setpoints are closer together than the device allows.

    Attributes:
        heat_temp: Requested heat setpoint
        cool_temp: Requested cool setpoint
        min_spread: Minimum allowed ``cool_temp - heat_temp``
    """

    def __init__(
        self, heat_temp: float, cool_temp: float, min_spread: float
    ) -> None:
        self.heat_temp = heat_temp
        self.cool_temp = cool_temp
        self.min_spread = min_spread
        super().__init__(
            f"difference between heat & cool temps ({self.spread:g}) "
            f"less than {min_spread:g} degrees",
            heat_temp=heat_temp,
            cool_temp=cool_temp,
            min_spread=min_spread,
        )

    @property
    def spread(self) -> float:
        return self.cool_temp - self.heat_temp


class EncodingError(VenstarError):
    """A value cannot be serialized into a form body.

    This indicates a mismatch between a model definition and the form
    encoder, not a runtime condition.

    Attributes:
        field: Offending field name, when applicable
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, field=field)
        self.field = field
