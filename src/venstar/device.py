"""Client for a single thermostat's local API.

Reads are plain ``GET`` requests decoded into models. Every mutation follows
the same read-modify-write sequence, because the device expects complete
bodies on its ``/control`` and ``/settings`` endpoints:

1. Fetch a fresh :class:`~venstar.models.ThermostatInfo` snapshot
2. Seed an intent from the snapshot
3. Apply the requested change
4. Validate setpoints (control requests only)
5. Form-encode the intent and ``POST`` it
6. Check the acknowledgement

The sequence is not atomic. A change made on the device, or by another
client, between steps 1 and 5 is silently overwritten by the submitted
intent, and concurrent mutations of the same thermostat race each other.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any, TypeVar

import aiohttp
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from yarl import URL

from .constants import (
    CONTROL_PATH,
    DEFAULT_REQUEST_TIMEOUT,
    MIN_SETPOINT_SPREAD,
    QUERY_ALERTS_PATH,
    QUERY_INFO_PATH,
    QUERY_RUNTIMES_PATH,
    QUERY_SENSORS_PATH,
    SETTINGS_PATH,
)
from .descriptor import DeviceDescriptor
from .encoding import encode_form
from .enums import (
    AwayState,
    FanSetting,
    ScheduleState,
    TempUnits,
    ThermostatMode,
)
from .exceptions import (
    DeviceConnectionError,
    DeviceError,
    HTTPStatusError,
    ProtocolError,
    SetpointSpreadError,
    StateFetchError,
)
from .models import (
    AlertInfo,
    AlertsResponse,
    ControlIntent,
    RuntimeInfo,
    RuntimesResponse,
    SensorInfo,
    SensorsResponse,
    SettingsIntent,
    ThermostatInfo,
)
from .session import create_thermostat_session
from .status import interpret_ack

_logger = logging.getLogger(__name__)

__all__ = ["Thermostat"]

M = TypeVar("M", bound=BaseModel)


class Thermostat:
    """Handle for one thermostat, addressed by its base URL.

    The client owns an aiohttp session when none is supplied; use it as an
    async context manager so the session is closed::

        async with Thermostat.from_descriptor(descriptor) as thermostat:
            await thermostat.set_heat_cool_temps(68, 74)
            info = await thermostat.info()

    Apart from that session the client holds no state, so separate
    thermostats can be driven concurrently.
    """

    def __init__(
        self,
        base_url: URL | str,
        *,
        name: str = "",
        session: aiohttp.ClientSession | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        url = URL(base_url)
        if not url.is_absolute():
            raise ValueError(f"base_url must be absolute, got {base_url!r}")
        self._base_url = url
        self.name = name
        self._timeout = timeout
        self._session = session
        self._owned_session = False

    @classmethod
    def from_descriptor(
        cls, descriptor: DeviceDescriptor, **kwargs: Any
    ) -> Thermostat:
        """Create a client for a discovered thermostat."""
        return cls(descriptor.base_url, name=descriptor.name, **kwargs)

    @property
    def base_url(self) -> URL:
        return self._base_url

    def __repr__(self) -> str:
        return f"Thermostat({self.name!r}, {str(self._base_url)!r})"

    def __str__(self) -> str:
        return f"{self.name}: {self._base_url}"

    async def __aenter__(self) -> Thermostat:
        if self._session is None:
            self._session = create_thermostat_session(self._timeout)
            self._owned_session = True
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._owned_session and self._session:
            await self._session.close()
            self._session = None
            self._owned_session = False

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _url(self, path: Sequence[str]) -> URL:
        return self._base_url.joinpath(*path)

    def _require_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError(
                "Session not initialized. Use 'async with Thermostat(...)' "
                "or pass session= to the constructor."
            )
        return self._session

    async def _request_json(
        self,
        method: str,
        path: Sequence[str],
        data: list[tuple[str, str]] | None = None,
    ) -> Any:
        session = self._require_session()
        url = self._url(path)
        _logger.debug(f"{method} {url} {data or ''}")
        try:
            async with session.request(method, url, data=data) as resp:
                if not 200 <= resp.status < 300:
                    raise HTTPStatusError(resp.status, resp.reason)
                body = await resp.text()
        except aiohttp.ClientError as e:
            raise DeviceConnectionError(
                f"{method} {url} failed: {e}"
            ) from e
        except TimeoutError as e:
            raise DeviceConnectionError(f"{method} {url} timed out") from e

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise ProtocolError(f"{url} returned invalid JSON: {e}") from e

    async def _get(self, path: Sequence[str], model: type[M]) -> M:
        payload = await self._request_json("GET", path)
        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            raise ProtocolError(
                f"unexpected {'/'.join(path)} response: {e}"
            ) from e

    async def _post(
        self, path: Sequence[str], intent: ControlIntent | SettingsIntent
    ) -> None:
        form = encode_form(intent)
        payload = await self._request_json("POST", path, data=form)
        interpret_ack(_as_dict(payload))
        _logger.info(f"{self}: {'/'.join(path)} accepted {dict(form)}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def info(self) -> ThermostatInfo:
        """Read the thermostat's current state."""
        return await self._get(QUERY_INFO_PATH, ThermostatInfo)

    async def sensors(self) -> dict[str, SensorInfo]:
        """Read all sensors, keyed by sensor name."""
        resp = await self._get(QUERY_SENSORS_PATH, SensorsResponse)
        return {sensor.name: sensor for sensor in resp.sensors}

    async def alerts(self) -> dict[str, AlertInfo]:
        """Read all alert flags, keyed by alert name."""
        resp = await self._get(QUERY_ALERTS_PATH, AlertsResponse)
        return {alert.name: alert for alert in resp.alerts}

    async def runtimes(self) -> list[RuntimeInfo]:
        """Read daily equipment runtime history."""
        resp = await self._get(QUERY_RUNTIMES_PATH, RuntimesResponse)
        return resp.runtimes

    # ------------------------------------------------------------------
    # Read-modify-write mutations
    # ------------------------------------------------------------------

    async def _snapshot(self) -> ThermostatInfo:
        try:
            return await self.info()
        except DeviceError as e:
            raise StateFetchError(
                f"error getting current settings: {e}"
            ) from e

    async def _submit_control(self, intent: ControlIntent) -> None:
        intent.check_setpoints()
        await self._post(CONTROL_PATH, intent)

    async def _submit_settings(self, intent: SettingsIntent) -> None:
        await self._post(SETTINGS_PATH, intent)

    async def set_mode(self, mode: ThermostatMode) -> None:
        """Change the operating mode, keeping setpoints and fan."""
        info = await self._snapshot()
        await self._submit_control(info.control_intent().with_mode(mode))

    async def set_fan_mode(self, fan: FanSetting) -> None:
        """Change the fan setting, keeping mode and setpoints."""
        info = await self._snapshot()
        await self._submit_control(info.control_intent().with_fan(fan))

    async def set_heat_temp(self, temp: float) -> None:
        """Change the heat setpoint.

        The mode is kept when it is Auto or Heat and switched to Heat
        otherwise.

        Raises:
            SetpointSpreadError: If the new setpoint comes within 2 degrees
                of the current cool setpoint
        """
        info = await self._snapshot()
        mode = info.mode
        if mode not in (ThermostatMode.AUTO, ThermostatMode.HEAT):
            mode = ThermostatMode.HEAT
        intent = info.control_intent().with_mode(mode).with_heat_temp(temp)
        await self._submit_control(intent)

    async def set_cool_temp(self, temp: float) -> None:
        """Change the cool setpoint.

        The mode is kept when it is Auto or Cool and switched to Cool
        otherwise.

        Raises:
            SetpointSpreadError: If the new setpoint comes within 2 degrees
                of the current heat setpoint
        """
        info = await self._snapshot()
        mode = info.mode
        if mode not in (ThermostatMode.AUTO, ThermostatMode.COOL):
            mode = ThermostatMode.COOL
        intent = info.control_intent().with_mode(mode).with_cool_temp(temp)
        await self._submit_control(intent)

    async def set_heat_cool_temps(self, heat: float, cool: float) -> None:
        """Set both setpoints and switch to Auto.

        If ``heat`` is above ``cool`` the two are swapped. The pair is
        validated before anything is sent to the device.

        Raises:
            SetpointSpreadError: If the setpoints are less than 2 degrees
                apart; no request is made in that case
        """
        if heat > cool:
            heat, cool = cool, heat
        if cool - heat < MIN_SETPOINT_SPREAD:
            raise SetpointSpreadError(heat, cool, MIN_SETPOINT_SPREAD)
        info = await self._snapshot()
        intent = (
            info.control_intent()
            .with_mode(ThermostatMode.AUTO)
            .with_heat_temp(heat)
            .with_cool_temp(cool)
        )
        await self._submit_control(intent)

    async def set_temp_units(self, units: TempUnits) -> None:
        info = await self._snapshot()
        await self._submit_settings(
            info.settings_intent().with_temp_units(units)
        )

    async def set_away(self, away: AwayState) -> None:
        info = await self._snapshot()
        await self._submit_settings(info.settings_intent().with_away(away))

    async def set_schedule(self, schedule: ScheduleState) -> None:
        info = await self._snapshot()
        await self._submit_settings(
            info.settings_intent().with_schedule(schedule)
        )

    async def set_humidify_setpoint(self, setpoint: float) -> None:
        info = await self._snapshot()
        await self._submit_settings(
            info.settings_intent().with_humidify_setpoint(setpoint)
        )

    async def set_dehumidify_setpoint(self, setpoint: float) -> None:
        info = await self._snapshot()
        await self._submit_settings(
            info.settings_intent().with_dehumidify_setpoint(setpoint)
        )


def _as_dict(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ProtocolError(
            f"expected an acknowledgement object, got {type(payload).__name__}"
        )
    return payload
