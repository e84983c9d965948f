"""HTTP session construction for local thermostat connections."""

from __future__ import annotations

import aiohttp

from .constants import DEFAULT_REQUEST_TIMEOUT

__all__ = ["create_thermostat_session"]


def create_thermostat_session(
    timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT,
) -> aiohttp.ClientSession:
    """Create an aiohttp session for talking to thermostats on the LAN.

    The local API is plain HTTP. Connections are capped at two per host and
    closed after each request.

    Args:
        timeout_seconds: Total timeout applied to every request
    """
    connector = aiohttp.TCPConnector(
        limit_per_host=2,
        ssl=False,
        force_close=True,
    )
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout_seconds),
    )
