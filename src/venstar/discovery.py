"""SSDP discovery of Venstar thermostats.

A single M-SEARCH request is multicast to ``239.255.255.250:1900`` and the
socket then listens until a deadline. Every response is run through
:func:`~venstar.descriptor.parse_descriptor`; thermostats are streamed to the
caller as they answer.

Example:
    >>> stream = await discover(timeout=3)
    >>> async for thermostat in stream:
    ...     print(thermostat.name, thermostat.base_url)

The stream holds at most ``max_pending`` undelivered results. Delivery never
blocks the listener: when a slow consumer lets the buffer fill up, the oldest
pending result is dropped (and logged) to make room for the newest one.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from collections import deque
from typing import Any

from yarl import URL

from .constants import (
    DEFAULT_DISCOVERY_TIMEOUT,
    DISCOVERY_QUEUE_SIZE,
    SSDP_ADDR,
    SSDP_MX,
    SSDP_PORT,
    SSDP_SEARCH_TARGET,
)
from .descriptor import DeviceDescriptor, parse_descriptor
from .exceptions import DescriptorParseError, DiscoveryError

_logger = logging.getLogger(__name__)

__all__ = [
    "DiscoveryStream",
    "build_search_request",
    "discover",
    "find_thermostat",
]


def build_search_request(
    host: str = SSDP_ADDR, port: int = SSDP_PORT
) -> bytes:
    """Build the M-SEARCH datagram.

    Example:
        >>> build_search_request().splitlines()[0]
        b'M-SEARCH * HTTP/1.1'
    """
    lines = [
        "M-SEARCH * HTTP/1.1",
        f"HOST: {host}:{port}",
        'MAN: "ssdp:discover"',
        f"ST: {SSDP_SEARCH_TARGET}",
        f"MX: {SSDP_MX}",
    ]
    return ("\r\n".join(lines) + "\r\n\n").encode("ascii")


class DiscoveryStream:
    """Async iterator over thermostats answering one search.

    Yields zero or more :class:`DeviceDescriptor` values and then stops. It
    never raises for network conditions: reaching the deadline ends it
    cleanly, and socket errors are logged before ending it.
    """

    def __init__(self, max_pending: int = DISCOVERY_QUEUE_SIZE) -> None:
        if max_pending < 1:
            raise ValueError(
                f"max_pending must be at least 1, got {max_pending}"
            )
        self.max_pending = max_pending
        self._pending: deque[DeviceDescriptor] = deque(maxlen=max_pending)
        self._wakeup = asyncio.Event()
        self._done = False
        self._seen: set[URL] = set()
        self._deadline_handle: asyncio.TimerHandle | None = None
        self.dropped = 0
        self.received = 0

    @property
    def done(self) -> bool:
        """True once the listener has stopped; pending results may remain."""
        return self._done

    def _handle_datagram(self, data: bytes, addr: Any) -> None:
        if self._done:
            return
        self.received += 1
        try:
            descriptor = parse_descriptor(data)
        except DescriptorParseError as e:
            _logger.debug(f"Ignoring malformed response from {addr}: {e}")
            return
        if descriptor is None:
            return
        if descriptor.base_url in self._seen:
            _logger.debug(f"Duplicate response from {descriptor.base_url}")
            return
        self._seen.add(descriptor.base_url)
        self._deliver(descriptor)

    def _deliver(self, descriptor: DeviceDescriptor) -> None:
        if len(self._pending) >= self.max_pending:
            dropped = self._pending[0]
            self.dropped += 1
            _logger.warning(
                f"Discovery buffer full ({self.max_pending}), "
                f"dropping undelivered result {dropped}"
            )
        # deque drops the oldest entry when at maxlen
        self._pending.append(descriptor)
        self._wakeup.set()

    def _finish(self) -> None:
        if self._done:
            return
        self._done = True
        if self._deadline_handle is not None:
            self._deadline_handle.cancel()
        self._wakeup.set()
        _logger.debug(
            f"Discovery finished: {self.received} response(s), "
            f"{len(self._seen)} thermostat(s), {self.dropped} dropped"
        )

    def __aiter__(self) -> DiscoveryStream:
        return self

    async def __anext__(self) -> DeviceDescriptor:
        while True:
            if self._pending:
                return self._pending.popleft()
            if self._done:
                raise StopAsyncIteration
            self._wakeup.clear()
            await self._wakeup.wait()

    async def collect(self) -> list[DeviceDescriptor]:
        """Drain the stream into a list."""
        return [descriptor async for descriptor in self]


class _SearchProtocol(asyncio.DatagramProtocol):
    """Feeds datagrams from the search socket into a stream."""

    def __init__(self, stream: DiscoveryStream) -> None:
        self.stream = stream
        self.transport: asyncio.DatagramTransport | None = None
        self.error: Exception | None = None

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport  # type: ignore[assignment]

    def datagram_received(self, data: bytes, addr: Any) -> None:
        self.stream._handle_datagram(bytes(data), addr)

    def error_received(self, exc: Exception) -> None:
        if self.error is None:
            self.error = exc
        _logger.error(f"Discovery listener error: {exc}")
        self.stream._finish()
        if self.transport is not None:
            self.transport.close()

    def connection_lost(self, exc: Exception | None) -> None:
        if exc is not None:
            _logger.error(f"Discovery socket closed with error: {exc}")
        self.stream._finish()


async def discover(
    timeout: float = DEFAULT_DISCOVERY_TIMEOUT,
    *,
    target: tuple[str, int] = (SSDP_ADDR, SSDP_PORT),
    max_pending: int = DISCOVERY_QUEUE_SIZE,
) -> DiscoveryStream:
    """Search the local network for thermostats.

    Returns as soon as the search has been sent; results arrive through the
    returned stream until ``timeout`` seconds have elapsed. There is no way
    to stop a search early other than the timeout.

    Args:
        timeout: Seconds to listen for responses
        target: Address the search is sent to
        max_pending: Results buffered for the consumer before the oldest
            is dropped

    Returns:
        Stream of discovered thermostats

    Raises:
        DiscoveryError: If the UDP endpoint cannot be created or the
            search cannot be sent
    """
    loop = asyncio.get_running_loop()
    stream = DiscoveryStream(max_pending=max_pending)

    try:
        transport, protocol = await loop.create_datagram_endpoint(
            lambda: _SearchProtocol(stream),
            local_addr=("0.0.0.0", 0),
            family=socket.AF_INET,
        )
    except OSError as e:
        raise DiscoveryError(f"cannot open discovery socket: {e}") from e

    stream._deadline_handle = loop.call_later(max(timeout, 0), transport.close)

    host, port = target
    _logger.debug(
        f"Sending M-SEARCH to {host}:{port}, listening for {timeout}s"
    )
    transport.sendto(build_search_request(host, port), target)
    # The transport reports a failed send through error_received
    if protocol.error is not None:
        transport.close()
        raise DiscoveryError(
            f"cannot send search to {host}:{port}: {protocol.error}"
        ) from protocol.error
    return stream


async def find_thermostat(
    name: str, timeout: float = DEFAULT_DISCOVERY_TIMEOUT, **kwargs: Any
) -> DeviceDescriptor | None:
    """Discover thermostats and return the first one named ``name``.

    Names are compared case-insensitively.

    Args:
        name: Zone name to look for
        timeout: Seconds to listen for responses
        **kwargs: Passed through to :func:`discover`

    Returns:
        The matching descriptor, or None if nothing matched before the
        timeout
    """
    wanted = name.lower()
    stream = await discover(timeout, **kwargs)
    async for descriptor in stream:
        if descriptor.name.lower() == wanted:
            _logger.info(f"Found thermostat {descriptor}")
            return descriptor
    _logger.info(f"No thermostat named {name!r} answered within {timeout}s")
    return None
