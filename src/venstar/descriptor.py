"""Parsing of SSDP search responses into device descriptors.

A search response is an HTTP-response-shaped header block with no body::

    HTTP/1.1 200 OK
    Cache-Control: max-age=300
    ST: venstar:thermostat:ecp
    Location: http://192.168.1.40/
    USN: ecp:00:23:a7:3a:b2:72:name:Living%20Room:type:residential

Only responses advertising the Venstar service type describe a thermostat;
everything else on the multicast group is ignored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from multidict import CIMultiDict, CIMultiDictProxy
from yarl import URL

from .constants import VENSTAR_SERVICE_TYPE
from .exceptions import DescriptorParseError

_logger = logging.getLogger(__name__)

__all__ = ["DeviceDescriptor", "parse_descriptor", "parse_usn_name"]

_STATUS_LINE = re.compile(r"^HTTP/\d\.\d (\d{3})(?: .*)?$")
_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class DeviceDescriptor:
    """Identity of a thermostat found by discovery.

    Attributes:
        name: Display name from the USN header, possibly empty
        base_url: Absolute address all API requests are made against
        headers: Raw response headers, kept for diagnostics
    """

    name: str
    base_url: URL
    headers: CIMultiDictProxy[str] = field(
        default_factory=lambda: CIMultiDictProxy(CIMultiDict()),
        compare=False,
        repr=False,
    )

    def __str__(self) -> str:
        return f"{self.name}: {self.base_url}"


def parse_usn_name(usn: str) -> str:
    """Extract the display name from a colon-delimited USN header.

    The token following the first ``name`` token (case-insensitive) is the
    name. A missing token, or one in last position, yields ``""``.

    Example:
        >>> parse_usn_name("ecp:00:23:a7:3a:b2:72:name:Office:type:x")
        'Office'
    """
    parts = usn.split(":")
    for i, part in enumerate(parts):
        if part.lower() == "name" and i < len(parts) - 1:
            return parts[i + 1]
    return ""


def _parse_header_block(raw: bytes) -> CIMultiDictProxy[str]:
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        # Header values may carry obs-text; latin-1 maps every byte
        text = raw.decode("latin-1")

    lines = _LINE_BREAK.split(text)
    if not _STATUS_LINE.match(lines[0]):
        raise DescriptorParseError(
            f"malformed status line: {lines[0][:64]!r}", raw
        )

    pairs: list[tuple[str, str]] = []
    for line in lines[1:]:
        if line == "":
            break
        if line[0] in " \t":
            # Obsolete line folding continues the previous header
            if not pairs:
                raise DescriptorParseError(
                    f"continuation before first header: {line!r}", raw
                )
            key, value = pairs[-1]
            pairs[-1] = (key, f"{value} {line.strip()}")
            continue
        key, sep, value = line.partition(":")
        if not sep or not key or key != key.strip() or " " in key:
            raise DescriptorParseError(
                f"malformed header line: {line[:64]!r}", raw
            )
        pairs.append((key, value.strip()))
    return CIMultiDictProxy(CIMultiDict(pairs))


def parse_descriptor(raw: bytes) -> DeviceDescriptor | None:
    """Parse one SSDP response.

    Args:
        raw: Datagram payload

    Returns:
        A descriptor for a Venstar thermostat, or None when the response is
        well formed but advertises some other service

    Raises:
        DescriptorParseError: If the payload is not a valid header block,
            or a thermostat response has an unusable Location header
    """
    headers = _parse_header_block(raw)

    if headers.get("ST") != VENSTAR_SERVICE_TYPE:
        return None

    location = headers.get("Location", "")
    try:
        base_url = URL(location)
    except (TypeError, ValueError) as e:
        raise DescriptorParseError(
            f"invalid Location {location!r}", raw
        ) from e
    if not base_url.is_absolute() or not base_url.host:
        raise DescriptorParseError(
            f"Location is not an absolute URL: {location!r}", raw
        )

    name = parse_usn_name(headers.get("USN", ""))
    _logger.debug(f"Parsed thermostat descriptor {name!r} at {base_url}")
    return DeviceDescriptor(name=name, base_url=base_url, headers=headers)
