"""Tests for SSDP response parsing."""

import pytest
from yarl import URL

from venstar.descriptor import (
    DeviceDescriptor,
    parse_descriptor,
    parse_usn_name,
)
from venstar.exceptions import DescriptorParseError

THERMOSTAT_RESPONSE = (
    b"HTTP/1.1 200 OK\r\n"
    b"Cache-Control: max-age=300\r\n"
    b"ST: venstar:thermostat:ecp\r\n"
    b"Location: http://192.168.1.40/\r\n"
    b"USN: ecp:00:23:a7:3a:b2:72:name:Living Room:type:residential\r\n"
    b"\r\n"
)


def _response(
    st: str, location: str = "http://10.0.0.5/", usn: str = ""
) -> bytes:
    lines = ["HTTP/1.1 200 OK", f"ST: {st}", f"Location: {location}"]
    if usn:
        lines.append(f"USN: {usn}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode()


def test_parse_thermostat_response():
    descriptor = parse_descriptor(THERMOSTAT_RESPONSE)
    assert descriptor is not None
    assert descriptor.name == "Living Room"
    assert descriptor.base_url == URL("http://192.168.1.40/")
    assert descriptor.headers["cache-control"] == "max-age=300"
    assert str(descriptor) == "Living Room: http://192.168.1.40/"


@pytest.mark.parametrize(
    "st",
    [
        "upnp:rootdevice",
        "ssdp:all",
        "venstar:thermostat:ecp2",
        "VENSTAR:THERMOSTAT:ECP",
        " venstar:thermostat:ecp:",
    ],
)
def test_other_service_types_ignored(st):
    assert parse_descriptor(_response(st)) is None


def test_missing_st_ignored():
    raw = b"HTTP/1.1 200 OK\r\nLocation: http://10.0.0.5/\r\n\r\n"
    assert parse_descriptor(raw) is None


def test_header_names_case_insensitive():
    raw = (
        b"HTTP/1.1 200 OK\r\n"
        b"st: venstar:thermostat:ecp\r\n"
        b"LOCATION: http://10.0.0.9/\r\n"
        b"usn: ecp:name:Den\r\n\r\n"
    )
    descriptor = parse_descriptor(raw)
    assert descriptor is not None
    assert descriptor.name == "Den"
    assert descriptor.base_url.host == "10.0.0.9"


def test_bare_newlines_accepted():
    raw = THERMOSTAT_RESPONSE.replace(b"\r\n", b"\n")
    descriptor = parse_descriptor(raw)
    assert descriptor is not None
    assert descriptor.name == "Living Room"


def test_missing_usn_gives_empty_name():
    descriptor = parse_descriptor(_response("venstar:thermostat:ecp"))
    assert descriptor is not None
    assert descriptor.name == ""


@pytest.mark.parametrize(
    "usn, expected",
    [
        ("ecp:00:23:a7:3a:b2:72:name:Office:type:residential", "Office"),
        ("ecp:NAME:Upstairs", "Upstairs"),
        ("ecp:Name:Basement:type:commercial", "Basement"),
        ("ecp:00:23:a7:3a:b2:72:type:residential", ""),
        ("ecp:00:23:name", ""),
        ("", ""),
    ],
)
def test_parse_usn_name(usn, expected):
    assert parse_usn_name(usn) == expected


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"NOTIFY * HTTP/1.1\r\nST: venstar:thermostat:ecp\r\n\r\n",
        b"HTTP/1.1 200 OK\r\nthis is not a header\r\n\r\n",
        b"HTTP/1.1 200 OK\r\n continuation first\r\n\r\n",
        b"\xff\xfe\x00garbage",
    ],
)
def test_malformed_payloads_raise(raw):
    with pytest.raises(DescriptorParseError) as excinfo:
        parse_descriptor(raw)
    assert excinfo.value.raw == raw


def test_latin1_zone_name_accepted():
    raw = (
        b"HTTP/1.1 200 OK\r\n"
        b"ST: venstar:thermostat:ecp\r\n"
        b"Location: http://10.0.0.5/\r\n"
        b"USN: ecp:name:Caf\xe9:type:residential\r\n"
        b"\r\n"
    )
    descriptor = parse_descriptor(raw)
    assert descriptor is not None
    assert descriptor.name == "Café"
    assert descriptor.base_url == URL("http://10.0.0.5/")


def test_utf8_zone_name_decoded():
    raw = _response("venstar:thermostat:ecp", usn="ecp:name:Café")
    descriptor = parse_descriptor(raw)
    assert descriptor is not None
    assert descriptor.name == "Café"


@pytest.mark.parametrize("location", ["", "/relative/path", "not a url"])
def test_thermostat_with_unusable_location_raises(location):
    with pytest.raises(DescriptorParseError, match="Location"):
        parse_descriptor(_response("venstar:thermostat:ecp", location))


def test_folded_header_is_joined():
    raw = (
        b"HTTP/1.1 200 OK\r\n"
        b"ST: venstar:thermostat:ecp\r\n"
        b"Location: http://10.0.0.5/\r\n"
        b"USN: ecp:name:Guest\r\n"
        b"\tRoom:type:residential\r\n\r\n"
    )
    descriptor = parse_descriptor(raw)
    assert descriptor is not None
    assert descriptor.headers["USN"] == "ecp:name:Guest Room:type:residential"
    assert descriptor.name == "Guest Room"


def test_descriptor_equality_ignores_headers():
    first = parse_descriptor(THERMOSTAT_RESPONSE)
    second = DeviceDescriptor("Living Room", URL("http://192.168.1.40/"))
    assert first == second
    assert hash(first) == hash(second)
