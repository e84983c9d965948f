"""Tests for acknowledgement interpretation."""

import pytest

from venstar.exceptions import DeviceCommandError, DeviceError, ProtocolError
from venstar.status import AckEnvelope, interpret_ack


def test_success_envelope():
    assert interpret_ack({"success": True}) is None


def test_error_flag_raises_with_reason():
    with pytest.raises(DeviceCommandError, match="bad value") as excinfo:
        interpret_ack({"error": True, "reason": "bad value"})
    assert excinfo.value.reason == "bad value"
    assert isinstance(excinfo.value, DeviceError)


def test_error_without_reason_has_message():
    with pytest.raises(DeviceCommandError) as excinfo:
        interpret_ack({"error": True})
    assert excinfo.value.reason == ""
    assert str(excinfo.value) == "device reported an error"


def test_success_flag_is_not_consulted():
    assert interpret_ack({"error": False, "success": False}) is None
    assert interpret_ack({}) is None


def test_error_wins_over_success():
    with pytest.raises(DeviceCommandError):
        interpret_ack({"success": True, "error": True, "reason": "x"})


def test_accepts_parsed_envelope():
    interpret_ack(AckEnvelope(success=True))
    with pytest.raises(DeviceCommandError, match="nope"):
        interpret_ack(AckEnvelope(error=True, reason="nope"))


def test_extra_keys_ignored():
    assert interpret_ack({"success": True, "extra": 1}) is None


def test_malformed_envelope_is_protocol_error():
    with pytest.raises(ProtocolError):
        interpret_ack({"error": "maybe"})
