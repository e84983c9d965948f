"""Interpretation of control/settings acknowledgements.

Both mutation endpoints reply with ``{"success": bool, "error": bool,
"reason": str}``. Only the ``error`` flag decides the outcome: a reply with
``error`` false is treated as accepted even when ``success`` is false too.
The ``success`` flag is parsed and kept on the model but never consulted.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .exceptions import DeviceCommandError, ProtocolError
from .models import VenstarBaseModel

_logger = logging.getLogger(__name__)

__all__ = ["AckEnvelope", "interpret_ack"]


class AckEnvelope(VenstarBaseModel):
    """Acknowledgement returned by ``POST /control`` and ``POST /settings``."""

    success: bool = False
    error: bool = False
    reason: str = ""


def interpret_ack(envelope: AckEnvelope | dict[str, Any]) -> None:
    """Turn an acknowledgement into success or an exception.

    Args:
        envelope: Parsed envelope or the raw decoded JSON object

    Raises:
        DeviceCommandError: If the envelope's ``error`` flag is set
        ProtocolError: If a raw object does not look like an envelope
    """
    if not isinstance(envelope, AckEnvelope):
        try:
            envelope = AckEnvelope.model_validate(envelope)
        except PydanticValidationError as e:
            raise ProtocolError(f"malformed acknowledgement: {e}") from e

    if envelope.error:
        _logger.debug(f"Device rejected request: {envelope.reason!r}")
        raise DeviceCommandError(envelope.reason)
