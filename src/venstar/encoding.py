"""Form encoding of request models.

The control and settings endpoints take ``application/x-www-form-urlencoded``
bodies. Rather than hand-writing a serializer per request type, any pydantic
model can be flattened into ordered ``(name, text)`` pairs. A per-class field
table is built once from the model's field metadata and reused.

Wire names are resolved in this order:

1. ``FormField(name=...)`` in the field's ``Annotated`` metadata
2. The field's pydantic alias
3. The field identifier, split at uppercase runs and joined with ``_``

A name of exactly ``"-"`` excludes the field. ``FormField(omit_empty=True)``
drops the field whenever it holds the zero value for its kind.

Example:
    >>> class Req(BaseModel):
    ...     heat_temp: Annotated[float, FormField("heattemp")]
    ...     note: Annotated[str, FormField(omit_empty=True)] = ""
    >>> encode_form(Req(heat_temp=72.0))
    [('heattemp', '72')]
"""

from __future__ import annotations

import functools
import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Literal, get_origin

from pydantic import BaseModel

from .exceptions import EncodingError

_logger = logging.getLogger(__name__)

__all__ = [
    "FormField",
    "encode_form",
    "form_field_name",
    "format_float",
]

FieldKind = Literal["str", "int", "float", "bool"]

EXCLUDE = "-"

_UPPER_RUN = re.compile(r"([A-Z]+)")


@dataclass(frozen=True)
class FormField:
    """Form encoding directive attached via ``typing.Annotated``.

    Args:
        name: Wire name for the field, or ``"-"`` to exclude it
        omit_empty: Skip the field when it holds its zero value
    """

    name: str | None = None
    omit_empty: bool = False


@dataclass(frozen=True)
class _FieldSpec:
    attr: str
    name: str
    kind: FieldKind
    omit_empty: bool


def form_field_name(identifier: str) -> str:
    """Derive a wire name from a field identifier.

    Example:
        >>> form_field_name("HeatTemp")
        'heat_temp'
        >>> form_field_name("CO2PPM")
        'co2_ppm'
        >>> form_field_name("hum_setpoint")
        'hum_setpoint'
    """
    name = _UPPER_RUN.sub(lambda m: "_" + m.group(1).lower(), identifier)
    return name.removeprefix("_")


def format_float(value: float) -> str:
    """Format a float as the shortest decimal text that round-trips.

    Never uses exponent notation and drops a trailing ``.0``.

    Example:
        >>> format_float(72.0)
        '72'
        >>> format_float(0.1)
        '0.1'
        >>> format_float(1e21)
        '1000000000000000000000'
    """
    # repr() yields the shortest round-trip digits; Decimal re-renders them
    # without an exponent.
    return format(Decimal(repr(float(value))).normalize(), "f")


def _kind_of(annotation: Any) -> FieldKind | None:
    if get_origin(annotation) is not None or not isinstance(annotation, type):
        return None
    # bool is an int subclass, so it must be checked first
    if issubclass(annotation, bool):
        return "bool"
    if issubclass(annotation, int):
        return "int"
    if issubclass(annotation, float):
        return "float"
    if issubclass(annotation, str):
        return "str"
    return None


@functools.cache
def _field_table(model_class: type[BaseModel]) -> tuple[_FieldSpec, ...]:
    specs: list[_FieldSpec] = []
    for attr, info in model_class.model_fields.items():
        directive = next(
            (m for m in info.metadata if isinstance(m, FormField)), None
        )
        if directive is not None and directive.name:
            name = directive.name
        elif info.alias:
            name = info.alias
        else:
            name = form_field_name(attr)
        if name == EXCLUDE:
            continue
        kind = _kind_of(info.annotation)
        if kind is None:
            raise EncodingError(
                f"unsupported field {attr} type {info.annotation!r}",
                field=attr,
            )
        specs.append(
            _FieldSpec(
                attr=attr,
                name=name,
                kind=kind,
                omit_empty=bool(directive and directive.omit_empty),
            )
        )
    _logger.debug(
        f"Built form field table for {model_class.__name__}: "
        f"{[spec.name for spec in specs]}"
    )
    return tuple(specs)


def _format_value(spec: _FieldSpec, value: Any) -> str | None:
    """Render ``value`` for ``spec``; None means omit."""
    if spec.kind == "str":
        text = value.value if isinstance(value, Enum) else str(value)
        if spec.omit_empty and text == "":
            return None
        return text
    if spec.kind == "int":
        number = int(value)
        if spec.omit_empty and number == 0:
            return None
        return str(number)
    if spec.kind == "float":
        real = float(value)
        if not math.isfinite(real):
            raise EncodingError(
                f"field {spec.attr} is not a finite number: {real}",
                field=spec.attr,
            )
        if spec.omit_empty and real == 0:
            return None
        return format_float(real)
    flag = bool(value)
    if spec.omit_empty and not flag:
        return None
    return "true" if flag else "false"


def encode_form(value: Any) -> list[tuple[str, str]]:
    """Flatten a pydantic model into ordered form pairs.

    Args:
        value: Model instance to encode

    Returns:
        ``(name, text)`` pairs in field declaration order

    Raises:
        EncodingError: If ``value`` is None or not a model, or a field's
            type is not a string, integer, float or boolean
    """
    if value is None:
        raise EncodingError("nil input")
    if not isinstance(value, BaseModel):
        raise EncodingError(
            f"input is not a model: {type(value).__name__}"
        )

    pairs: list[tuple[str, str]] = []
    for spec in _field_table(type(value)):
        text = _format_value(spec, getattr(value, spec.attr))
        if text is not None:
            pairs.append((spec.name, text))
    return pairs
