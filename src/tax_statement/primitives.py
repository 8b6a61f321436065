"""Typed values stored in statement tokens."""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from tax_statement.errors import InvalidDate, InvalidNumber


class PrimitiveType(Enum):
    """Value types that known record fields are made of."""

    STRING = "string"
    INTEGER = "integer"
    DECIMAL = "decimal"
    DATE = "date"


# Only canonical numbers are accepted: a decimal point (never a comma or an
# exponent) and no leading zeros, so that decoded values encode to the same text
INTEGER_PATTERN = re.compile(r"0|-?[1-9][0-9]*")
DECIMAL_PATTERN = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?")
DATE_PATTERN = re.compile(r"([0-9]{2})\.([0-9]{2})\.([0-9]{4})")


def encode_value(value: Any, primitive: PrimitiveType) -> str:
    """Convert a typed value to token text."""
    encoders = {
        PrimitiveType.STRING: _encode_string,
        PrimitiveType.INTEGER: _encode_integer,
        PrimitiveType.DECIMAL: _encode_decimal,
        PrimitiveType.DATE: _encode_date,
    }
    return encoders[primitive](value)


def decode_value(text: str, primitive: PrimitiveType) -> Any:
    """Convert token text to a typed value."""
    decoders = {
        PrimitiveType.STRING: _decode_string,
        PrimitiveType.INTEGER: _decode_integer,
        PrimitiveType.DECIMAL: _decode_decimal,
        PrimitiveType.DATE: _decode_date,
    }
    return decoders[primitive](text)


def _encode_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Expected str, got {type(value).__name__}")
    return value


def _decode_string(text: str) -> str:
    return text


def _encode_integer(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected int, got {type(value).__name__}")
    return str(value)


def _decode_integer(text: str) -> int:
    if INTEGER_PATTERN.fullmatch(text) is None:
        raise InvalidNumber(text, "invalid integer")
    return int(text)


def _encode_decimal(value: Any) -> str:
    """Format a decimal positionally, keeping its exponent.

    Decimal("5760.020") is written as "5760.020" so that values read from a
    file are written back unchanged.
    """
    if isinstance(value, bool) or not isinstance(value, (Decimal, int)):
        # Binary floats can't represent most amounts exactly
        raise TypeError(f"Expected Decimal, got {type(value).__name__}")

    value = Decimal(value)
    if not value.is_finite():
        raise InvalidNumber(str(value), "non-finite decimal")

    return format(value, "f")


def _decode_decimal(text: str) -> Decimal:
    if DECIMAL_PATTERN.fullmatch(text) is None:
        raise InvalidNumber(text, "invalid decimal")
    return Decimal(text)


def _encode_date(value: Any) -> str:
    # datetime is a date subclass, but its time part would be silently lost
    if not isinstance(value, date) or isinstance(value, datetime):
        raise TypeError(f"Expected date, got {type(value).__name__}")
    return f"{value.day:02d}.{value.month:02d}.{value.year:04d}"


def _decode_date(text: str) -> date:
    match = DATE_PATTERN.fullmatch(text)
    if match is None:
        raise InvalidDate(text)

    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        raise InvalidDate(text) from None
