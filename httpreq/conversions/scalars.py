"""
Scalar conversions: string, bool, int and float64.

Parsing is strict and locale-free:

- ``to_int`` accepts an optional sign followed by ASCII digits and must fit
  in a signed 64-bit integer.  Whitespace and ``_`` separators are rejected
  even though Python's ``int()`` would accept them.
- ``to_float64`` accepts decimal and exponent notation plus ``inf``,
  ``infinity`` and ``nan`` in any case.  Finite text that overflows a
  64-bit float is rejected as out of range.
- ``to_bool`` never fails on input: ``"on"`` and the usual true spellings
  give ``True``, anything else ``False``.
"""

from __future__ import annotations

import math
import re

from httpreq.conversions.base import expect_kind
from httpreq.destinations import Destination, Kind
from httpreq.exceptions import MalformedValue

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)

TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_int64(raw: str) -> int:
    """Parse a base-10 signed 64-bit integer.

    Raises:
        ValueError: If *raw* is not a plain base-10 integer or is out of range.
    """
    if not _INT_RE.fullmatch(raw):
        raise ValueError("invalid syntax")
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError("value out of range")
    return value


def parse_float64(raw: str) -> float:
    """Parse a 64-bit float.

    Raises:
        ValueError: If *raw* is not a float literal or overflows.
    """
    if not _FLOAT_RE.fullmatch(raw):
        raise ValueError("invalid syntax")
    value = float(raw)
    if math.isinf(value) and "inf" not in raw.lower():
        raise ValueError("value out of range")
    return value


def parse_bool(raw: str) -> bool:
    """Parse a boolean, raising ``ValueError`` for unknown spellings."""
    if raw in TRUE_STRINGS:
        return True
    if raw in FALSE_STRINGS:
        return False
    raise ValueError("invalid syntax")


# ---------------------------------------------------------------------------
# Conversion functions
# ---------------------------------------------------------------------------

def to_string(raw: str, dest: Destination) -> None:
    """Copy *raw* verbatim into a ``STRING`` destination."""
    d = expect_kind(dest, (Kind.STRING,), "string")
    d.set(raw)


def to_bool(raw: str, dest: Destination) -> None:
    """Parse *raw* as a boolean into a ``BOOL`` destination.

    ``"on"`` (as sent by HTML checkboxes) is true.  Unknown spellings are
    treated as false rather than as an error.
    """
    d = expect_kind(dest, (Kind.BOOL,), "bool")
    if raw == "on":
        d.set(True)
        return
    try:
        value = parse_bool(raw)
    except ValueError:
        value = False
    d.set(value)


def to_int(raw: str, dest: Destination) -> None:
    """Parse *raw* as a base-10 integer into an ``INT`` destination."""
    d = expect_kind(dest, (Kind.INT,), "int")
    try:
        value = parse_int64(raw)
    except ValueError as exc:
        raise MalformedValue(raw, exc, conversion="int") from exc
    d.set(value)


def to_float64(raw: str, dest: Destination) -> None:
    """Parse *raw* as a 64-bit float into a ``FLOAT64`` destination."""
    d = expect_kind(dest, (Kind.FLOAT64,), "float64")
    try:
        value = parse_float64(raw)
    except ValueError as exc:
        raise MalformedValue(raw, exc, conversion="float64") from exc
    d.set(value)
