"""
Conversions sub-package for httpreq.

Contains the standard conversion library.  Every conversion is a plain
function ``(raw: str, dest: Destination) -> None`` following the contract
in ``base.py``:

  - scalars.py: string, bool, int, float64.
  - lists.py: comma-separated list of strings.
  - times.py: unix timestamps and RFC 3339 timestamps.

Conversions are also registered by name in ``CONVERSIONS`` so that field
maps can be declared in YAML (see ``httpreq.config``).  ``DESTINATION_KINDS``
gives the destination kind each registered name writes to.
"""

from __future__ import annotations

from httpreq.conversions.base import ConversionFunction, expect_kind
from httpreq.conversions.lists import to_comma_list
from httpreq.conversions.scalars import to_bool, to_float64, to_int, to_string
from httpreq.conversions.times import (
    to_rfc3339_time,
    to_rfc3339_time_direct,
    to_rfc3339_time_indirect,
    to_unix_time,
    to_unix_time_direct,
    to_unix_time_indirect,
)
from httpreq.destinations import Kind
from httpreq.exceptions import UnknownConversionError

__all__ = [
    "CONVERSIONS",
    "DESTINATION_KINDS",
    "ConversionFunction",
    "expect_kind",
    "get_conversion",
    "to_bool",
    "to_comma_list",
    "to_float64",
    "to_int",
    "to_rfc3339_time",
    "to_rfc3339_time_direct",
    "to_rfc3339_time_indirect",
    "to_string",
    "to_unix_time",
    "to_unix_time_direct",
    "to_unix_time_indirect",
]

CONVERSIONS: dict[str, ConversionFunction] = {
    "comma_list": to_comma_list,
    "string": to_string,
    "bool": to_bool,
    "int": to_int,
    "float64": to_float64,
    "unix_time": to_unix_time_direct,
    "unix_time_indirect": to_unix_time_indirect,
    "rfc3339_time": to_rfc3339_time_direct,
    "rfc3339_time_indirect": to_rfc3339_time_indirect,
}

DESTINATION_KINDS: dict[str, Kind] = {
    "comma_list": Kind.STRING_LIST,
    "string": Kind.STRING,
    "bool": Kind.BOOL,
    "int": Kind.INT,
    "float64": Kind.FLOAT64,
    "unix_time": Kind.TIME,
    "unix_time_indirect": Kind.TIME_PTR,
    "rfc3339_time": Kind.TIME,
    "rfc3339_time_indirect": Kind.TIME_PTR,
}


def get_conversion(name: str) -> ConversionFunction:
    """Look up a registered conversion by name.

    Raises:
        UnknownConversionError: If *name* is not registered.
    """
    try:
        return CONVERSIONS[name]
    except KeyError:
        raise UnknownConversionError(
            f"Unknown conversion {name!r}. Available: {sorted(CONVERSIONS)}"
        ) from None
