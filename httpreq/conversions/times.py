"""
Time conversions: unix timestamps and RFC 3339 timestamps.

Both conversions accept two destination shapes:

- ``Kind.TIME``: the instant is written directly.
- ``Kind.TIME_PTR``: a nullable instant.  It goes from ``None`` to the
  parsed ``datetime``; a previous instant is replaced, never mutated.

``to_unix_time`` / ``to_rfc3339_time`` accept either shape.  The
``*_direct`` and ``*_indirect`` variants accept exactly one and back the
explicit builder helpers on ``ParsingMap``.

Unix timestamps are converted to an aware ``datetime`` in the process's
local timezone (honours ``TZ``).  RFC 3339 timestamps keep their own UTC
offset as a fixed-offset ``timezone``.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Callable

from httpreq.conversions.base import expect_kind
from httpreq.conversions.scalars import parse_int64
from httpreq.destinations import Destination, Kind
from httpreq.exceptions import MalformedValue

_EITHER = (Kind.TIME, Kind.TIME_PTR)
_DIRECT = (Kind.TIME,)
_INDIRECT = (Kind.TIME_PTR,)

_RFC3339_RE = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"T(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]+))?"
    r"(?P<offset>Z|[+-][0-9]{2}:[0-9]{2})"
)


def parse_unix_time(raw: str) -> datetime:
    """Parse integer seconds since the epoch into a local, aware datetime.

    Raises:
        ValueError: If *raw* is not an int64 or the instant is not
            representable.
    """
    seconds = parse_int64(raw)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).astimezone()
    except (OverflowError, OSError) as exc:
        raise ValueError(f"timestamp out of range: {exc}") from exc


def parse_rfc3339(raw: str) -> datetime:
    """Parse an RFC 3339 timestamp such as ``2006-01-02T15:04:05Z``.

    Fractional seconds beyond microsecond precision are truncated.

    Raises:
        ValueError: If *raw* does not match the grammar or names an
            impossible date, time or offset.
    """
    m = _RFC3339_RE.fullmatch(raw)
    if m is None:
        raise ValueError("does not match RFC 3339 layout YYYY-MM-DDTHH:MM:SSZ")

    offset = m.group("offset")
    if offset == "Z":
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if minutes >= 60:
            raise ValueError("offset minutes out of range")
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))

    fraction = m.group("fraction") or ""
    microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0

    return datetime(
        int(m.group("year")),
        int(m.group("month")),
        int(m.group("day")),
        int(m.group("hour")),
        int(m.group("minute")),
        int(m.group("second")),
        microsecond,
        tzinfo=tz,
    )


def _convert(
    raw: str,
    dest: Destination,
    kinds: tuple[Kind, ...],
    parse: Callable[[str], datetime],
    conversion: str,
) -> None:
    d = expect_kind(dest, kinds, conversion)
    try:
        instant = parse(raw)
    except ValueError as exc:
        raise MalformedValue(raw, exc, conversion=conversion) from exc

    d.set(instant)


# ---------------------------------------------------------------------------
# Unix timestamp
# ---------------------------------------------------------------------------

def to_unix_time(raw: str, dest: Destination) -> None:
    """Parse seconds since the epoch into a ``TIME`` or ``TIME_PTR`` destination."""
    _convert(raw, dest, _EITHER, parse_unix_time, "unix_time")


def to_unix_time_direct(raw: str, dest: Destination) -> None:
    _convert(raw, dest, _DIRECT, parse_unix_time, "unix_time")


def to_unix_time_indirect(raw: str, dest: Destination) -> None:
    _convert(raw, dest, _INDIRECT, parse_unix_time, "unix_time_indirect")


# ---------------------------------------------------------------------------
# RFC 3339
# ---------------------------------------------------------------------------

def to_rfc3339_time(raw: str, dest: Destination) -> None:
    """Parse an RFC 3339 timestamp into a ``TIME`` or ``TIME_PTR`` destination."""
    _convert(raw, dest, _EITHER, parse_rfc3339, "rfc3339_time")


def to_rfc3339_time_direct(raw: str, dest: Destination) -> None:
    _convert(raw, dest, _DIRECT, parse_rfc3339, "rfc3339_time")


def to_rfc3339_time_indirect(raw: str, dest: Destination) -> None:
    _convert(raw, dest, _INDIRECT, parse_rfc3339, "rfc3339_time_indirect")
