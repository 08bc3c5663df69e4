"""Collection conversions."""

from __future__ import annotations

from httpreq.conversions.base import expect_kind
from httpreq.destinations import Destination, Kind


def to_comma_list(raw: str, dest: Destination) -> None:
    """Split *raw* on ``,`` into a ``STRING_LIST`` destination.

    Items are not trimmed, and a value without commas yields a one-element
    list.  A new list is assigned; the previous one is not mutated.
    """
    d = expect_kind(dest, (Kind.STRING_LIST,), "comma_list")
    d.set(raw.split(","))
