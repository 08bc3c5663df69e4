"""
Shared contract for conversion functions.

A conversion function has the signature ``(raw: str, dest: Destination)``
and returns ``None``.  It must:

1. Check that *dest* is a ``Destination`` of an accepted ``Kind`` and raise
   ``WrongDestinationType`` otherwise, before looking at *raw*.
2. Parse *raw*, raising ``MalformedValue`` (chained to the underlying
   error) when it cannot.
3. Write the parsed value through *dest*.

Conversions hold no state and never log.
"""

from __future__ import annotations

from typing import Callable

from httpreq.destinations import Destination, Kind, kind_of
from httpreq.exceptions import WrongDestinationType

ConversionFunction = Callable[[str, Destination], None]


def expect_kind(dest: object, kinds: tuple[Kind, ...], conversion: str) -> Destination:
    """Return *dest* if it is a destination of one of *kinds*.

    Raises:
        WrongDestinationType: If *dest* is not a ``Destination`` or has
            another kind.  *dest* is left untouched.
    """
    if not isinstance(dest, Destination) or dest.kind not in kinds:
        raise WrongDestinationType(kinds, kind_of(dest), conversion=conversion)
    return dest
