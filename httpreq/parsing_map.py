"""
Parsing map: the ordered field-extraction engine of httpreq.

A ``ParsingMap`` is an ordered sequence of ``FieldDescriptor`` entries,
each pairing a source key with a conversion function and a destination.
``parse(source)`` walks the entries in declaration order:

1. Look the key up in the source.
2. Skip the entry when the value is absent or ``""``.
3. Otherwise run the conversion, which writes into the destination.

The first conversion error stops the pass.  Destinations written before
the failing entry keep their new values; the failing entry and everything
after it are left untouched.  The error is re-raised with its ``key`` set.

Maps are built either as a literal::

    ParsingMap([
        ("limit", to_int, bind(req, "limit", Kind.INT)),
        ("fields", to_comma_list, bind(req, "fields", Kind.STRING_LIST)),
    ])

or fluently::

    ParsingMap().add_int("limit", limit).add_comma_list("fields", fields)

A map holds no execution state, so a finished map can be parsed any
number of times, including concurrently as long as the destinations are
not shared.  Construction is not thread-safe.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Union

from httpreq.conversions import (
    ConversionFunction,
    to_bool,
    to_comma_list,
    to_float64,
    to_int,
    to_rfc3339_time_direct,
    to_rfc3339_time_indirect,
    to_string,
    to_unix_time_direct,
    to_unix_time_indirect,
)
from httpreq.destinations import Destination
from httpreq.exceptions import ConversionError
from httpreq.sources import Getter, as_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldDescriptor:
    """One field to extract: where to read it, how to convert it, where to write it."""

    key: str
    conversion: ConversionFunction
    destination: Destination

    def __post_init__(self) -> None:
        if not isinstance(self.key, str):
            raise TypeError(f"Field key must be a str, got {type(self.key).__name__}")
        if not callable(self.conversion):
            raise TypeError(f"Conversion for field {self.key!r} is not callable")


DescriptorLike = Union[FieldDescriptor, tuple[str, ConversionFunction, Destination]]


def _as_descriptor(item: DescriptorLike) -> FieldDescriptor:
    if isinstance(item, FieldDescriptor):
        return item
    key, conversion, destination = item
    return FieldDescriptor(key, conversion, destination)


class ParsingMap:
    """Ordered collection of ``FieldDescriptor`` entries.

    Args:
        descriptors: Optional initial entries, as ``FieldDescriptor``
            objects or ``(key, conversion, destination)`` tuples.
        capacity: Expected number of entries.  A sizing hint only; the map
            grows past it freely.
    """

    def __init__(
        self,
        descriptors: Iterable[DescriptorLike] | None = None,
        *,
        capacity: int = 0,
    ) -> None:
        if not isinstance(capacity, int) or capacity < 0:
            raise ValueError(f"capacity must be a non-negative int, got {capacity!r}")
        self.capacity = capacity
        self._descriptors: list[FieldDescriptor] = []
        if descriptors is not None:
            self._descriptors.extend(_as_descriptor(d) for d in descriptors)

    @classmethod
    def with_capacity(cls, capacity: int) -> ParsingMap:
        """Create an empty map expecting about *capacity* entries."""
        return cls(capacity=capacity)

    # -----------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------

    def add(self, key: str, conversion: ConversionFunction, destination: Destination) -> ParsingMap:
        """Append an entry and return the map for chaining."""
        self._descriptors.append(FieldDescriptor(key, conversion, destination))
        return self

    def extend(self, other: Iterable[DescriptorLike]) -> ParsingMap:
        """Append every entry of *other* (another map or descriptors)."""
        self._descriptors.extend(_as_descriptor(d) for d in other)
        return self

    def add_comma_list(self, key: str, destination: Destination) -> ParsingMap:
        return self.add(key, to_comma_list, destination)

    def add_string(self, key: str, destination: Destination) -> ParsingMap:
        return self.add(key, to_string, destination)

    def add_bool(self, key: str, destination: Destination) -> ParsingMap:
        return self.add(key, to_bool, destination)

    def add_int(self, key: str, destination: Destination) -> ParsingMap:
        return self.add(key, to_int, destination)

    def add_float64(self, key: str, destination: Destination) -> ParsingMap:
        return self.add(key, to_float64, destination)

    def add_unix_time(self, key: str, destination: Destination) -> ParsingMap:
        """Unix timestamp into a ``Kind.TIME`` destination."""
        return self.add(key, to_unix_time_direct, destination)

    def add_unix_time_indirect(self, key: str, destination: Destination) -> ParsingMap:
        """Unix timestamp into a ``Kind.TIME_PTR`` destination."""
        return self.add(key, to_unix_time_indirect, destination)

    def add_rfc3339_time(self, key: str, destination: Destination) -> ParsingMap:
        """RFC 3339 timestamp into a ``Kind.TIME`` destination."""
        return self.add(key, to_rfc3339_time_direct, destination)

    def add_rfc3339_time_indirect(self, key: str, destination: Destination) -> ParsingMap:
        """RFC 3339 timestamp into a ``Kind.TIME_PTR`` destination."""
        return self.add(key, to_rfc3339_time_indirect, destination)

    # -----------------------------------------------------------------
    # Execution
    # -----------------------------------------------------------------

    def parse(self, source: Getter | Mapping[str, str]) -> None:
        """Run every entry against *source*, in declaration order.

        Args:
            source: Anything with a ``get(key)`` method (plain dicts work),
                or a ``pandas.Series``.

        Raises:
            WrongDestinationType: An entry's conversion does not match its
                destination.
            MalformedValue: An entry's raw value cannot be parsed.
            TypeError: *source* has no ``get()`` method.
        """
        getter = as_source(source)
        logger.debug(
            "Parsing %d field(s) from %s", len(self._descriptors), type(getter).__name__
        )

        for descriptor in self._descriptors:
            value = getter.get(descriptor.key)
            if not value:
                logger.debug("  %s: absent, skipped", descriptor.key)
                continue
            try:
                descriptor.conversion(value, descriptor.destination)
            except ConversionError as exc:
                exc.key = descriptor.key
                logger.debug("  %s: conversion failed, aborting: %s", descriptor.key, exc)
                raise

    # -----------------------------------------------------------------
    # Sequence protocol
    # -----------------------------------------------------------------

    @property
    def descriptors(self) -> tuple[FieldDescriptor, ...]:
        return tuple(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._descriptors)

    def __getitem__(self, index: int) -> FieldDescriptor:
        return self._descriptors[index]

    def __repr__(self) -> str:
        keys = ", ".join(d.key for d in self._descriptors)
        return f"ParsingMap([{keys}])"


def parse_fields(source: Getter | Mapping[str, str], *descriptors: DescriptorLike) -> None:
    """Build a one-off map from *descriptors* and parse *source* with it."""
    ParsingMap(descriptors, capacity=len(descriptors)).parse(source)

