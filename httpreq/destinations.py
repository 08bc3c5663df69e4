"""
Destination handles for httpreq.

A destination is a reference to a caller-owned storage location of one
known ``Kind``.  Conversions write parsed values *through* a destination;
the engine never allocates one.  A ``TIME_PTR`` destination is a nullable
instant: ``None`` until a time conversion writes a ``datetime`` into it.

Two concrete handles are provided:

- ``Slot``: a standalone box holding a value of its kind.
- ``AttrSlot``: writes through to an attribute of a caller-owned object,
  which is how the fields of a record (dataclass, plain object) are bound.

The set of kinds is closed.  Conversions compare a destination's ``kind``
against the kinds they accept and reject anything else.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Kind(str, Enum):
    """The closed set of destination kinds."""

    STRING_LIST = "string_list"
    STRING = "string"
    BOOL = "bool"
    INT = "int"
    FLOAT64 = "float64"
    TIME = "time"
    TIME_PTR = "time_ptr"

    def __str__(self) -> str:
        return self.value


# Zero instant for a TIME slot that has never been written.
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


def zero_value(kind: Kind) -> Any:
    """Return the initial value of a fresh slot of *kind*."""
    if kind is Kind.STRING_LIST:
        return []
    if kind is Kind.STRING:
        return ""
    if kind is Kind.BOOL:
        return False
    if kind is Kind.INT:
        return 0
    if kind is Kind.FLOAT64:
        return 0.0
    if kind is Kind.TIME:
        return ZERO_TIME
    if kind is Kind.TIME_PTR:
        return None
    raise ValueError(f"Unknown destination kind: {kind!r}")


class Destination(ABC):
    """A typed, caller-owned location a conversion can write to."""

    kind: Kind

    @abstractmethod
    def get(self) -> Any:
        """Return the current value."""

    @abstractmethod
    def set(self, value: Any) -> None:
        """Overwrite the current value."""


class Slot(Destination):
    """A standalone destination box.

    Example::

        limit = Slot(Kind.INT)
        to_int("10", limit)
        limit.value  # -> 10
    """

    __slots__ = ("kind", "value")

    def __init__(self, kind: Kind, value: Any = None) -> None:
        self.kind = Kind(kind)
        self.value = zero_value(self.kind) if value is None else value

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Slot({self.kind.name}, {self.value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Slot):
            return NotImplemented
        return self.kind is other.kind and self.value == other.value


class AttrSlot(Destination):
    """A destination bound to ``obj.attr``.

    The attribute must already exist on *obj*; the slot only reads and
    writes it.
    """

    __slots__ = ("obj", "attr", "kind")

    def __init__(self, obj: object, attr: str, kind: Kind) -> None:
        if not hasattr(obj, attr):
            raise AttributeError(
                f"{type(obj).__name__!r} object has no attribute {attr!r}"
            )
        self.obj = obj
        self.attr = attr
        self.kind = Kind(kind)

    def get(self) -> Any:
        return getattr(self.obj, self.attr)

    def set(self, value: Any) -> None:
        setattr(self.obj, self.attr, value)

    def __repr__(self) -> str:
        return f"AttrSlot({type(self.obj).__name__}.{self.attr}, {self.kind.name})"


def bind(obj: object, attr: str, kind: Kind) -> AttrSlot:
    """Shorthand for ``AttrSlot(obj, attr, kind)``."""
    return AttrSlot(obj, attr, kind)


def kind_of(dest: object) -> object:
    """Describe *dest* for error messages: its kind, or its type name."""
    if isinstance(dest, Destination):
        return dest.kind
    return type(dest).__name__
