"""
Source capabilities for httpreq.

A source is anything with a ``get(key)`` method returning the raw string
for *key*, or ``""`` / ``None`` when the key is absent.  The two cases are
indistinguishable to ``ParsingMap.parse()``: either way the field is
skipped.  Plain ``dict`` objects already satisfy the protocol.

Adapters:
- ``MappingSource``: a ``Mapping[str, str]``.
- ``MultiValueSource``: a ``Mapping[str, Sequence[str]]`` such as the
  output of ``urllib.parse.parse_qs``; the first value wins.
- ``QuerySource``: decodes a raw query string.
- ``EnvSource``: environment variables, optionally prefixed.
- ``RowSource``: one row of a ``pandas.DataFrame``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable
from urllib.parse import parse_qs

import pandas as pd


@runtime_checkable
class Getter(Protocol):
    """Read-only string-keyed lookup supplying raw field values."""

    def get(self, key: str) -> str | None: ...


class MappingSource:
    """Wrap a ``Mapping[str, str]``; missing keys read as ``""``."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = mapping

    def get(self, key: str) -> str:
        return self._mapping.get(key) or ""

    def __repr__(self) -> str:
        return f"MappingSource({dict(self._mapping)!r})"


class MultiValueSource:
    """Wrap a ``Mapping[str, Sequence[str]]``, returning the first value per key.

    Matches how decoded HTML forms and query strings are usually read:
    ``?a=1&a=2`` reads as ``"1"`` and a key with no values as absent.
    """

    def __init__(self, mapping: Mapping[str, Sequence[str]]) -> None:
        self._mapping = mapping

    def get(self, key: str) -> str:
        values = self._mapping.get(key)
        if not values:
            return ""
        return values[0]

    def get_all(self, key: str) -> list[str]:
        """Return every value for *key* (empty list when absent)."""
        return list(self._mapping.get(key) or [])

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._mapping)!r})"


class QuerySource(MultiValueSource):
    """A decoded URL query string or ``application/x-www-form-urlencoded`` body."""

    @classmethod
    def from_query_string(cls, query: str, *, encoding: str = "utf-8") -> QuerySource:
        """Decode *query* (leading ``?`` optional) into a source.

        Blank values are kept (``a=`` reads as ``""``), so they are skipped
        exactly like absent keys.
        """
        if query.startswith("?"):
            query = query[1:]
        return cls(parse_qs(query, keep_blank_values=True, encoding=encoding))


class EnvSource:
    """Read fields from environment variables.

    The variable name is ``prefix + key.upper()``, so with
    ``prefix="APP_"`` the key ``limit`` reads ``APP_LIMIT``.
    """

    def __init__(self, prefix: str = "", environ: Mapping[str, str] | None = None) -> None:
        self.prefix = prefix
        self._environ = os.environ if environ is None else environ

    def get(self, key: str) -> str:
        return self._environ.get(f"{self.prefix}{key.upper()}", "")


class RowSource:
    """Read fields from one ``pandas.Series`` (e.g. a DataFrame row).

    Missing labels and NA values (``None``, ``NaN``, ``pd.NA``) are absent.
    Non-string values are rendered with ``str()``, except integral floats,
    which render as integers: pandas stores an integer column with missing
    cells as float64, and ``1.0`` must still read as ``"1"``.
    """

    def __init__(self, row: pd.Series) -> None:
        self._row = row

    def get(self, key: str) -> str:
        if key not in self._row.index:
            return ""
        value = self._row[key]
        if pd.api.types.is_scalar(value) and pd.isna(value):
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)


def as_source(obj: object) -> Getter:
    """Coerce *obj* into a ``Getter``.

    Objects that already have a ``get`` method are returned unchanged;
    ``pandas.Series`` becomes a ``RowSource``.
    """
    if isinstance(obj, pd.Series):
        return RowSource(obj)
    if isinstance(obj, Getter):
        return obj
    raise TypeError(f"{type(obj).__name__!r} object is not a source: it has no get() method")
