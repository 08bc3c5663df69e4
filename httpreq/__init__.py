"""
httpreq: declarative extraction of typed fields from string key/value sources.

Public API surface:

- ``ParsingMap`` -- ordered (key, conversion, destination) entries with a
  fluent builder and ``parse(source)``.  The first conversion failure
  aborts the pass; fields converted before it keep their values.

- Destinations -- ``Slot`` (standalone box) and ``bind(obj, attr, kind)``
  (an attribute of a caller-owned record), each carrying a ``Kind``.

- Conversions -- ``to_comma_list``, ``to_string``, ``to_bool``,
  ``to_int``, ``to_float64``, ``to_unix_time``, ``to_rfc3339_time`` and
  their strict time variants.

- Sources -- anything with ``get(key)``; adapters for query strings,
  multi-value mappings, environment variables and pandas rows.

- Declarative maps -- ``load_map_config()`` + ``build_parsing_map()``
  for field maps written in YAML.

Example::

    @dataclass
    class Req:
        limit: int = 0
        fields: list[str] = field(default_factory=list)

    req = Req()
    ParsingMap().add_int("limit", bind(req, "limit", Kind.INT)).add_comma_list(
        "fields", bind(req, "fields", Kind.STRING_LIST)
    ).parse(QuerySource.from_query_string("limit=10&fields=a,b,c"))
"""

from __future__ import annotations

from httpreq.config import (
    FieldSpec,
    MapConfig,
    build_parsing_map,
    load_map_config,
    save_map_config,
)
from httpreq.conversions import (
    CONVERSIONS,
    ConversionFunction,
    get_conversion,
    to_bool,
    to_comma_list,
    to_float64,
    to_int,
    to_rfc3339_time,
    to_rfc3339_time_direct,
    to_rfc3339_time_indirect,
    to_string,
    to_unix_time,
    to_unix_time_direct,
    to_unix_time_indirect,
)
from httpreq.destinations import AttrSlot, Destination, Kind, Slot, bind
from httpreq.exceptions import (
    ConfigValidationError,
    ConversionError,
    HttpReqError,
    MalformedValue,
    UnknownConversionError,
    WrongDestinationType,
)
from httpreq.parsing_map import FieldDescriptor, ParsingMap, parse_fields
from httpreq.sources import (
    EnvSource,
    Getter,
    MappingSource,
    MultiValueSource,
    QuerySource,
    RowSource,
)

__all__ = [
    # Engine
    "FieldDescriptor",
    "ParsingMap",
    "parse_fields",
    # Destinations
    "AttrSlot",
    "Destination",
    "Kind",
    "Slot",
    "bind",
    # Conversions
    "CONVERSIONS",
    "ConversionFunction",
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
    # Sources
    "EnvSource",
    "Getter",
    "MappingSource",
    "MultiValueSource",
    "QuerySource",
    "RowSource",
    # Declarative maps
    "FieldSpec",
    "MapConfig",
    "build_parsing_map",
    "load_map_config",
    "save_map_config",
    # Errors
    "ConfigValidationError",
    "ConversionError",
    "HttpReqError",
    "MalformedValue",
    "UnknownConversionError",
    "WrongDestinationType",
]
