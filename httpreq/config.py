"""
Declarative field maps for httpreq.

A field map can be written in YAML instead of code::

    # httpreq field map
    name: search
    fields:
      - key: limit
        conversion: int
      - key: fields
        conversion: comma_list
      - key: ts
        conversion: unix_time
        attr: timestamp

This module defines the Pydantic models for that file plus helpers to load,
save and bind it to a record object.

Key models:
- MapConfig: Top-level config (name + ordered list of fields).
- FieldSpec: One field: source key, conversion name, target attribute.

Key functions:
- load_map_config(path) -> MapConfig: Load and validate from YAML.
- save_map_config(config, path): Serialize to YAML.
- build_parsing_map(config, record) -> ParsingMap: Bind fields to ``record``.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from httpreq.conversions import CONVERSIONS, DESTINATION_KINDS, get_conversion
from httpreq.destinations import AttrSlot, Kind
from httpreq.exceptions import ConfigValidationError
from httpreq.parsing_map import ParsingMap

logger = logging.getLogger(__name__)


class FieldSpec(BaseModel):
    """One field of a declarative map."""

    key: str = Field(..., min_length=1, description="Key looked up in the source")
    conversion: str = Field(..., description="Registered conversion name (e.g. 'int')")
    attr: str | None = Field(
        None, min_length=1, description="Record attribute to write; defaults to the key"
    )

    @field_validator("conversion")
    @classmethod
    def _check_conversion_registered(cls, value: str) -> str:
        if value not in CONVERSIONS:
            raise ValueError(
                f"Unknown conversion {value!r}. Available: {sorted(CONVERSIONS)}"
            )
        return value

    @property
    def target(self) -> str:
        """The attribute written on the record."""
        return self.attr or self.key


class MapConfig(BaseModel):
    """Top-level declarative field map.

    Field order is significant: it is the order ``parse()`` runs in.
    """

    name: str = Field("default", description="Label used in logs")
    fields: list[FieldSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_targets_consistent(self) -> MapConfig:
        """Validate that an attribute is never bound with two destination kinds."""
        seen: dict[str, Kind] = {}
        for spec in self.fields:
            kind = DESTINATION_KINDS[spec.conversion]
            previous = seen.setdefault(spec.target, kind)
            if previous is not kind:
                raise ValueError(
                    f"Attribute '{spec.target}' is bound as both {previous} and {kind}"
                )
        return self


def load_map_config(path: str | Path) -> MapConfig:
    """Load and validate a YAML field map.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Field map not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Field map is empty: {path}")
    config = MapConfig.model_validate(raw)
    logger.info("Loaded field map '%s' (%d fields) from %s", config.name, len(config.fields), path)
    return config


def save_map_config(config: MapConfig, path: str | Path) -> None:
    """Serialize a MapConfig to YAML with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json", exclude_none=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write("# httpreq field map\n\n")
        yaml.dump(data, f, allow_unicode=True, default_flow_style=False, sort_keys=False)
    logger.info("Saved field map '%s' to %s", config.name, path)


def build_parsing_map(config: MapConfig, record: object) -> ParsingMap:
    """Bind every field of *config* to an attribute of *record*.

    Args:
        config: A validated field map.
        record: Object whose attributes receive the parsed values.  Each
            target attribute must already exist (e.g. a dataclass field
            with a default).

    Returns:
        A ``ParsingMap`` writing into *record*.

    Raises:
        ConfigValidationError: If *record* lacks a target attribute.
    """
    missing = [spec.target for spec in config.fields if not hasattr(record, spec.target)]
    if missing:
        raise ConfigValidationError(
            f"Field map '{config.name}' targets attributes missing on "
            f"{type(record).__name__}: {missing}"
        )

    pmap = ParsingMap.with_capacity(len(config.fields))
    for spec in config.fields:
        dest = AttrSlot(record, spec.target, DESTINATION_KINDS[spec.conversion])
        pmap.add(spec.key, get_conversion(spec.conversion), dest)
    logger.debug("Built parsing map '%s' for %s", config.name, type(record).__name__)
    return pmap
