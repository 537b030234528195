"""Mapping configuration: vertex and edge specifications plus record filters."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from core.errors import ConfigurationError, MappingSyntaxError
from core.mapping import Mapping
from core.records import Record, to_text
from core.specs import EdgeMap, VertexMap
from core.validation import MAPPING_SCHEMA, SchemaValidator

logger = logging.getLogger(__name__)

ID = "_id"
TYPE = "_type"
SOURCE = "_src"
TARGET = "_tgt"
MERGE = "_merge"
EXISTS = "_exists"
EXCEPT = "_except"
LENIENT = "isLenient"

_validator = SchemaValidator(MAPPING_SCHEMA)


@dataclass(frozen=True)
class Configuration:
    vertex_maps: Tuple[VertexMap, ...] = ()
    edge_maps: Tuple[EdgeMap, ...] = ()
    filters: Dict[str, Any] = field(default_factory=dict)
    lenient: bool = False

    def matches_filters(self, record: Record) -> bool:
        """True if the record matches every filter."""
        for key, expected in self.filters.items():
            if key == EXISTS:
                required = expected if isinstance(expected, list) else [expected]
                if any(to_text(name) not in record for name in required):
                    return False
                continue

            value = record.get(key)
            if isinstance(expected, list) and not isinstance(value, list):
                if value not in expected:
                    return False
            elif expected != value:
                return False
        return True


def _is_true(value: Any) -> bool:
    return to_text(value).lower() == "true"


def _load_filters(parsed: Dict[str, Any]) -> Dict[str, Any]:
    filters = parsed.get("filters")
    if filters is None:
        return {}
    if not isinstance(filters, dict):
        logger.error("Unable to parse filters - no filters will be set")
        return {}
    return dict(filters)


def _load_except(value: Any) -> Dict[str, Optional[Mapping]]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning("Expecting a map for %s", EXCEPT)
        return {}

    rules: Dict[str, Optional[Mapping]] = {}
    for key, rule in value.items():
        if rule is None:
            rules[key] = None
            continue
        try:
            rules[key] = Mapping.parse(to_text(rule))
        except MappingSyntaxError:
            # Keep the YAML type so that e.g. `age: 0` matches the integer 0
            rules[key] = Mapping.of_literal(rule)
    return rules


def _load_vertex(entry: Dict[str, Any]) -> VertexMap:
    if TYPE not in entry:
        raise ConfigurationError(f"{TYPE} property is required for all vertices")

    properties: Dict[str, Tuple[Mapping, ...]] = {}
    for key, value in entry.items():
        if key in (ID, TYPE, MERGE, EXCEPT):
            continue
        values = value if isinstance(value, list) else [value]
        properties[key] = tuple(Mapping.from_text(to_text(v)) for v in values)

    return VertexMap(
        label=to_text(entry[TYPE]),
        local_id=entry.get(ID),
        merge=_is_true(entry.get(MERGE, False)),
        except_rules=_load_except(entry.get(EXCEPT)),
        properties=properties,
    )


def _load_edge(entry: Dict[str, Any]) -> EdgeMap:
    missing = [key for key in (TYPE, SOURCE, TARGET) if key not in entry]
    if missing:
        raise ConfigurationError(f"{', '.join(missing)} required for all edges")
    return EdgeMap(label=to_text(entry[TYPE]), source_id=entry[SOURCE], target_id=entry[TARGET])


def _load_entries(entries: List[Any], kind: str, loader) -> list:
    loaded = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning("Skipping %s %d: expected a map, got %s", kind, idx, type(entry).__name__)
            continue
        try:
            loaded.append(loader(entry))
        except ConfigurationError as exc:
            logger.warning("Skipping %s %d: %s", kind, idx, exc)
    return loaded


def load_configuration(parsed: Any) -> Configuration:
    """Build a Configuration from an already-parsed mapping document."""
    errors = _validator.validate(parsed)
    if errors:
        raise ConfigurationError("Invalid mapping configuration: " + "; ".join(errors))

    vertex_maps = _load_entries(parsed["vertices"], "vertex", _load_vertex)
    edge_maps = _load_entries(parsed.get("edges") or [], "edge", _load_edge)

    return Configuration(
        vertex_maps=tuple(vertex_maps),
        edge_maps=tuple(edge_maps),
        filters=_load_filters(parsed),
        lenient=_is_true(parsed.get(LENIENT, False)),
    )


def load_configuration_file(path: str | Path) -> Configuration:
    """Read a YAML mapping file and build a Configuration from it."""
    path = Path(path)
    try:
        with path.open('r', encoding='utf-8') as f:
            parsed = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigurationError(f"Couldn't read mapping configuration {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Couldn't parse mapping configuration {path}") from exc
    return load_configuration(parsed)
