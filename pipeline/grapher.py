"""Write engine: turns one record into vertices and edges in a graph store."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping as TMapping, Optional

from core.configuration import Configuration
from core.datatypes import DataType, convert
from core.errors import CoercionError, MissingLinkError
from core.mapping import Mapping
from core.records import Record, flatten_record, is_empty, to_text
from core.specs import VertexMap
from storage.base import GraphStore, Vertex

logger = logging.getLogger(__name__)

IDENTIFIER = "identifier"

_MISSING = object()


class Grapher:
    """Add records to a graph according to a mapping configuration."""

    def __init__(self, configuration: Configuration):
        self.configuration = configuration

    def add_index(self, store: GraphStore) -> None:
        """Index the identifier property, if the store supports indexes."""
        create_index = getattr(store, "create_index", None)
        if create_index is None:
            logger.warning(
                "Unable to create index on field %s as graph type %s is not supported",
                IDENTIFIER, type(store).__name__,
            )
            return
        labels = sorted({vm.label for vm in self.configuration.vertex_maps})
        logger.info("Creating index on field %s", IDENTIFIER)
        create_index(IDENTIFIER, labels)

    def write(
        self,
        record: Record,
        store: GraphStore,
        audit_data: Optional[TMapping[str, Any]] = None,
        flatten: bool = False,
    ) -> None:
        """Map one record into the store.

        Audit data is set on every vertex and edge after the mapped
        properties, so it always wins.
        """
        audit_data = audit_data or {}
        if flatten:
            record = flatten_record(record)

        local_vertices: Dict[Any, Vertex] = {}

        for vertex_map in self.configuration.vertex_maps:
            if self.should_skip(record, vertex_map):
                continue

            properties = self.resolve_properties(record, vertex_map)
            vertex = self._identify_vertex(vertex_map, properties, store)

            for key, value in properties.items():
                store.set_property(vertex, key, value)
            for key, value in audit_data.items():
                store.set_property(vertex, key, value)

            if vertex_map.local_id is not None:
                local_vertices[vertex_map.local_id] = vertex

        for edge_map in self.configuration.edge_maps:
            try:
                source = self._linked_vertex(local_vertices, edge_map.source_id)
                target = self._linked_vertex(local_vertices, edge_map.target_id)
            except MissingLinkError as exc:
                logger.debug("Skipping %s edge: %s", edge_map.label, exc)
                continue

            edge = store.add_edge(edge_map.label, source, target)
            for key, value in audit_data.items():
                store.set_property(edge, key, value)

    @staticmethod
    def _linked_vertex(local_vertices: Dict[Any, Vertex], local_id: Any) -> Vertex:
        vertex = local_vertices.get(local_id)
        if vertex is None:
            raise MissingLinkError(local_id)
        return vertex

    def _identify_vertex(self, vertex_map: VertexMap, properties: Dict[str, Any], store: GraphStore) -> Vertex:
        if vertex_map.merge:
            matches = store.find_vertices(vertex_map.label, properties)
            if matches:
                return matches[0]
        return self._vertex_by_identifier(vertex_map.label, properties.get(IDENTIFIER), store)

    @staticmethod
    def _vertex_by_identifier(label: str, identifier: Any, store: GraphStore) -> Vertex:
        if identifier is None:
            return store.add_vertex(label)

        for vertex in store.find_vertices_by_property(IDENTIFIER, identifier):
            if vertex.label == label:
                return vertex
        return store.add_vertex(label)

    @staticmethod
    def should_skip(record: Record, vertex_map: VertexMap) -> bool:
        """True if any except rule matches the record."""
        for key, rule in vertex_map.except_rules.items():
            except_value = None
            if rule is None:
                pass
            elif rule.is_literal:
                except_value = rule.literal
            else:
                raw = record.get(rule.field)
                if not is_empty(raw):
                    try:
                        except_value = convert(raw, rule.data_type)
                    except CoercionError as exc:
                        # The rule then matches nothing
                        logger.warning(
                            "Couldn't convert value of except %s from %s to type %s: %s",
                            key, rule.field, rule.data_type.value, exc,
                        )
                        continue

            if except_value == record.get(key):
                return True
        return False

    def resolve_properties(self, record: Record, vertex_map: VertexMap) -> Dict[str, Any]:
        """Resolve every property of a vertex map against a record.

        Properties whose fields are missing or empty are left out rather
        than set to an empty value.
        """
        properties: Dict[str, Any] = {}
        for key, mappings in vertex_map.properties.items():
            if not mappings:
                continue
            if len(mappings) == 1:
                value = self._resolve_single(record, mappings[0])
            else:
                value = self._resolve_concatenation(record, list(mappings))
            if value is not _MISSING:
                properties[key] = value
        return properties

    def _resolve_single(self, record: Record, mapping: Mapping) -> Any:
        if mapping.is_literal:
            return mapping.literal

        raw = record.get(mapping.field)
        if is_empty(raw):
            return _MISSING
        try:
            return convert(raw, mapping.data_type)
        except CoercionError as exc:
            if self.configuration.lenient:
                return to_text(raw)
            logger.warning("Couldn't convert data from %s to type %s: %s", mapping.field, mapping.data_type.value, exc)
            return _MISSING

    def _resolve_concatenation(self, record: Record, mappings: List[Mapping]) -> Any:
        target_type = DataType.STRING
        if mappings[0].is_type_hint:
            target_type = mappings.pop(0).data_type

        parts: List[str] = []
        has_field = False
        non_empty_field = False

        for mapping in mappings:
            if mapping.is_literal:
                parts.append(to_text(mapping.literal))
                continue

            has_field = True
            raw = record.get(mapping.field)
            if is_empty(raw):
                continue
            try:
                parts.append(to_text(convert(raw, mapping.data_type)))
                non_empty_field = True
            except CoercionError as exc:
                if self.configuration.lenient:
                    parts.append(to_text(raw))
                    non_empty_field = True
                else:
                    logger.warning(
                        "Couldn't convert data from %s to type %s: %s",
                        mapping.field, mapping.data_type.value, exc,
                    )

        # Fields were referenced but none had a value
        if has_field and not non_empty_field:
            return _MISSING

        text = "".join(parts)
        if target_type is DataType.STRING:
            return text
        try:
            return convert(text, target_type)
        except CoercionError as exc:
            if self.configuration.lenient:
                return text
            logger.warning("Couldn't convert list to type %s: %s", target_type.value, exc)
            return _MISSING
