"""Generate a sample graph with the same shape as a mapping configuration.

Values are random and meaningless; only the labels, property names, value
types and edges follow the configuration.
"""
from __future__ import annotations

import datetime as dt
import logging
import random
from typing import Any, Dict, Optional, Sequence

from faker import Faker

from core.configuration import Configuration
from core.datatypes import DataType
from core.mapping import Mapping
from storage.base import GraphStore, Vertex

logger = logging.getLogger(__name__)


class GraphGenerator:
    def __init__(self, faker: Optional[Faker] = None, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        if faker is None:
            faker = Faker()
            faker.seed_instance(self.rng.random())
        self.faker = faker

    def generate(self, store: GraphStore, configuration: Configuration) -> Dict[Any, Vertex]:
        """Add one vertex per vertex map and one edge per edge map to the store."""
        vertices: Dict[Any, Vertex] = {}
        for vertex_map in configuration.vertex_maps:
            vertex = store.add_vertex(vertex_map.label)
            for key, mappings in vertex_map.properties.items():
                store.set_property(vertex, key, self.sample_value(mappings))
            if vertex_map.local_id is not None:
                vertices[vertex_map.local_id] = vertex

        for edge_map in configuration.edge_maps:
            source = vertices.get(edge_map.source_id)
            target = vertices.get(edge_map.target_id)
            if source is None or target is None:
                logger.warning("Skipping %s edge: unknown local id", edge_map.label)
                continue
            store.add_edge(edge_map.label, source, target)

        logger.info("Generated %d vertices", len(configuration.vertex_maps))
        return vertices

    def sample_value(self, mappings: Sequence[Mapping]) -> Any:
        """Random value of the type a property would end up with."""
        if not mappings:
            return None
        if len(mappings) == 1:
            return self.sample_for(mappings[0])
        first = mappings[0]
        if first.is_type_hint:
            return self.sample_for(first)
        return self.sample_for(Mapping(DataType.STRING))

    def sample_for(self, mapping: Mapping) -> Any:
        data_type = mapping.data_type
        if data_type is DataType.LITERAL:
            return mapping.literal
        if data_type is DataType.STRING:
            return self.faker.pystr()
        if data_type is DataType.BOOLEAN:
            return self.rng.random() < 0.5
        if data_type is DataType.INTEGER:
            return self.rng.randint(-2**31, 2**31 - 1)
        if data_type is DataType.DOUBLE:
            return self.rng.uniform(-1e6, 1e6)
        if data_type is DataType.DATE:
            return self.faker.date_object()
        if data_type is DataType.DATETIME:
            return dt.datetime.combine(self.faker.date_object(), self._random_time(), tzinfo=dt.timezone.utc)
        if data_type is DataType.TIME:
            return self._random_time()
        if data_type is DataType.URL:
            return self.faker.url()
        if data_type is DataType.IPADDRESS:
            return self.faker.ipv4()
        return None

    def _random_time(self) -> dt.time:
        return dt.time(self.rng.randrange(24), self.rng.randrange(60), self.rng.randrange(60))
