"""In-memory graph store backed by a NetworkX MultiDiGraph."""
from __future__ import annotations

import logging
from collections import defaultdict
from itertools import count
from typing import Any, Dict, Iterable, List, Optional, Set

import networkx as nx
from networkx import MultiDiGraph

from storage.base import Edge, Element, Vertex

logger = logging.getLogger(__name__)


def _hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


class MemoryGraphStore:
    """Graph store that keeps everything in a NetworkX MultiDiGraph.

    Node attributes hold `label` and a `properties` dict. Edges are keyed by
    an integer id so that parallel edges between the same pair of vertices
    stay distinct.
    """

    def __init__(self) -> None:
        self._graph: MultiDiGraph = nx.MultiDiGraph()
        self._ids = count(1)
        self._edges: Dict[int, Edge] = {}
        # property key -> value -> vertex ids
        self._indexes: Dict[str, Dict[Any, Set[int]]] = {}

    @property
    def graph(self) -> MultiDiGraph:
        return self._graph

    @property
    def vertex_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def create_index(self, key: str, labels: Iterable[str] = ()) -> None:
        if key in self._indexes:
            return
        index: Dict[Any, Set[int]] = defaultdict(set)
        for node_id, props in self._graph.nodes(data="properties"):
            value = props.get(key)
            if value is not None and _hashable(value):
                index[value].add(node_id)
        self._indexes[key] = index
        logger.info("Index created on field %s", key)

    def add_vertex(self, label: str) -> Vertex:
        node_id = next(self._ids)
        self._graph.add_node(node_id, label=label, properties={})
        return Vertex(node_id, label)

    def add_edge(self, label: str, source: Vertex, target: Vertex) -> Edge:
        edge_id = next(self._ids)
        self._graph.add_edge(source.element_id, target.element_id, key=edge_id, label=label, properties={})
        edge = Edge(edge_id, label, source.element_id, target.element_id)
        self._edges[edge_id] = edge
        return edge

    def _properties(self, element: Element) -> Dict[str, Any]:
        if isinstance(element, Edge):
            return self._graph.edges[element.source_id, element.target_id, element.element_id]["properties"]
        return self._graph.nodes[element.element_id]["properties"]

    def set_property(self, element: Element, key: str, value: Any) -> None:
        props = self._properties(element)
        if isinstance(element, Vertex) and key in self._indexes:
            self._unindex(key, props.get(key), element.element_id)
            if value is not None and _hashable(value):
                self._indexes[key][value].add(element.element_id)
        props[key] = value

    def _unindex(self, key: str, value: Any, node_id: int) -> None:
        if value is None or not _hashable(value):
            return
        ids = self._indexes[key].get(value)
        if ids:
            ids.discard(node_id)

    def find_vertices(self, label: str, properties: Dict[str, Any]) -> List[Vertex]:
        matches = []
        for node_id, data in self._graph.nodes(data=True):
            if data["label"] != label:
                continue
            props = data["properties"]
            if all(k in props and props[k] == v for k, v in properties.items()):
                matches.append(Vertex(node_id, label))
        return matches

    def find_vertices_by_property(self, key: str, value: Any) -> List[Vertex]:
        index = self._indexes.get(key)
        if index is not None and _hashable(value):
            candidates = sorted(index.get(value, ()))
        else:
            candidates = list(self._graph.nodes)

        matches = []
        for node_id in candidates:
            data = self._graph.nodes[node_id]
            props = data["properties"]
            if key in props and props[key] == value:
                matches.append(Vertex(node_id, data["label"]))
        return matches

    def vertices(self, label: Optional[str] = None) -> List[Vertex]:
        return [
            Vertex(node_id, node_label)
            for node_id, node_label in self._graph.nodes(data="label")
            if label is None or node_label == label
        ]

    def edges(self, label: Optional[str] = None) -> List[Edge]:
        return [e for e in self._edges.values() if label is None or e.label == label]

    def vertex_properties(self, vertex: Vertex) -> Dict[str, Any]:
        return dict(self._graph.nodes[vertex.element_id]["properties"])

    def edge_properties(self, edge: Edge) -> Dict[str, Any]:
        return dict(self._properties(edge))

    def close(self) -> None:
        pass
