"""Graph store contract used by the write engine."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Union


@dataclass(frozen=True)
class Vertex:
    element_id: Any
    label: str


@dataclass(frozen=True)
class Edge:
    element_id: Any
    label: str
    source_id: Any
    target_id: Any


Element = Union[Vertex, Edge]


class GraphStore(Protocol):
    """Abstraction for the backing graph database.

    Stores may also provide `create_index(key, labels)` and `close()`.
    """

    def add_vertex(self, label: str) -> Vertex: ...

    def set_property(self, element: Element, key: str, value: Any) -> None: ...

    def find_vertices(self, label: str, properties: Dict[str, Any]) -> List[Vertex]: ...

    def find_vertices_by_property(self, key: str, value: Any) -> List[Vertex]: ...

    def add_edge(self, label: str, source: Vertex, target: Vertex) -> Edge: ...
