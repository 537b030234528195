"""Export an in-memory graph to GraphML or JSON."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import networkx as nx

from core.records import to_text
from storage.memory import MemoryGraphStore

logger = logging.getLogger(__name__)

_GRAPHML_TYPES = (str, int, float, bool)

# Mapped properties may themselves be called "label"
LABEL_KEY = "_label"


def _graphml_value(value: Any) -> Any:
    if isinstance(value, _GRAPHML_TYPES):
        return value
    return to_text(value)


def to_graphml_graph(store: MemoryGraphStore) -> nx.MultiDiGraph:
    """Copy the store into a graph whose attributes GraphML can hold."""
    graph = nx.MultiDiGraph()
    for vertex in store.vertices():
        attrs = {k: _graphml_value(v) for k, v in store.vertex_properties(vertex).items() if v is not None}
        attrs[LABEL_KEY] = vertex.label
        graph.add_node(vertex.element_id, **attrs)
    for edge in store.edges():
        attrs = {k: _graphml_value(v) for k, v in store.edge_properties(edge).items() if v is not None}
        attrs[LABEL_KEY] = edge.label
        graph.add_edge(edge.source_id, edge.target_id, key=edge.element_id, **attrs)
    return graph


def to_document(store: MemoryGraphStore) -> Dict[str, Any]:
    return {
        "vertices": [
            {"id": v.element_id, "label": v.label, "properties": store.vertex_properties(v)}
            for v in store.vertices()
        ],
        "edges": [
            {
                "id": e.element_id,
                "label": e.label,
                "source": e.source_id,
                "target": e.target_id,
                "properties": store.edge_properties(e),
            }
            for e in store.edges()
        ],
    }


def export_graph(store: MemoryGraphStore, path: str | Path) -> Path:
    """Write the store to `path`; `.graphml` files get GraphML, anything else JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".graphml":
        nx.write_graphml(to_graphml_graph(store), str(path))
    else:
        text = json.dumps(to_document(store), ensure_ascii=False, indent=2, default=to_text)
        path.write_text(text, encoding='utf-8')
    logger.info("Exported %d vertices and %d edges to %s", store.vertex_count, store.edge_count, path)
    return path
