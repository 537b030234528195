"""Graph store backed by Neo4j."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from storage.base import Edge, Element, Vertex
from storage.neo4j.neo4j_utils import Neo4jConnection, quote

logger = logging.getLogger(__name__)


class Neo4jGraphStore:
    """Graph store that issues Cypher through a Neo4jConnection.

    Vertices and edges are addressed by their element ids.
    """

    def __init__(self, conn: Neo4jConnection):
        self.conn = conn

    def create_index(self, key: str, labels: Iterable[str] = ()) -> None:
        for label in labels:
            query = f"CREATE INDEX IF NOT EXISTS FOR (n:{quote(label)}) ON (n.{quote(key)})"
            self.conn.execute_write_query(query)
            logger.info("Index on %s.%s ensured", label, key)

    def add_vertex(self, label: str) -> Vertex:
        result = self.conn.execute_query(f"CREATE (n:{quote(label)}) RETURN elementId(n) AS id")
        return Vertex(result[0]["id"], label)

    def set_property(self, element: Element, key: str, value: Any) -> None:
        if isinstance(element, Edge):
            query = "MATCH ()-[e]->() WHERE elementId(e) = $id SET e += $props"
        else:
            query = "MATCH (e) WHERE elementId(e) = $id SET e += $props"
        self.conn.execute_write_query(query, {"id": element.element_id, "props": {key: value}})

    def find_vertices(self, label: str, properties: Dict[str, Any]) -> List[Vertex]:
        conditions = []
        params: Dict[str, Any] = {}
        for idx, (key, value) in enumerate(properties.items()):
            conditions.append(f"n.{quote(key)} = $p{idx}")
            params[f"p{idx}"] = value

        query = f"MATCH (n:{quote(label)})"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " RETURN elementId(n) AS id"

        return [Vertex(row["id"], label) for row in self.conn.execute_query(query, params)]

    def find_vertices_by_property(self, key: str, value: Any) -> List[Vertex]:
        query = f"MATCH (n) WHERE n.{quote(key)} = $value RETURN elementId(n) AS id, labels(n) AS labels"
        rows = self.conn.execute_query(query, {"value": value})
        return [Vertex(row["id"], row["labels"][0] if row["labels"] else "") for row in rows]

    def add_edge(self, label: str, source: Vertex, target: Vertex) -> Edge:
        query = f"""
        MATCH (a), (b)
        WHERE elementId(a) = $src AND elementId(b) = $tgt
        CREATE (a)-[r:{quote(label)}]->(b)
        RETURN elementId(r) AS id
        """
        result = self.conn.execute_query(query, {"src": source.element_id, "tgt": target.element_id})
        return Edge(result[0]["id"], label, source.element_id, target.element_id)

    def close(self) -> None:
        self.conn.close()
