import unittest

from storage.base import Edge, Vertex
from storage.neo4j.neo4j_utils import quote
from storage.neo4j.store import Neo4jGraphStore


class FakeConnection:
    """Records Cypher and answers with canned rows."""

    def __init__(self, rows=None):
        self.queries = []
        self.rows = rows or []
        self.closed = False

    def execute_query(self, query, parameters=None):
        self.queries.append((query, parameters or {}))
        return self.rows

    def execute_write_query(self, query, parameters=None):
        self.queries.append((query, parameters or {}))
        return None

    def close(self):
        self.closed = True


class Neo4jGraphStoreTest(unittest.TestCase):
    def test_quote(self):
        self.assertEqual(quote("Person"), "`Person`")
        self.assertEqual(quote("odd`name"), "`odd``name`")

    def test_add_vertex(self):
        conn = FakeConnection([{"id": "4:abc:1"}])
        vertex = Neo4jGraphStore(conn).add_vertex("Person")

        self.assertEqual(vertex, Vertex("4:abc:1", "Person"))
        self.assertIn("CREATE (n:`Person`)", conn.queries[0][0])

    def test_set_property_on_vertex_and_edge(self):
        conn = FakeConnection()
        store = Neo4jGraphStore(conn)
        store.set_property(Vertex("v1", "Person"), "name", "Bob")
        store.set_property(Edge("e1", "knows", "v1", "v2"), "prov", "abc")

        vertex_query, vertex_params = conn.queries[0]
        self.assertTrue(vertex_query.startswith("MATCH (e)"))
        self.assertEqual(vertex_params, {"id": "v1", "props": {"name": "Bob"}})
        edge_query, edge_params = conn.queries[1]
        self.assertIn("()-[e]->()", edge_query)
        self.assertEqual(edge_params, {"id": "e1", "props": {"prov": "abc"}})

    def test_find_vertices(self):
        conn = FakeConnection([{"id": "v1"}])
        found = Neo4jGraphStore(conn).find_vertices("Person", {"name": "Bob", "object.name": "box"})

        query, params = conn.queries[0]
        self.assertEqual(found, [Vertex("v1", "Person")])
        self.assertIn("n.`name` = $p0 AND n.`object.name` = $p1", query)
        self.assertEqual(params, {"p0": "Bob", "p1": "box"})

    def test_find_vertices_without_properties(self):
        conn = FakeConnection([])
        Neo4jGraphStore(conn).find_vertices("Person", {})
        self.assertNotIn("WHERE", conn.queries[0][0])

    def test_find_vertices_by_property(self):
        conn = FakeConnection([{"id": "v1", "labels": ["Person"]}, {"id": "v2", "labels": []}])
        found = Neo4jGraphStore(conn).find_vertices_by_property("identifier", "abc")

        self.assertEqual(found, [Vertex("v1", "Person"), Vertex("v2", "")])
        self.assertEqual(conn.queries[0][1], {"value": "abc"})

    def test_add_edge(self):
        conn = FakeConnection([{"id": "e1"}])
        edge = Neo4jGraphStore(conn).add_edge("hasEmail", Vertex("v1", "Person"), Vertex("v2", "Email"))

        self.assertEqual(edge, Edge("e1", "hasEmail", "v1", "v2"))
        query, params = conn.queries[0]
        self.assertIn("[r:`hasEmail`]", query)
        self.assertEqual(params, {"src": "v1", "tgt": "v2"})

    def test_create_index_per_label(self):
        conn = FakeConnection()
        store = Neo4jGraphStore(conn)
        store.create_index("identifier", ["Email", "Person"])

        self.assertEqual(len(conn.queries), 2)
        self.assertIn("FOR (n:`Email`) ON (n.`identifier`)", conn.queries[0][0])

        store.close()
        self.assertTrue(conn.closed)


if __name__ == '__main__':
    unittest.main()
