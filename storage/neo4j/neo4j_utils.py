"""
Neo4j connection helpers.
Driver lifecycle and plain query execution.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from neo4j import GraphDatabase

load_dotenv()

logger = logging.getLogger(__name__)


class Neo4jConnection:
    """Neo4j driver wrapper."""

    def __init__(self, uri: str = None, user: str = None, password: str = None, database: str = None):
        """
        Open a driver.

        Args:
            uri: Bolt or neo4j URI, defaults to NEO4J_URI
            user: user name, defaults to NEO4J_USERNAME
            password: password, defaults to NEO4J_PASSWORD
            database: database name, defaults to the server default
        """
        self.uri = uri or os.getenv('NEO4J_URI', 'bolt://localhost:7687')
        self.user = user or os.getenv('NEO4J_USERNAME', 'neo4j')
        self.password = password or os.getenv('NEO4J_PASSWORD', 'password')
        self.database = database or os.getenv('NEO4J_DATABASE') or None

        try:
            self.driver = GraphDatabase.driver(
                self.uri,
                auth=(self.user, self.password),
                max_connection_lifetime=30 * 60,
                max_connection_pool_size=50,
                connection_acquisition_timeout=10.0,
                connection_timeout=10.0
            )
            logger.info("Connected to Neo4j at %s", self.uri)
        except Exception as e:
            logger.error("Neo4j connection failed: %s", e)
            raise

    def close(self):
        if hasattr(self, 'driver'):
            self.driver.close()
            logger.info("Neo4j connection closed")

    def _session(self):
        if self.database:
            return self.driver.session(database=self.database)
        return self.driver.session()

    def execute_query(self, query: str, parameters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        """
        Run a Cypher query and return its records as dicts.
        """
        if parameters is None:
            parameters = {}

        try:
            with self._session() as session:
                result = session.run(query, parameters)
                return [record.data() for record in result]
        except Exception as e:
            logger.error("Query failed: %s, error: %s", query, e)
            raise

    def execute_write_query(self, query: str, parameters: Dict[str, Any] = None) -> Optional[Any]:
        """
        Run a Cypher write and return its update counters.
        """
        if parameters is None:
            parameters = {}

        try:
            with self._session() as session:
                summary = session.run(query, parameters).consume()
                return summary.counters if summary else None
        except Exception as e:
            logger.error("Write query failed: %s, error: %s", query, e)
            raise

    def clear_database(self):
        """Delete all nodes and relationships."""
        self.execute_write_query("MATCH (n) DETACH DELETE n")
        logger.warning("Database cleared")

    def count_nodes(self, label: str = None) -> int:
        if label:
            result = self.execute_query(f"MATCH (n:{quote(label)}) RETURN COUNT(n) AS count")
        else:
            result = self.execute_query("MATCH (n) RETURN COUNT(n) AS count")
        return result[0]["count"] if result else 0

    def count_relationships(self, rel_type: str = None) -> int:
        if rel_type:
            result = self.execute_query(f"MATCH ()-[r:{quote(rel_type)}]->() RETURN COUNT(r) AS count")
        else:
            result = self.execute_query("MATCH ()-[r]->() RETURN COUNT(r) AS count")
        return result[0]["count"] if result else 0


def quote(name: str) -> str:
    """Back-tick quote a label, relationship type or property name."""
    return "`" + str(name).replace("`", "``") + "`"
