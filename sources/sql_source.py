"""SQL record source for SQLite databases."""
from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Iterator, Optional

from core.records import Record
from sources.base import RecordSource

logger = logging.getLogger(__name__)


class SqlSource(RecordSource):
    """Rows of a table or query.

    Every column is keyed by its name and by its 1-based position.
    """

    def __init__(self, database: str | Path, table: Optional[str] = None, query: Optional[str] = None):
        if not table and not query:
            raise ValueError("Table name or query not specified")
        self.database = str(database)
        self.query = query or 'SELECT * FROM "{}"'.format(table.replace('"', '""'))
        self.conn: Optional[sqlite3.Connection] = None

    def __iter__(self) -> Iterator[Record]:
        if self.conn is None:
            logger.info("Connecting to SQL database %s", self.database)
            self.conn = sqlite3.connect(self.database, detect_types=sqlite3.PARSE_DECLTYPES)
        cursor = self.conn.execute(self.query)
        try:
            columns = [d[0] for d in cursor.description or []]
            for row in cursor:
                record: Record = {}
                for idx, (name, value) in enumerate(zip(columns, row), start=1):
                    record[name] = value
                    record[str(idx)] = value
                yield record
        finally:
            cursor.close()

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None
