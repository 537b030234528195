"""JSON and JSON Lines record sources."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator

from core.records import Record
from sources.base import RecordSource

logger = logging.getLogger(__name__)


class JsonSource(RecordSource):
    """Objects of a JSON array."""

    def __init__(self, path: str | Path, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding

    def __iter__(self) -> Iterator[Record]:
        data = json.loads(self.path.read_text(encoding=self.encoding))
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array in {self.path}")
        for item in data:
            if not isinstance(item, dict):
                logger.warning("Skipping non-object JSON value of type %s", type(item).__name__)
                continue
            yield item


class JsonLinesSource(RecordSource):
    """One JSON object per line."""

    def __init__(self, path: str | Path, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding

    def __iter__(self) -> Iterator[Record]:
        with self.path.open('r', encoding=self.encoding) as f:
            for line_no, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    item = json.loads(line)
                except json.JSONDecodeError as exc:
                    logger.warning("Unable to parse line %d: %s", line_no, exc)
                    yield {}
                    continue
                if not isinstance(item, dict):
                    logger.warning("Unable to parse line %d: not a JSON object", line_no)
                    yield {}
                    continue
                yield item
