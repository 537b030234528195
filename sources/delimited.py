"""CSV and TSV record source."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterator, List

from core.records import Record
from sources.base import RecordSource


class DelimitedSource(RecordSource):
    """Rows of a delimited text file.

    Every column is keyed by its 1-based position, and also by its header
    name when the file has a header row.
    """

    def __init__(self, path: str | Path, delimiter: str = ",", header: bool = False, encoding: str = "utf-8"):
        self.path = Path(path)
        self.delimiter = delimiter
        self.header = header
        self.encoding = encoding

    def __iter__(self) -> Iterator[Record]:
        with self.path.open('r', encoding=self.encoding, newline='') as f:
            reader = csv.reader(f, delimiter=self.delimiter)
            titles: List[str] = []
            if self.header:
                titles = next(reader, [])
            for row in reader:
                yield self._to_record(row, titles)

    @staticmethod
    def _to_record(row: List[str], titles: List[str]) -> Record:
        record: Record = {}
        for idx, value in enumerate(row):
            if idx < len(titles):
                record[titles[idx]] = value
            record[str(idx + 1)] = value
        return record
