"""Base class for record sources."""
from __future__ import annotations

from typing import Iterator

from core.records import Record


class RecordSource:
    """Iterable of records that can be used as a context manager."""

    def __iter__(self) -> Iterator[Record]:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "RecordSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
