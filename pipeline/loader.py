"""Load every record of a source into a graph store."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from tqdm import tqdm

from core.configuration import Configuration
from core.records import Record
from pipeline.grapher import Grapher
from storage.base import GraphStore

logger = logging.getLogger(__name__)


@dataclass
class LoadSummary:
    read: int = 0
    written: int = 0
    filtered: int = 0


class GraphLoader:
    """Run a record source through the filters and the write engine."""

    def __init__(
        self,
        configuration: Configuration,
        store: GraphStore,
        audit_data: Optional[Mapping[str, Any]] = None,
        flatten: bool = False,
        log_every: int = 1000,
    ):
        self.configuration = configuration
        self.store = store
        self.audit_data = dict(audit_data or {})
        self.flatten = flatten
        self.log_every = log_every
        self.grapher = Grapher(configuration)

    def load(self, records: Iterable[Record], progress: bool = False) -> LoadSummary:
        summary = LoadSummary()
        self.grapher.add_index(self.store)

        logger.info("Beginning load of data into graph")
        iterator = tqdm(records, desc="Mapping", unit="record") if progress else records
        try:
            for record in iterator:
                summary.read += 1
                if self.log_every and summary.read % self.log_every == 0:
                    logger.info("Processing record %d", summary.read)

                if not self.configuration.matches_filters(record):
                    summary.filtered += 1
                    continue

                self.grapher.write(record, self.store, self.audit_data, flatten=self.flatten)
                summary.written += 1
        finally:
            if progress:
                iterator.close()

        logger.info(
            "Done loading data into graph - %d records read, %d written, %d filtered",
            summary.read, summary.written, summary.filtered,
        )
        return summary
