"""XML record source."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Iterator, List

from core.records import Record
from sources.base import RecordSource


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


class XmlSource(RecordSource):
    """One record per occurrence of a named element.

    Text of nested elements is keyed by the dot-joined element path below
    the record element, attributes by `path#name`. Repeated keys collect
    their values into a list. Links between repeated nested elements are
    not kept.
    """

    def __init__(self, path: str | Path, element: str):
        self.path = Path(path)
        self.element = element

    def __iter__(self) -> Iterator[Record]:
        for _event, elem in ET.iterparse(str(self.path), events=("end",)):
            if _local_name(elem.tag) != self.element:
                continue
            record: Record = {}
            self._add_attributes(record, [], elem)
            for child in elem:
                self._walk(record, [], child)
            elem.clear()
            yield record

    def _walk(self, record: Record, parents: List[str], elem: ET.Element) -> None:
        path = parents + [_local_name(elem.tag)]
        self._add_attributes(record, path, elem)
        if elem.text and elem.text.strip():
            self._add(record, ".".join(path), elem.text)
        for child in elem:
            self._walk(record, path, child)

    def _add_attributes(self, record: Record, path: List[str], elem: ET.Element) -> None:
        for name, value in elem.attrib.items():
            self._add(record, ".".join(path) + "#" + _local_name(name), value)

    @staticmethod
    def _add(record: Record, key: str, value: Any) -> None:
        if key not in record:
            record[key] = value
        elif isinstance(record[key], list):
            record[key].append(value)
        else:
            record[key] = [record[key], value]
