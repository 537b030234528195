"""Source factory."""
from __future__ import annotations

from typing import Optional

from sources.base import RecordSource
from sources.delimited import DelimitedSource
from sources.json_sources import JsonLinesSource, JsonSource
from sources.regex_source import RegexSource
from sources.sql_source import SqlSource
from sources.xml_source import XmlSource

FORMATS = ("CSV", "TSV", "JSON", "JSONL", "XML", "REGEX", "SQL")


def open_source(
    fmt: str,
    data: str,
    header: bool = False,
    table: Optional[str] = None,
    query: Optional[str] = None,
    element: Optional[str] = None,
    ignore_case: bool = False,
) -> RecordSource:
    fmt = (fmt or "CSV").upper()
    if fmt == "CSV":
        return DelimitedSource(data, ",", header)
    if fmt == "TSV":
        return DelimitedSource(data, "\t", header)
    if fmt == "JSON":
        return JsonSource(data)
    if fmt == "JSONL":
        return JsonLinesSource(data)
    if fmt == "XML":
        if not element:
            raise ValueError("Element name not specified")
        return XmlSource(data, element)
    if fmt == "REGEX":
        if not query:
            raise ValueError("Regex pattern not specified")
        return RegexSource(data, query, ignore_case=ignore_case)
    if fmt == "SQL":
        return SqlSource(data, table=table, query=query)
    raise ValueError(f"Unsupported input format: {fmt}")
