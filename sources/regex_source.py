"""Regular expression record source."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, Pattern, Union

from core.records import Record
from sources.base import RecordSource


class RegexSource(RecordSource):
    """One record per match of a pattern in a text file.

    Groups are keyed by number ("0" is the whole match) and by name for
    named groups.
    """

    def __init__(
        self,
        path: str | Path,
        pattern: Union[str, Pattern[str]],
        ignore_case: bool = False,
        encoding: str = "utf-8",
    ):
        self.path = Path(path)
        flags = re.IGNORECASE if ignore_case else 0
        self.pattern = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern, flags)
        self.encoding = encoding

    def __iter__(self) -> Iterator[Record]:
        text = self.path.read_text(encoding=self.encoding)
        for match in self.pattern.finditer(text):
            record: Record = {str(i): match.group(i) for i in range(self.pattern.groups + 1)}
            record.update(match.groupdict())
            yield record
