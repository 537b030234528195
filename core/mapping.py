"""Mapping expressions: `_TYPE(field)` or `_LITERAL(value)`."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from core.datatypes import DataType
from core.errors import MappingSyntaxError

_VALID_MAPPING = re.compile(r"_([A-Z]+)\((.*)\)")


@dataclass(frozen=True)
class Mapping:
    """A literal value, or a typed reference to a record field."""

    data_type: DataType
    field: Optional[str] = None
    literal: Any = None

    @classmethod
    def of_literal(cls, value: Any) -> "Mapping":
        return cls(DataType.LITERAL, literal=value)

    @classmethod
    def of_field(cls, data_type: DataType, field: str) -> "Mapping":
        if data_type is DataType.LITERAL:
            return cls.of_literal(field)
        return cls(data_type, field=field)

    @classmethod
    def parse(cls, text: str) -> "Mapping":
        m = _VALID_MAPPING.fullmatch(text)
        if not m:
            raise MappingSyntaxError(f"Mapping is not valid format: {text!r}")
        try:
            data_type = DataType[m.group(1)]
        except KeyError as exc:
            raise MappingSyntaxError(f"Unrecognised data type {m.group(1)}") from exc
        return cls.of_field(data_type, m.group(2))

    @classmethod
    def from_text(cls, text: str) -> "Mapping":
        """Parse text, treating anything that isn't a mapping as a literal string."""
        try:
            return cls.parse(text)
        except MappingSyntaxError:
            return cls.of_literal(text)

    @property
    def is_literal(self) -> bool:
        return self.data_type is DataType.LITERAL

    @property
    def is_type_hint(self) -> bool:
        # `_INTEGER()` names a target type without reading a field
        return not self.is_literal and not self.field

    def to_text(self) -> str:
        if self.is_literal:
            return f"_LITERAL({self.literal})"
        return f"_{self.data_type.value}({self.field})"

    def __str__(self) -> str:
        return self.to_text()
