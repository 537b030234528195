"""JSON Schema validation of mapping configuration documents."""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

# Only the document shape is checked here. Individual vertex and edge
# entries are checked while loading so that bad entries can be skipped.
MAPPING_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["vertices"],
    "properties": {
        "vertices": {"type": "array"},
        "edges": {"type": ["array", "null"]},
    },
}


class SchemaValidator:
    def __init__(self, schema: Dict[str, Any]):
        self.schema = schema
        self.validator = Draft202012Validator(schema)

    def validate(self, data: Any) -> List[str]:
        errors = []
        for err in sorted(self.validator.iter_errors(data), key=lambda e: list(e.path)):
            path = '.'.join([str(p) for p in err.path]) or '$root'
            errors.append(f"{path}: {err.message}")
        return errors
