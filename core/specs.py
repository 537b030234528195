"""Vertex and edge specifications."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from core.mapping import Mapping


@dataclass(frozen=True)
class VertexMap:
    """How to build one kind of vertex from a record.

    `local_id` is only used to link edges within one record and is never
    written to the graph.
    """

    label: str
    local_id: Any = None
    merge: bool = False
    except_rules: Dict[str, Optional[Mapping]] = field(default_factory=dict)
    properties: Dict[str, Tuple[Mapping, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class EdgeMap:
    label: str
    source_id: Any
    target_id: Any
