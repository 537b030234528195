"""Exception types raised by the mapper."""
from __future__ import annotations


class GraphMapperError(Exception):
    """Base class for mapper errors."""


class ConfigurationError(GraphMapperError):
    """Mapping configuration cannot be used."""


class MappingSyntaxError(GraphMapperError):
    """Text is not a valid mapping expression."""


class CoercionError(GraphMapperError, ValueError):
    """A value could not be converted to the requested data type."""


class MissingLinkError(GraphMapperError):
    """An edge refers to a local id with no vertex for the current record."""

    def __init__(self, local_id):
        super().__init__(f"No vertex registered for local id {local_id!r}")
        self.local_id = local_id
