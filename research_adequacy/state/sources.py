"""Parsing of raw source rows into typed source records."""

import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from research_adequacy.errors.exceptions import SourceParseError
from research_adequacy.state.enums import SourceType
from research_adequacy.state.models import SOURCE_VARIANTS, SourceRecord

logger = logging.getLogger(__name__)


def parse_source(data: SourceRecord | Mapping[str, Any]) -> SourceRecord:
    """
    Build a typed source record from a raw row.
    
    The ``source_type`` discriminant selects the variant. Rows with an
    unrecognised type are kept as a plain ``SourceRecord`` so they still
    flow through the pipeline (they rank lowest when sorted).
    
    Args:
        data: A source model or a mapping shaped like a stored source row.
        
    Returns:
        The matching SourceRecord variant.
        
    Raises:
        SourceParseError: If ``data`` is neither a model nor a mapping.
    """
    if isinstance(data, SourceRecord):
        return data
    if not isinstance(data, Mapping):
        raise SourceParseError(
            f"Cannot parse source from {type(data).__name__}",
            value=data,
        )
    
    raw_type = data.get("source_type")
    if isinstance(raw_type, Enum):
        raw_type = raw_type.value
    variant = SOURCE_VARIANTS.get(raw_type or SourceType.WEB.value, SourceRecord)
    if variant is SourceRecord:
        logger.debug("Unrecognised source_type %r; keeping generic record", raw_type)
    return variant.model_validate(dict(data))


def parse_sources(items: Iterable[SourceRecord | Mapping[str, Any]] | None) -> list[SourceRecord]:
    """Parse a collection of raw rows; ``None`` is treated as empty."""
    if not items:
        return []
    return [parse_source(item) for item in items]
