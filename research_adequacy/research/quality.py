"""Quality scoring for individual research sources.

Additive point system on a 0-1 scale:
- Base score 0.5; synthesis sources are fixed at 1.0
- Source type: document +0.2, web +0.1
- Verification: starred +0.1, fact-checked +0.1
- Length: >1000 words +0.15, >500 +0.10, >200 +0.05, <50 -0.2
- Relevance: (relevance - 0.75) * 0.2 when the retrieval step supplied one
"""

from collections.abc import Mapping
from typing import Any

from research_adequacy.research.similarity import count_words
from research_adequacy.research.thresholds import (
    BASE_QUALITY,
    RELEVANCE_BASELINE,
    RELEVANCE_WEIGHT,
    SNIPPET_PENALTY,
    SNIPPET_WORD_LIMIT,
    SOURCE_TYPE_BONUS,
    STARRED_BONUS,
    SYNTHESIS_QUALITY,
    VERIFIED_BONUS,
    WORD_COUNT_BONUSES,
)
from research_adequacy.state.enums import SourceType
from research_adequacy.state.models import SourceRecord
from research_adequacy.state.sources import parse_source


def source_word_count(source: SourceRecord) -> int:
    """Stored word count, or a count of the content when none was stored."""
    return source.word_count or count_words(source.source_content)


def calculate_source_quality(source: SourceRecord | Mapping[str, Any]) -> float:
    """
    Score a single source between 0 and 1.
    
    Pure function of the record's current state; any ``quality_score``
    already on the record is ignored.
    
    Args:
        source: Source record or raw source row.
        
    Returns:
        Quality score clamped to [0, 1].
    """
    source = parse_source(source)
    
    if source.source_type == SourceType.SYNTHESIS.value:
        return SYNTHESIS_QUALITY
    
    score = BASE_QUALITY + SOURCE_TYPE_BONUS.get(source.source_type, 0.0)
    
    if source.is_starred:
        score += STARRED_BONUS
    if source.is_verified:
        score += VERIFIED_BONUS
    
    word_count = source_word_count(source)
    for min_words, bonus in WORD_COUNT_BONUSES:
        if word_count > min_words:
            score += bonus
            break
    else:
        if word_count < SNIPPET_WORD_LIMIT:
            score -= SNIPPET_PENALTY
    
    if source.relevance is not None:
        score += (source.relevance - RELEVANCE_BASELINE) * RELEVANCE_WEIGHT
    
    return min(1.0, max(0.0, score))
