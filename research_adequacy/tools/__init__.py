"""Tools module for agent capabilities."""

from research_adequacy.tools.research import (
    merge_research,
    validate_research,
    research_adequacy_percentage,
    detect_corpus_duplicates,
    RESEARCH_TOOLS,
)

__all__ = [
    "merge_research",
    "validate_research",
    "research_adequacy_percentage",
    "detect_corpus_duplicates",
    "RESEARCH_TOOLS",
]
