"""Research aggregation and adequacy scoring.

Merges web research with user-uploaded documents into one ranked,
deduplicated corpus and decides whether that corpus can support a script
of a requested duration.

Example:
    from research_adequacy import merge_research_sources, validate_research_for_duration

    merged = merge_research_sources(web_sources, documents)
    validation = validate_research_for_duration(merged, 45, has_user_documents=True)
"""

from research_adequacy.research import (
    MergeOptions,
    calculate_adequacy_percentage,
    calculate_content_similarity,
    calculate_source_quality,
    detect_duplicate_content,
    merge_research_sources,
    suggest_research_enhancements,
    validate_merged_research,
    validate_research_for_duration,
)
from research_adequacy.graphs import create_research_gate_workflow
from research_adequacy.state import create_initial_state

__version__ = "0.1.0"

__all__ = [
    "MergeOptions",
    "calculate_adequacy_percentage",
    "calculate_content_similarity",
    "calculate_source_quality",
    "detect_duplicate_content",
    "merge_research_sources",
    "suggest_research_enhancements",
    "validate_merged_research",
    "validate_research_for_duration",
    "create_research_gate_workflow",
    "create_initial_state",
]
