"""Research aggregation and adequacy scoring.

This module provides:
- Source quality scoring and content similarity
- Duplicate detection and the web/document merger
- Duration-based adequacy validation and enhancement advice
- Document ingestion for user uploads
"""

from research_adequacy.research.thresholds import (
    RESEARCH_REQUIREMENTS,
    SHORT_FORM_REQUIREMENT,
    DURATION_CHECKPOINTS,
)
from research_adequacy.research.similarity import (
    normalize_text,
    count_words,
    create_content_fingerprint,
    calculate_text_similarity,
    calculate_content_similarity,
)
from research_adequacy.research.quality import calculate_source_quality
from research_adequacy.research.duplicates import (
    find_duplicate_content,
    resolve_exclusions,
)
from research_adequacy.research.merger import (
    MergeOptions,
    compare_sources,
    prioritize_sources,
    generate_merge_stats,
    merge_research_sources,
    validate_merged_research,
)
from research_adequacy.research.validator import (
    get_requirements_for_duration,
    calculate_research_score,
    validate_research_for_duration,
    calculate_adequacy_percentage,
    detect_duplicate_content,
    suggest_research_enhancements,
)
from research_adequacy.research.documents import (
    chunk_text,
    calculate_document_quality,
    process_document,
    process_batch_documents,
    document_to_research_source,
    validate_document_for_processing,
)

__all__ = [
    # Thresholds
    "RESEARCH_REQUIREMENTS",
    "SHORT_FORM_REQUIREMENT",
    "DURATION_CHECKPOINTS",
    # Similarity
    "normalize_text",
    "count_words",
    "create_content_fingerprint",
    "calculate_text_similarity",
    "calculate_content_similarity",
    # Scoring
    "calculate_source_quality",
    # Duplicates
    "find_duplicate_content",
    "resolve_exclusions",
    # Merger
    "MergeOptions",
    "compare_sources",
    "prioritize_sources",
    "generate_merge_stats",
    "merge_research_sources",
    "validate_merged_research",
    # Validator
    "get_requirements_for_duration",
    "calculate_research_score",
    "validate_research_for_duration",
    "calculate_adequacy_percentage",
    "detect_duplicate_content",
    "suggest_research_enhancements",
    # Documents
    "chunk_text",
    "calculate_document_quality",
    "process_document",
    "process_batch_documents",
    "document_to_research_source",
    "validate_document_for_processing",
]
