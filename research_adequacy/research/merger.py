"""Research merger for hybrid research sources.

Merges web research and user-uploaded documents into one ranked corpus,
removing duplicates and prioritizing the most valuable sources.

Pipeline:
1. Normalize both populations (origin, normalized content, fingerprint)
2. Resolve duplicates between and within populations
3. Drop excluded records and concatenate (documents first by default)
4. Re-score every surviving record
5. Priority-sort, then truncate to the configured maximum
6. Summarize
"""

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any

from research_adequacy.config import settings
from research_adequacy.research.duplicates import find_duplicate_content, resolve_exclusions
from research_adequacy.research.quality import calculate_source_quality, source_word_count
from research_adequacy.research.similarity import create_content_fingerprint, normalize_text
from research_adequacy.research.thresholds import (
    NEUTRAL_QUALITY,
    QUALITY_TIE_EPSILON,
    RESEARCH_REQUIREMENTS,
    SOURCE_TYPE_RANK,
    DEFAULT_MAX_SOURCES,
)
from research_adequacy.state.enums import (
    DuplicateType,
    FactCheckStatus,
    SourceOrigin,
    SourceType,
)
from research_adequacy.state.models import (
    ContentStats,
    DocumentSource,
    DuplicateFinding,
    InputStats,
    MergedResearchCheck,
    MergeResult,
    MergeStats,
    OutputStats,
    ProcessingStats,
    SourceRecord,
)
from research_adequacy.state.sources import parse_sources

logger = logging.getLogger(__name__)


# =============================================================================
# Options
# =============================================================================


@dataclass
class MergeOptions:
    """Options for one merge run.
    
    Attributes:
        remove_duplicates: Run the duplicate resolver before merging
        prioritize_documents: Place user documents ahead of web sources
            before sorting (tie-break input only)
        max_sources: Maximum corpus size; ``None`` or 0 keeps everything
    """
    remove_duplicates: bool = True
    prioritize_documents: bool = True
    max_sources: int | None = DEFAULT_MAX_SOURCES
    
    @classmethod
    def from_settings(cls) -> "MergeOptions":
        """Build options from environment-backed settings."""
        return cls(
            remove_duplicates=settings.remove_duplicates,
            prioritize_documents=settings.prioritize_documents,
            max_sources=settings.max_sources,
        )
    
    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> "MergeOptions":
        """Build options from a plain mapping; unknown keys are ignored."""
        options = options or {}
        defaults = cls()
        return cls(
            remove_duplicates=bool(options.get("remove_duplicates", defaults.remove_duplicates)),
            prioritize_documents=bool(options.get("prioritize_documents", defaults.prioritize_documents)),
            max_sources=options.get("max_sources", defaults.max_sources),
        )


# =============================================================================
# Normalization
# =============================================================================


def _derived_measures(source: SourceRecord) -> dict[str, Any]:
    updates: dict[str, Any] = {
        "normalized_content": normalize_text(source.source_content),
        "fingerprint": create_content_fingerprint(source.source_content),
    }
    if source.word_count is None:
        updates["word_count"] = source_word_count(source)
    if source.content_length is None:
        updates["content_length"] = len(source.source_content)
    return updates


def normalize_web_sources(web_sources: Iterable[SourceRecord]) -> list[SourceRecord]:
    """Attach origin, normalized content, and fingerprint to web records."""
    normalized = []
    for source in web_sources:
        record = source.model_copy(update={
            "origin": SourceOrigin.WEB.value,
            **_derived_measures(source),
        })
        normalized.append(record.model_copy(update={"quality_score": calculate_source_quality(record)}))
    return normalized


def normalize_document_sources(documents: Iterable[SourceRecord]) -> list[SourceRecord]:
    """Normalize user documents; they are always starred and user-provided."""
    normalized = []
    for doc in documents:
        record = DocumentSource.model_validate({
            **doc.model_dump(),
            "source_type": SourceType.DOCUMENT.value,
            "origin": SourceOrigin.USER.value,
            "is_starred": True,
            "fact_check_status": FactCheckStatus.USER_PROVIDED.value,
        })
        record = record.model_copy(update=_derived_measures(record))
        normalized.append(record.model_copy(update={"quality_score": calculate_source_quality(record)}))
    return normalized


# =============================================================================
# Deduplication and Ordering
# =============================================================================


def deduplicate_and_merge(
    web_sources: list[SourceRecord],
    doc_sources: list[SourceRecord],
    duplicates: list[DuplicateFinding],
    prioritize_documents: bool = True,
) -> list[SourceRecord]:
    """
    Drop the web records each duplicate finding excluded and concatenate.
    
    Every finding removes a web-origin record, so exclusions only filter
    the web population. User documents always survive, even when their ids
    collide with web ids from the other producer.
    
    The concatenation order only feeds the stable sort as a tie-break.
    """
    excluded = resolve_exclusions(duplicates)
    
    filtered_web = [s for s in web_sources if s.id not in excluded]
    
    logger.debug("Filtered: %d web sources", len(web_sources) - len(filtered_web))
    
    if prioritize_documents:
        return list(doc_sources) + filtered_web
    return filtered_web + list(doc_sources)


def _quality_or_neutral(source: SourceRecord) -> float:
    return source.quality_score if source.quality_score is not None else NEUTRAL_QUALITY


def compare_sources(a: SourceRecord, b: SourceRecord) -> int:
    """
    Priority comparison; negative when ``a`` ranks ahead of ``b``.
    
    Keys in order: starred, source type rank (document > synthesis > web),
    quality when the gap exceeds 0.05, then word count.
    """
    if a.is_starred != b.is_starred:
        return -1 if a.is_starred else 1
    
    a_rank = SOURCE_TYPE_RANK.get(a.source_type, 0)
    b_rank = SOURCE_TYPE_RANK.get(b.source_type, 0)
    if a_rank != b_rank:
        return b_rank - a_rank
    
    a_quality = _quality_or_neutral(a)
    b_quality = _quality_or_neutral(b)
    if abs(a_quality - b_quality) > QUALITY_TIE_EPSILON:
        return -1 if a_quality > b_quality else 1
    
    return (b.word_count or 0) - (a.word_count or 0)


def prioritize_sources(sources: list[SourceRecord]) -> list[SourceRecord]:
    """Stable priority sort; returns a new list."""
    return sorted(sources, key=cmp_to_key(compare_sources))


# =============================================================================
# Statistics
# =============================================================================


def generate_merge_stats(
    web_sources: list[SourceRecord],
    doc_sources: list[SourceRecord],
    duplicates: list[DuplicateFinding],
    final: list[SourceRecord],
) -> MergeStats:
    """Summarize inputs, duplicates, and the final corpus. Empty input yields zeros."""
    total_words = sum(s.word_count or 0 for s in final)
    total_chars = sum(s.content_length or 0 for s in final)
    count = len(final)
    
    return MergeStats(
        input=InputStats(
            web_sources=len(web_sources),
            documents=len(doc_sources),
            total=len(web_sources) + len(doc_sources),
        ),
        processing=ProcessingStats(
            duplicates_found=len(duplicates),
            exact_duplicates=sum(1 for d in duplicates if d.type == DuplicateType.EXACT),
            high_similarity=sum(1 for d in duplicates if d.type == DuplicateType.HIGH),
            web_duplicates=sum(1 for d in duplicates if d.type == DuplicateType.WEB_DUPLICATE),
        ),
        output=OutputStats(
            total_sources=count,
            documents=sum(1 for s in final if s.source_type == SourceType.DOCUMENT.value),
            synthesis=sum(1 for s in final if s.source_type == SourceType.SYNTHESIS.value),
            web=sum(1 for s in final if s.source_type == SourceType.WEB.value),
            starred=sum(1 for s in final if s.is_starred),
            verified=sum(1 for s in final if s.is_verified),
        ),
        content=ContentStats(
            total_words=total_words,
            total_chars=total_chars,
            average_words_per_source=math.floor(total_words / count + 0.5) if count else 0,
            average_quality=round(sum(_quality_or_neutral(s) for s in final) / count, 2) if count else 0.0,
        ),
    )


# =============================================================================
# Merge
# =============================================================================


def merge_research_sources(
    web_research: Iterable[SourceRecord | Mapping[str, Any]] | None,
    user_documents: Iterable[SourceRecord | Mapping[str, Any]] | None,
    options: MergeOptions | Mapping[str, Any] | None = None,
) -> MergeResult:
    """
    Merge web research and user documents into one ranked corpus.
    
    Never raises for empty input: zero sources in gives zero sources out
    with all statistics at zero.
    
    Args:
        web_research: Records from the web-research collaborator (may
            include synthesis sources).
        user_documents: Records from the user-document collaborator.
        options: MergeOptions or a mapping of the same fields.
        
    Returns:
        MergeResult with the ranked sources, statistics, and the duplicate
        findings that drove exclusion.
    """
    if not isinstance(options, MergeOptions):
        options = MergeOptions.from_mapping(options)
    
    web_sources = normalize_web_sources(parse_sources(web_research))
    doc_sources = normalize_document_sources(parse_sources(user_documents))
    
    logger.info(
        "Merging research: %d web sources + %d documents",
        len(web_sources),
        len(doc_sources),
    )
    
    duplicates: list[DuplicateFinding] = []
    if options.remove_duplicates:
        duplicates = find_duplicate_content(web_sources, doc_sources)
        logger.info("Found %d potential duplicates", len(duplicates))
    
    merged = deduplicate_and_merge(
        web_sources,
        doc_sources,
        duplicates,
        prioritize_documents=options.prioritize_documents,
    )
    
    scored = [
        source.model_copy(update={"quality_score": calculate_source_quality(source)})
        for source in merged
    ]
    
    prioritized = prioritize_sources(scored)
    final = prioritized[:options.max_sources] if options.max_sources else prioritized
    
    stats = generate_merge_stats(web_sources, doc_sources, duplicates, final)
    
    logger.info(
        "Merge complete: %d sources (removed %d duplicates)",
        len(final),
        len(duplicates),
    )
    
    return MergeResult(sources=final, stats=stats, duplicates_removed=duplicates)


def validate_merged_research(
    merge_result: MergeResult,
    target_duration_seconds: float,
) -> MergedResearchCheck:
    """
    Check a merge result's volume against the duration checkpoints.
    
    Words and sources only; the target is given in seconds and rounded up
    to whole minutes. Durations past the last checkpoint use the last one.
    """
    minutes = math.ceil(target_duration_seconds / 60)
    checkpoint = next(
        (t for t in sorted(RESEARCH_REQUIREMENTS) if minutes <= t),
        max(RESEARCH_REQUIREMENTS),
    )
    requirement = RESEARCH_REQUIREMENTS[checkpoint]
    
    words = merge_result.stats.content.total_words
    sources = merge_result.stats.output.total_sources
    
    return MergedResearchCheck(
        meets_requirements=words >= requirement.min_words and sources >= requirement.min_sources,
        requirements=requirement,
        actual={"words": words, "sources": sources},
        gaps={
            "words": max(0, requirement.min_words - words),
            "sources": max(0, requirement.min_sources - sources),
        },
    )
