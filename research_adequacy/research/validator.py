"""Research adequacy validation for long-form scripts (35-60 minutes).

Validates whether a ranked corpus can ground a script of a target
duration, computes aggregate research scores, and produces itemized gaps
and ranked recommendations. Adequacy failure is a result, not an error.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any

from research_adequacy.research.quality import calculate_source_quality
from research_adequacy.research.similarity import (
    calculate_text_similarity,
    count_words,
    normalize_text,
)
from research_adequacy.research.thresholds import (
    CORPUS_COMPARE_WINDOW,
    CORPUS_MIN_CONTENT_LENGTH,
    CORPUS_OVERLAP_THRESHOLD,
    CORPUS_REMOVE_THRESHOLD,
    DURATION_CHECKPOINTS,
    LONG_FORM_MINUTES,
    QUALITY_WEIGHT,
    RESEARCH_REQUIREMENTS,
    SHORT_FORM_REQUIREMENT,
    SOURCE_COUNT_SATURATION,
    SOURCE_COUNT_WEIGHT,
    WORD_COUNT_SATURATION,
    WORD_COUNT_WEIGHT,
    WORDS_PER_RECOMMENDED_SOURCE,
)
from research_adequacy.state.enums import (
    GapSeverity,
    GapType,
    RecommendationAction,
    RecommendationPriority,
    SourceType,
)
from research_adequacy.state.models import (
    AdequacyRequirement,
    CorpusDuplicate,
    CurrentMeasurements,
    EnhancementSuggestion,
    MergeResult,
    Recommendation,
    ResearchGap,
    ResearchScore,
    SourceBreakdown,
    SourceRecord,
    ValidationResult,
)
from research_adequacy.state.sources import parse_sources

logger = logging.getLogger(__name__)


# =============================================================================
# Requirements
# =============================================================================


def get_requirements_for_duration(minutes: float) -> AdequacyRequirement:
    """
    Minimum research requirement for a target duration.
    
    Below the first checkpoint a relaxed floor applies. Otherwise the
    smallest checkpoint at or above the target is used, and targets past
    the last checkpoint reuse the last one rather than extrapolating.
    """
    if minutes < DURATION_CHECKPOINTS[0]:
        return SHORT_FORM_REQUIREMENT
    
    threshold = next(
        (t for t in DURATION_CHECKPOINTS if minutes <= t),
        DURATION_CHECKPOINTS[-1],
    )
    return RESEARCH_REQUIREMENTS[threshold]


# =============================================================================
# Research Score
# =============================================================================


def calculate_research_score(
    sources: Sequence[SourceRecord | Mapping[str, Any]] | None,
) -> ResearchScore:
    """
    Aggregate statistics of a corpus.
    
    The overall score blends source count (30%, saturating at 15 sources),
    word volume (40%, saturating at 10,000 words), and mean source quality
    (30%). Words are counted from content, not from stored counts.
    
    Args:
        sources: Source records or raw rows; ``None`` counts as empty.
        
    Returns:
        ResearchScore with the overall score and average quality rounded
        to two decimals.
    """
    records = parse_sources(sources)
    if not records:
        return ResearchScore()
    
    total_words = 0
    quality_sum = 0.0
    breakdown = SourceBreakdown()
    
    for source in records:
        total_words += count_words(source.source_content)
        quality_sum += calculate_source_quality(source)
        
        if source.source_type == SourceType.SYNTHESIS.value:
            breakdown.synthesis += 1
        elif source.source_type == SourceType.DOCUMENT.value:
            breakdown.documents += 1
        elif source.source_type == SourceType.WEB.value:
            breakdown.web += 1
        
        if source.is_verified:
            breakdown.verified += 1
        if source.is_starred:
            breakdown.starred += 1
    
    average_quality = quality_sum / len(records)
    
    source_count_score = min(1.0, len(records) / SOURCE_COUNT_SATURATION)
    word_count_score = min(1.0, total_words / WORD_COUNT_SATURATION)
    overall_score = (
        source_count_score * SOURCE_COUNT_WEIGHT
        + word_count_score * WORD_COUNT_WEIGHT
        + average_quality * QUALITY_WEIGHT
    )
    
    return ResearchScore(
        overall_score=round(overall_score, 2),
        source_count=len(records),
        total_words=total_words,
        average_quality=round(average_quality, 2),
        breakdown=breakdown,
    )


# =============================================================================
# Validation
# =============================================================================


def _extract_sources(research: Any) -> list[SourceRecord]:
    if research is None:
        return []
    if isinstance(research, MergeResult):
        return list(research.sources)
    if isinstance(research, Mapping):
        return parse_sources(research.get("sources"))
    return parse_sources(research)


def validate_research_for_duration(
    research: MergeResult | Mapping[str, Any] | Sequence[Any] | None,
    duration_minutes: float,
    has_user_documents: bool = False,
) -> ValidationResult:
    """
    Decide whether a corpus can support a script of the target duration.
    
    Word-count and source-count shortfalls are critical gaps and make the
    corpus inadequate. A quality shortfall is only a warning: it shapes the
    recommendations but does not block generation.
    
    Args:
        research: A MergeResult, a mapping with a ``sources`` list, or a
            plain list of sources.
        duration_minutes: Target script duration in minutes.
        has_user_documents: Whether the caller supplied user documents.
        
    Returns:
        ValidationResult with gaps and recommendations in priority order.
    """
    requirements = get_requirements_for_duration(duration_minutes)
    score = calculate_research_score(_extract_sources(research))
    
    gaps: list[ResearchGap] = []
    recommendations: list[Recommendation] = []
    
    # Check word count
    if score.total_words < requirements.min_words:
        missing_words = requirements.min_words - score.total_words
        gaps.append(ResearchGap(
            type=GapType.WORD_COUNT,
            message=f"Insufficient research content: {score.total_words} words (need {requirements.min_words})",
            severity=GapSeverity.CRITICAL,
            missing=missing_words,
        ))
        recommendations.append(Recommendation(
            action=RecommendationAction.ADD_RESEARCH,
            title="Add More Research Sources",
            description=f"Add {math.ceil(missing_words / WORDS_PER_RECOMMENDED_SOURCE)} more comprehensive sources",
            priority=RecommendationPriority.HIGH,
        ))
    
    # Check source count
    if score.source_count < requirements.min_sources:
        gaps.append(ResearchGap(
            type=GapType.SOURCE_COUNT,
            message=f"Insufficient research sources: {score.source_count} sources (need {requirements.min_sources})",
            severity=GapSeverity.CRITICAL,
            missing=requirements.min_sources - score.source_count,
        ))
        recommendations.append(Recommendation(
            action=RecommendationAction.RUN_ENHANCED_RESEARCH,
            title="Run Enhanced Research",
            description="Use 2x depth research to gather more comprehensive sources",
            priority=RecommendationPriority.HIGH,
        ))
    
    # Check quality score
    if score.overall_score < requirements.min_quality:
        gaps.append(ResearchGap(
            type=GapType.QUALITY,
            message=f"Research quality below threshold: {score.overall_score:.2f} (need {requirements.min_quality})",
            severity=GapSeverity.WARNING,
            missing=round(requirements.min_quality - score.overall_score, 2),
        ))
        if not has_user_documents:
            recommendations.append(Recommendation(
                action=RecommendationAction.UPLOAD_DOCUMENTS,
                title="Upload Your Own Research",
                description="Add PDF/DOCX documents with detailed information on your topic",
                priority=RecommendationPriority.MEDIUM,
            ))
    
    # Check for synthesis sources
    if score.breakdown.synthesis == 0:
        recommendations.append(Recommendation(
            action=RecommendationAction.RUN_SYNTHESIS_RESEARCH,
            title="Add Synthesis Research",
            description="Run deep research to generate comprehensive synthesis sources",
            priority=RecommendationPriority.MEDIUM,
        ))
    
    # Long-form content benefits from curated material
    if not has_user_documents and duration_minutes >= LONG_FORM_MINUTES:
        recommendations.append(Recommendation(
            action=RecommendationAction.UPLOAD_DOCUMENTS,
            title="Upload Specialized Documents",
            description="For 45+ minute content, custom research documents significantly improve quality",
            priority=RecommendationPriority.LOW,
        ))
    
    is_adequate = not any(g.severity == GapSeverity.CRITICAL for g in gaps)
    
    for gap in gaps:
        if gap.severity == GapSeverity.CRITICAL:
            logger.warning("Research gap for %s min: %s", duration_minutes, gap.message)
    logger.info(
        "Research validation for %s min: adequate=%s score=%.2f words=%d sources=%d",
        duration_minutes,
        is_adequate,
        score.overall_score,
        score.total_words,
        score.source_count,
    )
    
    return ValidationResult(
        is_adequate=is_adequate,
        score=score.overall_score,
        requirements=requirements,
        current=CurrentMeasurements(
            words=score.total_words,
            sources=score.source_count,
            quality=score.average_quality,
        ),
        gaps=gaps,
        recommendations=recommendations,
        breakdown=score.breakdown,
    )


def calculate_adequacy_percentage(validation: ValidationResult | None) -> int:
    """
    Display summary of how close a corpus is to its requirement.
    
    Average of the words, sources, and quality ratios, each capped at 100
    before averaging, floored to an integer.
    """
    if validation is None:
        return 0
    
    requirements = validation.requirements
    current = validation.current
    
    def _percent(actual: float, required: float) -> float:
        if required <= 0:
            return 100.0
        return min(100.0, actual / required * 100)
    
    word_percent = _percent(current.words, requirements.min_words)
    source_percent = _percent(current.sources, requirements.min_sources)
    quality_percent = _percent(current.quality, requirements.min_quality)
    
    return math.floor((word_percent + source_percent + quality_percent) / 3)


# =============================================================================
# Corpus Overlap Report
# =============================================================================


def detect_duplicate_content(
    sources: Sequence[SourceRecord | Mapping[str, Any]] | None,
) -> list[CorpusDuplicate]:
    """
    Report overlapping sources inside a single corpus.
    
    Compares the first 500 normalized characters of every pair of sources
    with more than 100 characters of content. Read-only: the corpus is not
    modified.
    """
    chunks = []
    for source in parse_sources(sources):
        if len(source.source_content) > CORPUS_MIN_CONTENT_LENGTH:
            head = normalize_text(source.source_content)[:CORPUS_COMPARE_WINDOW]
            chunks.append((source, head))
    
    duplicates: list[CorpusDuplicate] = []
    for i, (first, first_head) in enumerate(chunks):
        for second, second_head in chunks[i + 1:]:
            similarity = calculate_text_similarity(first_head, second_head)
            if similarity <= CORPUS_OVERLAP_THRESHOLD:
                continue
            duplicates.append(CorpusDuplicate(
                source1=first.source_title,
                source2=second.source_title,
                similarity=round(similarity, 2),
                recommendation="Remove one source" if similarity > CORPUS_REMOVE_THRESHOLD else "Review for overlap",
            ))
    
    return duplicates


# =============================================================================
# Enhancement Suggestions
# =============================================================================


def suggest_research_enhancements(
    current_score: ResearchScore | Mapping[str, Any] | float | None,
    target_duration: float,
) -> list[EnhancementSuggestion]:
    """Tiered advice for improving a corpus toward its target duration."""
    requirements = get_requirements_for_duration(target_duration)
    
    if isinstance(current_score, ResearchScore):
        score = current_score.overall_score
    elif isinstance(current_score, Mapping):
        score = float(current_score.get("overall_score") or 0)
    else:
        score = float(current_score or 0)
    
    if score < 0.5:
        suggestion = EnhancementSuggestion(
            priority=RecommendationPriority.CRITICAL,
            title="Research Critically Low",
            description="Current research is insufficient for quality script generation",
            actions=[
                "Run enhanced research (2x depth)",
                "Upload comprehensive documents",
                "Consider reducing target duration",
            ],
        )
    elif score < requirements.min_quality:
        suggestion = EnhancementSuggestion(
            priority=RecommendationPriority.HIGH,
            title="Research Below Target",
            description=f"Need {(requirements.min_quality - score) * 100:.0f}% more research quality",
            actions=[
                "Add 3-5 more high-quality sources",
                "Upload topic-specific documents",
                "Run targeted research queries",
            ],
        )
    elif score < 0.8:
        suggestion = EnhancementSuggestion(
            priority=RecommendationPriority.MEDIUM,
            title="Research Adequate, Improvements Recommended",
            description="Script will generate, but additional research improves quality",
            actions=[
                "Add specialized sources for depth",
                "Include case studies or examples",
                "Consider expert interviews or whitepapers",
            ],
        )
    else:
        suggestion = EnhancementSuggestion(
            priority=RecommendationPriority.LOW,
            title="Research Quality Excellent",
            description="Research depth is sufficient for high-quality generation",
            actions=[
                "Proceed with confidence",
                "Consider marking best sources as starred",
            ],
        )
    
    return [suggestion]
