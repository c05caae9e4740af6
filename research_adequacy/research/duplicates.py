"""Duplicate resolution between web research and user documents.

Two passes over already-normalized populations:
- Cross-origin: every (document, web) pair above 0.7 similarity. The user
  document always survives.
- Intra-web: every pair of web sources above the stricter 0.8 bar. The
  higher quality record survives; ties keep the earlier one.
"""

import logging

from research_adequacy.research.similarity import calculate_content_similarity
from research_adequacy.research.thresholds import (
    CROSS_ORIGIN_THRESHOLD,
    EXACT_DUPLICATE_THRESHOLD,
    NEUTRAL_QUALITY,
    WEB_DUPLICATE_THRESHOLD,
)
from research_adequacy.state.enums import DuplicateAction, DuplicateType, SourceType
from research_adequacy.state.models import (
    DuplicateFinding,
    DuplicateSourceRef,
    SourceRecord,
)

logger = logging.getLogger(__name__)


def _ref(source: SourceRecord, source_type: str) -> DuplicateSourceRef:
    return DuplicateSourceRef(id=source.id, title=source.source_title, type=source_type)


def _quality(source: SourceRecord) -> float:
    return source.quality_score if source.quality_score is not None else NEUTRAL_QUALITY


def find_duplicate_content(
    web_sources: list[SourceRecord],
    doc_sources: list[SourceRecord],
) -> list[DuplicateFinding]:
    """
    Find duplicate and near-duplicate pairs.
    
    Args:
        web_sources: Normalized and fingerprinted web-origin records.
        doc_sources: Normalized and fingerprinted user documents.
        
    Returns:
        Findings in detection order: cross-origin pairs first, then
        web-web pairs.
    """
    duplicates: list[DuplicateFinding] = []
    
    for doc in doc_sources:
        for web in web_sources:
            similarity = calculate_content_similarity(doc, web)
            if similarity <= CROSS_ORIGIN_THRESHOLD:
                continue
            
            is_exact = similarity > EXACT_DUPLICATE_THRESHOLD
            duplicates.append(
                DuplicateFinding(
                    type=DuplicateType.EXACT if is_exact else DuplicateType.HIGH,
                    source1=_ref(doc, SourceType.DOCUMENT.value),
                    source2=_ref(web, SourceType.WEB.value),
                    similarity=round(similarity, 2),
                    action=DuplicateAction.KEEP_DOCUMENT,
                    reason="Content is nearly identical" if is_exact else "Significant content overlap",
                )
            )
    
    for i, first in enumerate(web_sources):
        for second in web_sources[i + 1:]:
            similarity = calculate_content_similarity(first, second)
            if similarity <= WEB_DUPLICATE_THRESHOLD:
                continue
            
            keep_first = _quality(first) >= _quality(second)
            duplicates.append(
                DuplicateFinding(
                    type=DuplicateType.WEB_DUPLICATE,
                    source1=_ref(first, SourceType.WEB.value),
                    source2=_ref(second, SourceType.WEB.value),
                    similarity=round(similarity, 2),
                    action=DuplicateAction.KEEP_SOURCE_1 if keep_first else DuplicateAction.KEEP_SOURCE_2,
                    reason="Duplicate web content - keeping higher quality",
                )
            )
    
    logger.debug(
        "Duplicate scan: %d documents x %d web sources -> %d findings",
        len(doc_sources),
        len(web_sources),
        len(duplicates),
    )
    return duplicates


def resolve_exclusions(duplicates: list[DuplicateFinding]) -> set[str]:
    """IDs of the web records each finding did not name as the keeper."""
    return {finding.removed_id for finding in duplicates}
