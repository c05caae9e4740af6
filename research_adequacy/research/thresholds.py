"""Threshold tables for source scoring, duplicate detection, and adequacy.

All tuning constants of the research pipeline live here so they can be
tested directly and adjusted without touching algorithm code.
"""

from research_adequacy.state.enums import SourceType
from research_adequacy.state.models import AdequacyRequirement


# =============================================================================
# Adequacy Requirements
# =============================================================================

# Keyed by target duration checkpoint in minutes; monotonically increasing.
RESEARCH_REQUIREMENTS: dict[int, AdequacyRequirement] = {
    35: AdequacyRequirement(min_words=7000, min_sources=10, min_quality=0.70),
    40: AdequacyRequirement(min_words=8500, min_sources=12, min_quality=0.72),
    45: AdequacyRequirement(min_words=10000, min_sources=15, min_quality=0.75),
    50: AdequacyRequirement(min_words=11500, min_sources=17, min_quality=0.77),
    60: AdequacyRequirement(min_words=13000, min_sources=20, min_quality=0.80),
}

# Durations below the lowest checkpoint
SHORT_FORM_REQUIREMENT = AdequacyRequirement(min_words=3000, min_sources=5, min_quality=0.60)

DURATION_CHECKPOINTS: tuple[int, ...] = tuple(sorted(RESEARCH_REQUIREMENTS))


# =============================================================================
# Source Quality Scoring
# =============================================================================

BASE_QUALITY = 0.5
SYNTHESIS_QUALITY = 1.0

SOURCE_TYPE_BONUS: dict[str, float] = {
    SourceType.DOCUMENT.value: 0.2,
    SourceType.WEB.value: 0.1,
}
STARRED_BONUS = 0.1
VERIFIED_BONUS = 0.1

# (exclusive lower bound on words, bonus), checked in order
WORD_COUNT_BONUSES: tuple[tuple[int, float], ...] = (
    (1000, 0.15),
    (500, 0.10),
    (200, 0.05),
)
SNIPPET_WORD_LIMIT = 50
SNIPPET_PENALTY = 0.2

RELEVANCE_BASELINE = 0.75
RELEVANCE_WEIGHT = 0.2

# Used when a record carries no quality score at sort or stats time
NEUTRAL_QUALITY = 0.5


# =============================================================================
# Similarity and Duplicate Detection
# =============================================================================

FINGERPRINT_WINDOW = 300
FINGERPRINT_MIN_LENGTH = 50
FINGERPRINT_SEPARATOR = "|||"
MIN_SIGNIFICANT_WORD_LENGTH = 4  # words longer than 3 characters

CROSS_ORIGIN_THRESHOLD = 0.7
EXACT_DUPLICATE_THRESHOLD = 0.9
WEB_DUPLICATE_THRESHOLD = 0.8

# Validator-side corpus overlap report
CORPUS_MIN_CONTENT_LENGTH = 100
CORPUS_COMPARE_WINDOW = 500
CORPUS_OVERLAP_THRESHOLD = 0.7
CORPUS_REMOVE_THRESHOLD = 0.9


# =============================================================================
# Merging
# =============================================================================

DEFAULT_MAX_SOURCES = 50

# Higher ranks sort first; unrecognised types rank 0
SOURCE_TYPE_RANK: dict[str, int] = {
    SourceType.DOCUMENT.value: 3,
    SourceType.SYNTHESIS.value: 2,
    SourceType.WEB.value: 1,
}
QUALITY_TIE_EPSILON = 0.05


# =============================================================================
# Research Score Blend
# =============================================================================

SOURCE_COUNT_WEIGHT = 0.3
WORD_COUNT_WEIGHT = 0.4
QUALITY_WEIGHT = 0.3
SOURCE_COUNT_SATURATION = 15
WORD_COUNT_SATURATION = 10000

WORDS_PER_RECOMMENDED_SOURCE = 500
LONG_FORM_MINUTES = 45
