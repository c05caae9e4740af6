"""Text normalization, fingerprinting, and word-overlap similarity.

Similarity is a Jaccard coefficient over the sets of significant words
(longer than three characters). When both records carry a head/tail
fingerprint the heads and tails are compared separately and averaged,
which separates documents that share an opening but diverge later.
"""

import re

from research_adequacy.research.thresholds import (
    FINGERPRINT_MIN_LENGTH,
    FINGERPRINT_SEPARATOR,
    FINGERPRINT_WINDOW,
    MIN_SIGNIFICANT_WORD_LENGTH,
)
from research_adequacy.state.models import SourceRecord

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str | None) -> str:
    """Lowercase, replace punctuation with spaces, and collapse whitespace."""
    if not text:
        return ""
    text = _PUNCTUATION.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def count_words(text: str | None) -> int:
    """Count whitespace-delimited non-empty tokens."""
    if not text:
        return 0
    return len(text.split())


def create_content_fingerprint(content: str | None) -> str:
    """
    Build a head and tail signature of a text.
    
    The signature is the first and last ``FINGERPRINT_WINDOW`` characters of
    the normalized text joined by ``FINGERPRINT_SEPARATOR``. The tail is empty
    when the text fits in a single window. Near-empty texts get no
    fingerprint at all.
    """
    normalized = normalize_text(content)
    if len(normalized) < FINGERPRINT_MIN_LENGTH:
        return ""
    
    start = normalized[:FINGERPRINT_WINDOW]
    end = normalized[-FINGERPRINT_WINDOW:] if len(normalized) > FINGERPRINT_WINDOW else ""
    return f"{start}{FINGERPRINT_SEPARATOR}{end}"


def significant_words(text: str) -> set[str]:
    """Words long enough to carry topical signal."""
    return {w for w in text.split() if len(w) >= MIN_SIGNIFICANT_WORD_LENGTH}


def calculate_text_similarity(text1: str, text2: str) -> float:
    """
    Jaccard similarity of the significant-word sets of two texts.
    
    Returns 0.0 when either text has no significant words.
    """
    words1 = significant_words(text1 or "")
    words2 = significant_words(text2 or "")
    
    if not words1 or not words2:
        return 0.0
    
    return len(words1 & words2) / len(words1 | words2)


def calculate_content_similarity(source1: SourceRecord, source2: SourceRecord) -> float:
    """
    Symmetric similarity between two source records.
    
    Uses the fingerprints when both records have one; otherwise compares the
    full normalized content.
    """
    if source1.fingerprint and source2.fingerprint:
        head1, _, tail1 = source1.fingerprint.partition(FINGERPRINT_SEPARATOR)
        head2, _, tail2 = source2.fingerprint.partition(FINGERPRINT_SEPARATOR)
        
        start_sim = calculate_text_similarity(head1, head2)
        end_sim = calculate_text_similarity(tail1, tail2) if tail1 and tail2 else start_sim
        return (start_sim + end_sim) / 2
    
    return calculate_text_similarity(
        source1.normalized_content or normalize_text(source1.source_content),
        source2.normalized_content or normalize_text(source2.source_content),
    )
