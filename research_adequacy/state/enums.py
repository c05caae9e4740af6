"""Enums and constants for research aggregation state."""

from enum import Enum


class SourceType(str, Enum):
    """Kind of research material a source record carries."""
    
    WEB = "web"              # Live web search result
    DOCUMENT = "document"    # User-uploaded document
    SYNTHESIS = "synthesis"  # AI-generated summary standing in for a source


class SourceOrigin(str, Enum):
    """Which producer handed the source to the merger."""
    
    WEB = "web"    # Web-research collaborator
    USER = "user"  # User-document collaborator


class FactCheckStatus(str, Enum):
    """Verification state of a source."""
    
    VERIFIED = "verified"
    USER_PROVIDED = "user-provided"


class DuplicateType(str, Enum):
    """Classification of a detected duplicate pair."""
    
    EXACT = "exact"                  # Cross-origin, similarity > 0.9
    HIGH = "high"                    # Cross-origin, similarity > 0.7
    WEB_DUPLICATE = "web_duplicate"  # Two web sources, similarity > 0.8


class DuplicateAction(str, Enum):
    """Which record of a duplicate pair survives."""
    
    KEEP_DOCUMENT = "keep_document"
    KEEP_SOURCE_1 = "keep_source_1"
    KEEP_SOURCE_2 = "keep_source_2"


class GapType(str, Enum):
    """Dimension on which a corpus falls short."""
    
    WORD_COUNT = "word_count"
    SOURCE_COUNT = "source_count"
    QUALITY = "quality"


class GapSeverity(str, Enum):
    """Severity of a research gap."""
    
    CRITICAL = "critical"  # Blocks script generation
    WARNING = "warning"    # Affects recommendations only


class RecommendationPriority(str, Enum):
    """Priority of a remediation recommendation."""
    
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationAction(str, Enum):
    """Remediation actions the caller can offer the user."""
    
    ADD_RESEARCH = "add_research"
    RUN_ENHANCED_RESEARCH = "run_enhanced_research"
    UPLOAD_DOCUMENTS = "upload_documents"
    RUN_SYNTHESIS_RESEARCH = "run_synthesis_research"


class GateStatus(str, Enum):
    """Outcome of the research gate workflow."""
    
    PENDING = "pending"
    MERGED = "merged"
    READY = "ready"
    NEEDS_MORE_RESEARCH = "needs_more_research"
    FAILED = "failed"
