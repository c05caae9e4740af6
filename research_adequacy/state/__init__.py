"""State management for the research aggregation pipeline."""

from research_adequacy.state.enums import (
    SourceType,
    SourceOrigin,
    FactCheckStatus,
    DuplicateType,
    DuplicateAction,
    GapType,
    GapSeverity,
    RecommendationPriority,
    RecommendationAction,
    GateStatus,
)
from research_adequacy.state.models import (
    SourceRecord,
    WebSource,
    DocumentSource,
    SynthesisSource,
    DuplicateSourceRef,
    DuplicateFinding,
    CorpusDuplicate,
    MergeStats,
    MergeResult,
    MergedResearchCheck,
    AdequacyRequirement,
    SourceBreakdown,
    ResearchScore,
    CurrentMeasurements,
    ResearchGap,
    Recommendation,
    ValidationResult,
    EnhancementSuggestion,
    DocumentUpload,
    DocumentChunk,
    DocumentMetadata,
    ProcessedDocument,
    BatchProcessingStats,
    BatchProcessingResult,
    DocumentValidation,
    WorkflowError,
)
from research_adequacy.state.sources import parse_source, parse_sources
from research_adequacy.state.schema import ResearchGateState, create_initial_state

__all__ = [
    # Enums
    "SourceType",
    "SourceOrigin",
    "FactCheckStatus",
    "DuplicateType",
    "DuplicateAction",
    "GapType",
    "GapSeverity",
    "RecommendationPriority",
    "RecommendationAction",
    "GateStatus",
    # Models
    "SourceRecord",
    "WebSource",
    "DocumentSource",
    "SynthesisSource",
    "DuplicateSourceRef",
    "DuplicateFinding",
    "CorpusDuplicate",
    "MergeStats",
    "MergeResult",
    "MergedResearchCheck",
    "AdequacyRequirement",
    "SourceBreakdown",
    "ResearchScore",
    "CurrentMeasurements",
    "ResearchGap",
    "Recommendation",
    "ValidationResult",
    "EnhancementSuggestion",
    "DocumentUpload",
    "DocumentChunk",
    "DocumentMetadata",
    "ProcessedDocument",
    "BatchProcessingStats",
    "BatchProcessingResult",
    "DocumentValidation",
    "WorkflowError",
    # Parsing
    "parse_source",
    "parse_sources",
    # Schema
    "ResearchGateState",
    "create_initial_state",
]
