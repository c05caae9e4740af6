"""Pydantic models for research aggregation state.

These models define the data structures that flow through the research
pipeline, from raw source records handed over by the web-research and
user-document collaborators through the merged corpus and its adequacy
verdict.
"""

from datetime import datetime, timezone
from typing import Any, Literal
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from research_adequacy.state.enums import (
    DuplicateAction,
    DuplicateType,
    FactCheckStatus,
    GapSeverity,
    GapType,
    RecommendationAction,
    RecommendationPriority,
    SourceType,
)


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _short_id() -> str:
    return str(uuid4())[:8]


# =============================================================================
# Source Records
# =============================================================================


class SourceRecord(BaseModel):
    """One unit of research material with content, origin, and trust metadata.
    
    Field names follow the shape the surrounding application stores, so raw
    rows can be validated directly. Every optional field tolerates absence
    and malformed values: they fall back to ``None``/``False``/empty string
    rather than failing the whole batch.
    """
    
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    
    id: str = Field(
        default_factory=_short_id,
        description="Opaque unique identifier"
    )
    source_type: str = Field(
        default=SourceType.WEB.value,
        description="Discriminant: web, document, or synthesis"
    )
    source_content: str = Field(default="", description="Raw text body")
    source_title: str = Field(default="", description="Human-readable label")
    source_url: str | None = Field(default=None, description="Source URL if any")
    
    # Derived measures of source_content
    word_count: int | None = Field(default=None, ge=0, description="Word count")
    content_length: int | None = Field(default=None, ge=0, description="Character count")
    
    # Trust signals
    relevance: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Estimated topical fit from the retrieval step"
    )
    is_starred: bool = Field(default=False, description="Manually or automatically prioritized")
    fact_check_status: str | None = Field(
        default=None,
        description="verified, user-provided, or unset"
    )
    quality_score: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Recomputed on every merge; never trusted from upstream"
    )
    
    # Attached by the merger
    origin: str | None = Field(default=None, description="web or user")
    normalized_content: str = Field(default="", description="Lowercased, punctuation-free text")
    fingerprint: str = Field(default="", description="Head and tail signature")
    
    source_metadata: dict[str, Any] = Field(default_factory=dict)
    
    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if value is None or value == "":
            return _short_id()
        return str(value)
    
    @field_validator("source_type", mode="before")
    @classmethod
    def _coerce_source_type(cls, value: Any) -> Any:
        if value is None or value == "":
            return SourceType.WEB.value
        if isinstance(value, SourceType):
            return value.value
        return str(value)
    
    @field_validator("source_content", "source_title", "normalized_content", "fingerprint", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)
    
    @field_validator("word_count", "content_length", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            count = int(float(value))
        except (TypeError, ValueError):
            return None
        return count if count >= 0 else None
    
    @field_validator("relevance", "quality_score", mode="before")
    @classmethod
    def _coerce_unit_interval(cls, value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if number != number:  # NaN
            return None
        return min(1.0, max(0.0, number))
    
    @field_validator("is_starred", mode="before")
    @classmethod
    def _coerce_starred(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in {"true", "1", "yes"}
        return bool(value)
    
    @field_validator("fact_check_status", "origin", mode="before")
    @classmethod
    def _coerce_label(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        if isinstance(value, FactCheckStatus):
            return value.value
        return str(value)
    
    @field_validator("source_metadata", mode="before")
    @classmethod
    def _coerce_metadata(cls, value: Any) -> dict[str, Any]:
        return value if isinstance(value, dict) else {}
    
    @property
    def is_verified(self) -> bool:
        """Whether the source passed fact checking."""
        return self.fact_check_status == FactCheckStatus.VERIFIED.value


class WebSource(SourceRecord):
    """A live web search result."""
    
    source_type: Literal["web"] = SourceType.WEB.value


class DocumentSource(SourceRecord):
    """A user-uploaded document.
    
    Starring and the user-provided status are applied when the merger
    normalizes documents, not at parse time.
    """
    
    source_type: Literal["document"] = SourceType.DOCUMENT.value


class SynthesisSource(SourceRecord):
    """An AI-generated summary standing in for a source; carries no URL."""
    
    source_type: Literal["synthesis"] = SourceType.SYNTHESIS.value


SOURCE_VARIANTS: dict[str, type[SourceRecord]] = {
    SourceType.WEB.value: WebSource,
    SourceType.DOCUMENT.value: DocumentSource,
    SourceType.SYNTHESIS.value: SynthesisSource,
}


# =============================================================================
# Duplicate Findings
# =============================================================================


class DuplicateSourceRef(BaseModel):
    """Reference to one side of a duplicate pair."""
    
    id: str = Field(..., description="Source identifier")
    title: str = Field(default="", description="Source title")
    type: str = Field(..., description="Source type of the referenced record")


class DuplicateFinding(BaseModel):
    """A detected duplicate or near-duplicate pair and the action taken."""
    
    type: DuplicateType = Field(..., description="exact, high, or web_duplicate")
    source1: DuplicateSourceRef
    source2: DuplicateSourceRef
    similarity: float = Field(..., ge=0.0, le=1.0, description="Rounded to two decimals")
    action: DuplicateAction = Field(..., description="Which record survives")
    reason: str = Field(default="", description="Human-readable explanation")
    
    @property
    def kept_id(self) -> str:
        """Identifier of the surviving record."""
        if self.action == DuplicateAction.KEEP_SOURCE_2:
            return self.source2.id
        return self.source1.id
    
    @property
    def removed_id(self) -> str:
        """Identifier of the record excluded from the merged corpus."""
        if self.action == DuplicateAction.KEEP_SOURCE_2:
            return self.source1.id
        return self.source2.id


class CorpusDuplicate(BaseModel):
    """Read-only report of two overlapping sources inside one corpus."""
    
    source1: str = Field(..., description="Title of the first source")
    source2: str = Field(..., description="Title of the second source")
    similarity: float = Field(..., ge=0.0, le=1.0)
    recommendation: str = Field(..., description="Remove one source or review for overlap")


# =============================================================================
# Merge Results
# =============================================================================


class InputStats(BaseModel):
    """Counts of the populations handed to the merger."""
    
    web_sources: int = 0
    documents: int = 0
    total: int = 0


class ProcessingStats(BaseModel):
    """Duplicate counts by type."""
    
    duplicates_found: int = 0
    exact_duplicates: int = 0
    high_similarity: int = 0
    web_duplicates: int = 0


class OutputStats(BaseModel):
    """Composition of the merged corpus."""
    
    total_sources: int = 0
    documents: int = 0
    synthesis: int = 0
    web: int = 0
    starred: int = 0
    verified: int = 0


class ContentStats(BaseModel):
    """Volume and quality of the merged corpus."""
    
    total_words: int = 0
    total_chars: int = 0
    average_words_per_source: int = 0
    average_quality: float = 0.0


class MergeStats(BaseModel):
    """Summary statistics for one merge run."""
    
    input: InputStats = Field(default_factory=InputStats)
    processing: ProcessingStats = Field(default_factory=ProcessingStats)
    output: OutputStats = Field(default_factory=OutputStats)
    content: ContentStats = Field(default_factory=ContentStats)


class MergeResult(BaseModel):
    """Ranked corpus produced by the research merger."""
    
    sources: list[SourceRecord] = Field(default_factory=list)
    stats: MergeStats = Field(default_factory=MergeStats)
    duplicates_removed: list[DuplicateFinding] = Field(default_factory=list)
    merged_at: datetime = Field(default_factory=_utc_now)


class MergedResearchCheck(BaseModel):
    """Quick words/sources check of a merge result against a duration."""
    
    meets_requirements: bool
    requirements: "AdequacyRequirement"
    actual: dict[str, int] = Field(default_factory=dict)
    gaps: dict[str, int] = Field(default_factory=dict)


# =============================================================================
# Adequacy Validation
# =============================================================================


class AdequacyRequirement(BaseModel):
    """Minimum corpus needed to ground a script of a given duration."""
    
    model_config = ConfigDict(frozen=True)
    
    min_words: int = Field(..., ge=0)
    min_sources: int = Field(..., ge=0)
    min_quality: float = Field(..., ge=0.0, le=1.0)


class SourceBreakdown(BaseModel):
    """How many sources fall into each category."""
    
    synthesis: int = 0
    documents: int = 0
    web: int = 0
    verified: int = 0
    starred: int = 0


class ResearchScore(BaseModel):
    """Aggregate statistics of a corpus."""
    
    overall_score: float = Field(default=0.0, ge=0.0, le=1.0)
    source_count: int = Field(default=0, ge=0)
    total_words: int = Field(default=0, ge=0)
    average_quality: float = Field(default=0.0, ge=0.0, le=1.0)
    breakdown: SourceBreakdown = Field(default_factory=SourceBreakdown)


class CurrentMeasurements(BaseModel):
    """What the corpus currently provides."""
    
    words: int = 0
    sources: int = 0
    quality: float = 0.0


class ResearchGap(BaseModel):
    """A dimension on which the corpus falls short of its requirement."""
    
    type: GapType
    message: str
    severity: GapSeverity
    missing: int | float = Field(..., description="Numeric shortfall")


class Recommendation(BaseModel):
    """A ranked remediation step."""
    
    action: RecommendationAction
    title: str
    description: str
    priority: RecommendationPriority


class ValidationResult(BaseModel):
    """Go/no-go verdict for generating a script of a target duration."""
    
    is_adequate: bool = Field(..., description="False when any critical gap fired")
    score: float = Field(..., ge=0.0, le=1.0, description="Overall research score")
    requirements: AdequacyRequirement
    current: CurrentMeasurements
    gaps: list[ResearchGap] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)
    breakdown: SourceBreakdown = Field(default_factory=SourceBreakdown)
    validated_at: datetime = Field(default_factory=_utc_now)
    
    @property
    def critical_gaps(self) -> list[ResearchGap]:
        """Gaps that block script generation."""
        return [g for g in self.gaps if g.severity == GapSeverity.CRITICAL]
    
    def get_gap(self, gap_type: GapType | str) -> ResearchGap | None:
        """Get the gap of a specific type, if it fired."""
        for gap in self.gaps:
            if gap.type == gap_type:
                return gap
        return None
    
    def get_recommendations_by_priority(
        self,
        priority: RecommendationPriority | str,
    ) -> list[Recommendation]:
        """Get all recommendations of a specific priority."""
        return [r for r in self.recommendations if r.priority == priority]


class EnhancementSuggestion(BaseModel):
    """Tiered advice on how to improve a corpus."""
    
    priority: RecommendationPriority
    title: str
    description: str
    actions: list[str] = Field(default_factory=list)


# =============================================================================
# Document Ingestion
# =============================================================================


class DocumentUpload(BaseModel):
    """File metadata supplied with an upload."""
    
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    
    name: str = Field(
        default="",
        validation_alias=AliasChoices("name", "file_name"),
        description="Original file name"
    )
    type: str = Field(
        default="",
        validation_alias=AliasChoices("type", "mime_type"),
        description="MIME type reported by the client"
    )
    size: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("size", "file_size"),
        description="Size in bytes"
    )
    
    @field_validator("name", "type", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)
    
    @field_validator("size", mode="before")
    @classmethod
    def _coerce_size(cls, value: Any) -> int:
        try:
            return max(0, int(value or 0))
        except (TypeError, ValueError):
            return 0


class DocumentChunk(BaseModel):
    """A fixed-size slice of a document's words."""
    
    index: int = Field(..., ge=0)
    content: str
    word_count: int = Field(..., ge=0)
    start_word: int = Field(..., ge=0)
    end_word: int = Field(..., ge=0)


class DocumentMetadata(BaseModel):
    """Measurements of a processed document."""
    
    original_length: int = 0
    processed_length: int = 0
    word_count: int = 0
    line_count: int = 0
    chunk_count: int = 0
    quality: float = Field(default=0.0, ge=0.0, le=1.0)


class ProcessedDocument(BaseModel):
    """Outcome of processing one upload."""
    
    success: bool
    file_name: str = ""
    file_type: str = ""
    file_size: int = 0
    processing_method: str = "unknown"
    content: str = ""
    metadata: DocumentMetadata | None = None
    chunks: list[DocumentChunk] = Field(default_factory=list)
    error: str | None = None


class BatchProcessingStats(BaseModel):
    """Totals across a batch of uploads."""
    
    total: int = 0
    successful: int = 0
    failed: int = 0
    total_words: int = 0
    total_chunks: int = 0


class BatchProcessingResult(BaseModel):
    """Outcome of processing a batch of uploads."""
    
    results: list[ProcessedDocument] = Field(default_factory=list)
    stats: BatchProcessingStats = Field(default_factory=BatchProcessingStats)


class DocumentValidation(BaseModel):
    """Pre-processing check of an upload."""
    
    is_valid: bool
    errors: list[str] = Field(default_factory=list)


# =============================================================================
# Workflow Errors
# =============================================================================


class WorkflowError(BaseModel):
    """An error that occurred while running the research gate."""
    
    error_id: str = Field(
        default_factory=_short_id,
        description="Unique error identifier"
    )
    occurred_at: datetime = Field(
        default_factory=_utc_now,
        description="When the error occurred"
    )
    node: str = Field(..., description="Node where error occurred")
    category: str = Field(..., description="Error category")
    message: str = Field(..., description="Error message")
    recoverable: bool = Field(
        default=True,
        description="Whether error is recoverable"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional error details"
    )


MergedResearchCheck.model_rebuild()
