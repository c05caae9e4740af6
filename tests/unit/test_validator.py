"""Tests for research adequacy validation."""

import pytest

from research_adequacy.research.merger import merge_research_sources
from research_adequacy.research.thresholds import DURATION_CHECKPOINTS, RESEARCH_REQUIREMENTS
from research_adequacy.research.validator import (
    calculate_adequacy_percentage,
    calculate_research_score,
    detect_duplicate_content,
    get_requirements_for_duration,
    suggest_research_enhancements,
    validate_research_for_duration,
)
from research_adequacy.state.enums import (
    GapSeverity,
    GapType,
    RecommendationAction,
    RecommendationPriority,
)
from research_adequacy.state.models import ResearchScore


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def thin_corpus(make_text, web_row):
    """Three web sources totalling 2,000 words."""
    return [
        web_row("w1", make_text("solar", 700)),
        web_row("w2", make_text("tidal", 700)),
        web_row("w3", make_text("wind", 600)),
    ]


@pytest.fixture
def rich_documents(make_text, document_row):
    """Thirty user documents, well past every requirement."""
    return [document_row(f"d{i}", make_text(f"doc{i}x", 700)) for i in range(30)]


# =============================================================================
# Requirements
# =============================================================================


class TestGetRequirementsForDuration:
    """Tests for the duration lookup."""
    
    @pytest.mark.parametrize("minutes,expected", [
        (35, 35),
        (36, 40),
        (40, 40),
        (45, 45),
        (46, 50),
        (59, 60),
        (60, 60),
        (90, 60),
    ])
    def test_smallest_checkpoint_at_or_above(self, minutes, expected):
        assert get_requirements_for_duration(minutes) == RESEARCH_REQUIREMENTS[expected]
    
    def test_short_form_floor(self):
        requirement = get_requirements_for_duration(20)
        assert requirement.min_words == 3000
        assert requirement.min_sources == 5
        assert requirement.min_quality == pytest.approx(0.60)
    
    def test_requirements_are_monotonic(self):
        durations = [10, 20, 34, 35, 38, 42, 45, 47, 55, 60, 75, 120]
        requirements = [get_requirements_for_duration(d) for d in durations]
        
        for lower, higher in zip(requirements, requirements[1:]):
            assert lower.min_words <= higher.min_words
            assert lower.min_sources <= higher.min_sources
            assert lower.min_quality <= higher.min_quality
    
    def test_checkpoints_are_sorted(self):
        assert list(DURATION_CHECKPOINTS) == [35, 40, 45, 50, 60]


# =============================================================================
# Research Score
# =============================================================================


class TestCalculateResearchScore:
    """Tests for the aggregate research score."""
    
    def test_empty_corpus(self):
        score = calculate_research_score([])
        assert score == ResearchScore()
        assert calculate_research_score(None).source_count == 0
    
    def test_thin_corpus(self, thin_corpus):
        score = calculate_research_score(thin_corpus)
        
        assert score.source_count == 3
        assert score.total_words == 2000
        assert score.average_quality == pytest.approx(0.7)
        assert score.overall_score == pytest.approx(0.35)
        assert score.breakdown.web == 3
        assert score.breakdown.synthesis == 0
    
    def test_words_counted_from_content(self, web_row):
        score = calculate_research_score([web_row("w1", "four words right here", word_count=5000)])
        assert score.total_words == 4
    
    def test_breakdown(self, make_text, web_row, document_row):
        sources = [
            web_row("w1", make_text("solar", 100), fact_check_status="verified"),
            document_row("d1", make_text("wind", 100)),
            {"source_type": "synthesis", "source_content": make_text("tidal", 100)},
        ]
        
        breakdown = calculate_research_score(sources).breakdown
        
        assert breakdown.web == 1
        assert breakdown.documents == 1
        assert breakdown.synthesis == 1
        assert breakdown.verified == 1
        assert breakdown.starred == 1


# =============================================================================
# Validation
# =============================================================================


class TestValidateResearchForDuration:
    """Tests for validate_research_for_duration."""
    
    def test_thin_corpus_at_45_minutes(self, thin_corpus):
        validation = validate_research_for_duration(thin_corpus, 45)
        
        assert validation.is_adequate is False
        assert validation.get_gap(GapType.WORD_COUNT).missing == 8000
        assert validation.get_gap(GapType.WORD_COUNT).severity == GapSeverity.CRITICAL
        assert validation.get_gap(GapType.SOURCE_COUNT).missing == 12
        assert validation.get_gap(GapType.SOURCE_COUNT).severity == GapSeverity.CRITICAL
        assert validation.get_gap(GapType.QUALITY).severity == GapSeverity.WARNING
        assert validation.get_gap(GapType.QUALITY).missing == pytest.approx(0.4)
        assert len(validation.critical_gaps) == 2
    
    def test_recommendations_in_priority_order(self, thin_corpus):
        validation = validate_research_for_duration(thin_corpus, 45)
        
        assert [(r.action, r.priority) for r in validation.recommendations] == [
            (RecommendationAction.ADD_RESEARCH, RecommendationPriority.HIGH),
            (RecommendationAction.RUN_ENHANCED_RESEARCH, RecommendationPriority.HIGH),
            (RecommendationAction.UPLOAD_DOCUMENTS, RecommendationPriority.MEDIUM),
            (RecommendationAction.RUN_SYNTHESIS_RESEARCH, RecommendationPriority.MEDIUM),
            (RecommendationAction.UPLOAD_DOCUMENTS, RecommendationPriority.LOW),
        ]
        assert validation.recommendations[0].description == "Add 16 more comprehensive sources"
    
    def test_user_documents_suppress_upload_advice(self, thin_corpus):
        validation = validate_research_for_duration(thin_corpus, 45, has_user_documents=True)
        
        actions = [r.action for r in validation.recommendations]
        assert RecommendationAction.UPLOAD_DOCUMENTS not in actions
    
    def test_short_duration_skips_long_form_advice(self, thin_corpus):
        validation = validate_research_for_duration(thin_corpus, 40)
        assert validation.get_recommendations_by_priority(RecommendationPriority.LOW) == []
    
    def test_adequate_corpus(self, make_text, web_row):
        sources = [web_row(f"w{i}", make_text(f"topic{i}x", 700)) for i in range(15)]
        
        validation = validate_research_for_duration(sources, 45)
        
        assert validation.is_adequate is True
        assert validation.critical_gaps == []
        assert validation.current.words == 10500
        assert validation.current.sources == 15
    
    def test_quality_gap_does_not_block(self, make_text, web_row):
        sources = [web_row(f"w{i}", make_text(f"topic{i}x", 600), relevance=0.0) for i in range(5)]
        
        validation = validate_research_for_duration(sources, 20)
        
        assert validation.is_adequate is True
        assert validation.get_gap(GapType.QUALITY).severity == GapSeverity.WARNING
        assert validation.get_gap(GapType.WORD_COUNT) is None
    
    def test_empty_research(self):
        validation = validate_research_for_duration(None, 45)
        
        assert validation.is_adequate is False
        assert validation.get_gap(GapType.WORD_COUNT).missing == 10000
        assert validation.get_gap(GapType.SOURCE_COUNT).missing == 15
    
    def test_accepts_merge_result_mapping_and_list(self, thin_corpus):
        merged = merge_research_sources(thin_corpus, [])
        
        from_list = validate_research_for_duration(thin_corpus, 45)
        from_merge = validate_research_for_duration(merged, 45)
        from_mapping = validate_research_for_duration({"sources": thin_corpus}, 45)
        
        assert from_list.current == from_merge.current == from_mapping.current
        assert from_list.gaps == from_merge.gaps == from_mapping.gaps


# =============================================================================
# Adequacy Percentage
# =============================================================================


class TestCalculateAdequacyPercentage:
    """Tests for calculate_adequacy_percentage."""
    
    def test_none_is_zero(self):
        assert calculate_adequacy_percentage(None) == 0
    
    def test_thin_corpus(self, thin_corpus):
        validation = validate_research_for_duration(thin_corpus, 45)
        assert calculate_adequacy_percentage(validation) == 44
    
    def test_clamped_at_100(self, rich_documents):
        validation = validate_research_for_duration(rich_documents, 45, has_user_documents=True)
        
        assert validation.is_adequate is True
        assert calculate_adequacy_percentage(validation) == 100
    
    def test_within_bounds(self, thin_corpus, rich_documents):
        for research in (None, [], thin_corpus, rich_documents):
            validation = validate_research_for_duration(research, 60)
            assert 0 <= calculate_adequacy_percentage(validation) <= 100


# =============================================================================
# Corpus Overlap Report
# =============================================================================


class TestDetectDuplicateContent:
    """Tests for detect_duplicate_content."""
    
    def test_identical_sources(self, make_text, web_row):
        text = make_text("solar", 200)
        
        duplicates = detect_duplicate_content([web_row("w1", text), web_row("w2", text)])
        
        assert len(duplicates) == 1
        assert duplicates[0].source1 == "Web w1"
        assert duplicates[0].source2 == "Web w2"
        assert duplicates[0].similarity == 1.0
        assert duplicates[0].recommendation == "Remove one source"
    
    def test_partial_overlap_is_reviewed(self, make_text, web_row):
        first = make_text("solar", 20)
        second = make_text("solar", 17) + " " + make_text("tidal", 3)
        
        duplicates = detect_duplicate_content([web_row("w1", first), web_row("w2", second)])
        
        assert len(duplicates) == 1
        assert duplicates[0].similarity == pytest.approx(0.74)
        assert duplicates[0].recommendation == "Review for overlap"
    
    def test_short_sources_are_skipped(self, web_row):
        text = "brief identical snippet about solar power"
        assert detect_duplicate_content([web_row("w1", text), web_row("w2", text)]) == []
    
    def test_unrelated_sources(self, make_text, web_row):
        sources = [web_row("w1", make_text("solar", 200)), web_row("w2", make_text("tidal", 200))]
        assert detect_duplicate_content(sources) == []


# =============================================================================
# Enhancement Suggestions
# =============================================================================


class TestSuggestResearchEnhancements:
    """Tests for suggest_research_enhancements."""
    
    @pytest.mark.parametrize("score,priority", [
        (0.3, RecommendationPriority.CRITICAL),
        (0.6, RecommendationPriority.HIGH),
        (0.78, RecommendationPriority.MEDIUM),
        (0.9, RecommendationPriority.LOW),
    ])
    def test_tiers_at_45_minutes(self, score, priority):
        suggestions = suggest_research_enhancements(score, 45)
        
        assert len(suggestions) == 1
        assert suggestions[0].priority == priority
        assert suggestions[0].actions
    
    def test_high_tier_reports_quality_shortfall(self):
        suggestion = suggest_research_enhancements(ResearchScore(overall_score=0.6), 45)[0]
        assert suggestion.description == "Need 15% more research quality"
    
    def test_accepts_mapping(self):
        suggestion = suggest_research_enhancements({"overall_score": 0.9}, 60)[0]
        assert suggestion.priority == RecommendationPriority.LOW
