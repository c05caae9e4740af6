"""Tests for the research corpus tools."""

import pytest

from research_adequacy.tools import (
    RESEARCH_TOOLS,
    detect_corpus_duplicates,
    merge_research,
    research_adequacy_percentage,
    validate_research,
)


@pytest.fixture
def thin_corpus(make_text, web_row):
    return [
        web_row("w1", make_text("solar", 700)),
        web_row("w2", make_text("tidal", 700)),
        web_row("w3", make_text("wind", 600)),
    ]


class TestToolRegistry:
    """Tests for the tool list."""
    
    def test_tool_names(self):
        assert [t.name for t in RESEARCH_TOOLS] == [
            "merge_research",
            "validate_research",
            "research_adequacy_percentage",
            "detect_corpus_duplicates",
        ]
    
    def test_tools_have_descriptions(self):
        for research_tool in RESEARCH_TOOLS:
            assert research_tool.description
    
    def test_errors_are_returned_to_the_caller(self):
        for research_tool in RESEARCH_TOOLS:
            assert research_tool.handle_tool_error is True


class TestMergeResearchTool:
    """Tests for merge_research."""
    
    def test_merge(self, make_text, web_row, document_row):
        text = make_text("solar", 400)
        
        output = merge_research.invoke({
            "web_sources": [web_row("w1", text), web_row("w2", make_text("wind", 300))],
            "user_documents": [document_row("d1", text)],
        })
        
        assert [s["id"] for s in output["sources"]] == ["d1", "w2"]
        assert output["stats"]["processing"]["exact_duplicates"] == 1
        assert output["duplicates_removed"][0]["action"] == "keep_document"
    
    def test_max_sources(self, thin_corpus):
        output = merge_research.invoke({
            "web_sources": thin_corpus,
            "user_documents": [],
            "max_sources": 2,
        })
        assert len(output["sources"]) == 2


class TestValidateResearchTool:
    """Tests for validate_research and research_adequacy_percentage."""
    
    def test_validate(self, thin_corpus):
        output = validate_research.invoke({"sources": thin_corpus, "duration_minutes": 45})
        
        assert output["is_adequate"] is False
        assert output["adequacy_percentage"] == 44
        assert {g["type"] for g in output["gaps"]} == {"word_count", "source_count", "quality"}
    
    def test_percentage_from_validation_output(self, thin_corpus):
        validation = validate_research.invoke({"sources": thin_corpus, "duration_minutes": 45})
        assert research_adequacy_percentage.invoke({"validation": validation}) == 44
    
    def test_invalid_validation_returns_message(self):
        output = research_adequacy_percentage.invoke({"validation": {"bogus": 1}})
        
        assert isinstance(output, str)
        assert output.startswith("Tool error: Invalid validation result")


class TestDetectCorpusDuplicatesTool:
    """Tests for detect_corpus_duplicates."""
    
    def test_report(self, make_text, web_row):
        text = make_text("solar", 200)
        
        output = detect_corpus_duplicates.invoke({"sources": [web_row("w1", text), web_row("w2", text)]})
        
        assert output == [{
            "source1": "Web w1",
            "source2": "Web w2",
            "similarity": 1.0,
            "recommendation": "Remove one source",
        }]
