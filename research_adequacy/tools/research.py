"""Research corpus tools for agent use.

LangChain tool wrappers over the merge, validation, and overlap-report
operations. Inputs and outputs are plain JSON-compatible structures so the
tools can be bound to a model or called from a ToolNode.
"""

from typing import Any

from langchain_core.tools import ToolException, tool
from pydantic import ValidationError

from research_adequacy.errors.exceptions import ResearchAdequacyError, ToolExecutionError
from research_adequacy.errors.handlers import handle_tool_error
from research_adequacy.research.merger import MergeOptions, merge_research_sources
from research_adequacy.research.thresholds import DEFAULT_MAX_SOURCES
from research_adequacy.research.validator import (
    calculate_adequacy_percentage,
    detect_duplicate_content,
    validate_research_for_duration,
)
from research_adequacy.state.models import ValidationResult


@tool
def merge_research(
    web_sources: list[dict[str, Any]],
    user_documents: list[dict[str, Any]],
    max_sources: int = DEFAULT_MAX_SOURCES,
    remove_duplicates: bool = True,
    prioritize_documents: bool = True,
) -> dict[str, Any]:
    """
    Merge web research and uploaded documents into one ranked corpus.
    
    Duplicates between documents and web results are removed in favor of
    the documents; near-identical web results keep the higher quality one.
    
    Args:
        web_sources: Web and synthesis sources (source_type, source_content,
            source_title, source_url, relevance, ...).
        user_documents: User-uploaded document sources.
        max_sources: Maximum number of sources to keep (0 keeps all).
        remove_duplicates: Whether to detect and drop duplicates.
        prioritize_documents: Whether documents go ahead of web sources on ties.
        
    Returns:
        Dictionary with ranked sources, statistics, and removed duplicates.
    """
    options = MergeOptions(
        remove_duplicates=remove_duplicates,
        prioritize_documents=prioritize_documents,
        max_sources=max_sources,
    )
    try:
        result = merge_research_sources(web_sources, user_documents, options)
    except ResearchAdequacyError as e:
        raise ToolException(handle_tool_error(e, "merge_research")) from e
    return result.model_dump(mode="json")


@tool
def validate_research(
    sources: list[dict[str, Any]],
    duration_minutes: float,
    has_user_documents: bool = False,
) -> dict[str, Any]:
    """
    Check whether research can support a script of the target duration.
    
    Args:
        sources: Ranked research sources, typically from merge_research.
        duration_minutes: Target script duration in minutes.
        has_user_documents: Whether the user uploaded documents.
        
    Returns:
        Validation verdict with gaps, recommendations, and adequacy_percentage.
    """
    try:
        validation = validate_research_for_duration(
            {"sources": sources},
            duration_minutes,
            has_user_documents,
        )
    except ResearchAdequacyError as e:
        raise ToolException(handle_tool_error(e, "validate_research")) from e
    
    output = validation.model_dump(mode="json")
    output["adequacy_percentage"] = calculate_adequacy_percentage(validation)
    return output


@tool
def research_adequacy_percentage(validation: dict[str, Any]) -> int:
    """
    Summarize a validation result as a 0-100 adequacy percentage.
    
    Args:
        validation: A validation result as returned by validate_research.
        
    Returns:
        Integer percentage.
    """
    try:
        result = ValidationResult.model_validate(validation)
    except ValidationError as e:
        error = ToolExecutionError(
            f"Invalid validation result: {e.error_count()} field errors",
            tool_name="research_adequacy_percentage",
            tool_input={"fields": sorted(validation)},
        )
        raise ToolException(handle_tool_error(error, "research_adequacy_percentage")) from e
    return calculate_adequacy_percentage(result)


@tool
def detect_corpus_duplicates(sources: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Report pairs of sources whose openings overlap heavily.
    
    Args:
        sources: Research sources to inspect.
        
    Returns:
        Pairs with similarity and a remove/review recommendation.
    """
    try:
        duplicates = detect_duplicate_content(sources)
    except ResearchAdequacyError as e:
        raise ToolException(handle_tool_error(e, "detect_corpus_duplicates")) from e
    return [d.model_dump(mode="json") for d in duplicates]


RESEARCH_TOOLS = [
    merge_research,
    validate_research,
    research_adequacy_percentage,
    detect_corpus_duplicates,
]

for _research_tool in RESEARCH_TOOLS:
    _research_tool.handle_tool_error = True
