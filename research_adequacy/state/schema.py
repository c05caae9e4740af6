"""ResearchGateState schema for the research gate workflow.

This module defines the state object that flows through the merge and
validate nodes. It uses TypedDict with optional fields (total=False) for
LangGraph compatibility.
"""

from typing import Any

from typing_extensions import TypedDict

from research_adequacy.state.enums import GateStatus
from research_adequacy.state.models import (
    MergeResult,
    ValidationResult,
    WorkflowError,
)


class ResearchGateState(TypedDict, total=False):
    """
    State for one merge and validate cycle.
    
    Usage with LangGraph:
        ```python
        from langgraph.graph import StateGraph
        from research_adequacy.state import ResearchGateState
        
        graph = StateGraph(ResearchGateState)
        graph.add_node("merge_research", merge_research_node)
        ```
    """
    
    # Inputs from the web-research and user-document collaborators
    web_sources: list[dict[str, Any]]
    user_documents: list[dict[str, Any]]
    target_duration_minutes: int
    merge_options: dict[str, Any]
    
    # Outputs
    merge_result: MergeResult | None
    validation: ValidationResult | None
    adequacy_percentage: int
    
    # Workflow metadata
    status: GateStatus
    errors: list[WorkflowError]


def create_initial_state(
    web_sources: list[dict[str, Any]] | None = None,
    user_documents: list[dict[str, Any]] | None = None,
    target_duration_minutes: int = 45,
    merge_options: dict[str, Any] | None = None,
) -> ResearchGateState:
    """Create the initial gate state for one research request."""
    return ResearchGateState(
        web_sources=list(web_sources or []),
        user_documents=list(user_documents or []),
        target_duration_minutes=target_duration_minutes,
        merge_options=dict(merge_options or {}),
        merge_result=None,
        validation=None,
        adequacy_percentage=0,
        status=GateStatus.PENDING,
        errors=[],
    )
