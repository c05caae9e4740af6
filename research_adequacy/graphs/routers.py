"""Routing functions for the research gate graph.

Kept apart from the graph definition so a larger workflow can reuse them
on its own conditional edges.
"""

import logging
from typing import Literal

from research_adequacy.state.enums import GateStatus
from research_adequacy.state.schema import ResearchGateState

logger = logging.getLogger(__name__)


def route_after_merge(state: ResearchGateState) -> Literal["validate_research", "__end__"]:
    """
    Route after the merge node.
    
    Returns:
        "validate_research" when a merge result exists, "__end__" otherwise
    """
    if state.get("status") == GateStatus.FAILED or state.get("merge_result") is None:
        logger.warning("Merge did not produce a result, ending research gate")
        return "__end__"
    return "validate_research"


def route_after_validation(
    state: ResearchGateState,
) -> Literal["ready", "needs_more_research", "failed"]:
    """
    Route after validation.
    
    A parent workflow maps "ready" to script generation and
    "needs_more_research" back to research collection.
    """
    status = state.get("status")
    validation = state.get("validation")
    
    if status == GateStatus.FAILED or validation is None:
        return "failed"
    if validation.is_adequate:
        return "ready"
    return "needs_more_research"
