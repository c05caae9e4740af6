"""Research gate nodes.

Two nodes guard script generation:
- merge_research: combines web research and uploaded documents
- validate_research: checks the merged corpus against the target duration
"""

import logging
from typing import Any

from research_adequacy.config import settings
from research_adequacy.errors.exceptions import (
    ResearchAdequacyError,
    NodeExecutionError,
)
from research_adequacy.errors.handlers import handle_node_error
from research_adequacy.research.merger import MergeOptions, merge_research_sources
from research_adequacy.research.validator import (
    calculate_adequacy_percentage,
    validate_research_for_duration,
)
from research_adequacy.state.enums import GateStatus
from research_adequacy.state.schema import ResearchGateState

logger = logging.getLogger(__name__)


def _failed(error: Exception, node: str, state: ResearchGateState) -> dict[str, Any]:
    updates = handle_node_error(error, node, state)
    updates["status"] = GateStatus.FAILED
    return updates


# =============================================================================
# Merge Node
# =============================================================================


def merge_research_node(state: ResearchGateState) -> dict[str, Any]:
    """
    Merge the request's web sources and user documents.
    
    Options come from ``merge_options`` in state, falling back to the
    environment-driven settings when none were supplied.
    
    Args:
        state: Current gate state
        
    Returns:
        State updates with merge_result and status
    """
    merge_options = state.get("merge_options")
    options = (
        MergeOptions.from_mapping(merge_options)
        if merge_options
        else MergeOptions.from_settings()
    )
    
    try:
        result = merge_research_sources(
            state.get("web_sources"),
            state.get("user_documents"),
            options,
        )
    except ResearchAdequacyError as e:
        return _failed(e, "merge_research", state)
    
    return {
        "merge_result": result,
        "status": GateStatus.MERGED,
    }


# =============================================================================
# Validate Node
# =============================================================================


def validate_research_node(state: ResearchGateState) -> dict[str, Any]:
    """
    Validate the merged corpus for the requested duration.
    
    Args:
        state: Current gate state
        
    Returns:
        State updates with validation, adequacy_percentage, and status
    """
    merge_result = state.get("merge_result")
    if merge_result is None:
        return _failed(
            NodeExecutionError("No merged research to validate", node="validate_research"),
            "validate_research",
            state,
        )
    
    duration = state.get("target_duration_minutes")
    if duration is None:
        duration = settings.default_duration_minutes
    has_user_documents = bool(state.get("user_documents"))
    
    try:
        validation = validate_research_for_duration(merge_result, duration, has_user_documents)
    except ResearchAdequacyError as e:
        return _failed(e, "validate_research", state)
    
    percentage = calculate_adequacy_percentage(validation)
    status = GateStatus.READY if validation.is_adequate else GateStatus.NEEDS_MORE_RESEARCH
    
    logger.info("Research gate: %s (%d%% adequate)", status.value, percentage)
    
    return {
        "validation": validation,
        "adequacy_percentage": percentage,
        "status": status,
    }
