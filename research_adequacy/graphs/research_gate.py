"""Research gate workflow.

START -> merge_research -> validate_research -> END

The merge node ends the graph early when it fails; the final state carries
the status, validation, and any recorded errors.
"""

import logging

from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.graph import StateGraph, START, END

from research_adequacy.graphs.routers import route_after_merge
from research_adequacy.nodes import merge_research_node, validate_research_node
from research_adequacy.state.schema import ResearchGateState

logger = logging.getLogger(__name__)


def create_research_gate_workflow(
    checkpointer: BaseCheckpointSaver | None = None,
):
    """
    Create the compiled research gate graph.
    
    Args:
        checkpointer: Optional checkpointer for persisted runs
        
    Returns:
        Compiled graph
        
    Example:
        gate = create_research_gate_workflow()
        result = gate.invoke(create_initial_state(web_sources=[...]))
    """
    workflow = StateGraph(ResearchGateState)
    
    workflow.add_node("merge_research", merge_research_node)
    workflow.add_node("validate_research", validate_research_node)
    
    workflow.add_edge(START, "merge_research")
    workflow.add_conditional_edges(
        "merge_research",
        route_after_merge,
        {"validate_research": "validate_research", "__end__": END},
    )
    workflow.add_edge("validate_research", END)
    
    logger.debug("Compiling research gate workflow")
    return workflow.compile(checkpointer=checkpointer)
