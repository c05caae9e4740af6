"""LangGraph nodes for the research gate."""

from research_adequacy.nodes.research_gate import (
    merge_research_node,
    validate_research_node,
)

__all__ = [
    "merge_research_node",
    "validate_research_node",
]
