"""Graph definitions for the research gate."""

from research_adequacy.graphs.research_gate import create_research_gate_workflow
from research_adequacy.graphs.routers import (
    route_after_merge,
    route_after_validation,
)

__all__ = [
    "create_research_gate_workflow",
    "route_after_merge",
    "route_after_validation",
]
