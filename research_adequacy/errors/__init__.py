"""Error handling for the research aggregation pipeline.

This module provides:
- Custom exception types for input, document, and execution errors
- Error handlers that turn exceptions into messages and state updates
"""

from research_adequacy.errors.exceptions import (
    ResearchAdequacyError,
    DataValidationError,
    SourceParseError,
    DocumentProcessingError,
    ToolExecutionError,
    NodeExecutionError,
)
from research_adequacy.errors.handlers import (
    create_error_response,
    create_workflow_error_model,
    log_error_with_context,
    handle_tool_error,
    handle_node_error,
)

__all__ = [
    # Exceptions
    "ResearchAdequacyError",
    "DataValidationError",
    "SourceParseError",
    "DocumentProcessingError",
    "ToolExecutionError",
    "NodeExecutionError",
    # Handlers
    "create_error_response",
    "create_workflow_error_model",
    "log_error_with_context",
    "handle_tool_error",
    "handle_node_error",
]
