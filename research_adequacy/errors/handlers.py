"""Turn pipeline exceptions into log records, messages, and state updates.

The LangChain tools report failures back to the calling model as short
strings; the research gate nodes record them on graph state as
``WorkflowError`` entries so routing can end the run.
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Any

from research_adequacy.errors.exceptions import (
    ResearchAdequacyError,
    DataValidationError,
    SourceParseError,
    DocumentProcessingError,
    ToolExecutionError,
    NodeExecutionError,
)
from research_adequacy.state.models import WorkflowError

logger = logging.getLogger(__name__)

# Most specific first: SourceParseError is also a DataValidationError.
ERROR_CATEGORIES: tuple[tuple[type[Exception], str], ...] = (
    (SourceParseError, "source_parse_error"),
    (DataValidationError, "validation_error"),
    (DocumentProcessingError, "document_error"),
    (ToolExecutionError, "tool_error"),
    (NodeExecutionError, "node_error"),
    (ResearchAdequacyError, "research_error"),
)


def _detect_error_category(error: Exception) -> str:
    for error_type, category in ERROR_CATEGORIES:
        if isinstance(error, error_type):
            return category
    return "unknown_error"


def _describe(error: Exception) -> dict[str, Any]:
    """Message, details, and recoverability for any exception.

    Exceptions from outside the package are treated as recoverable so a
    single odd source never aborts a run.
    """
    if isinstance(error, ResearchAdequacyError):
        described = error.to_dict()
        described.pop("type")
        return described
    return {
        "message": str(error),
        "details": {"original_type": type(error).__name__},
        "recoverable": True,
    }


# =============================================================================
# Structured Errors
# =============================================================================


def create_error_response(
    error: Exception,
    node: str | None = None,
    include_traceback: bool = False,
) -> dict[str, Any]:
    """
    Serializable summary of an error for API or tool responses.

    Args:
        error: The exception to summarize
        node: Tool or node name, when known
        include_traceback: Attach the current traceback text

    Returns:
        Dictionary with error_type, message, details, recoverable, and
        timestamp
    """
    described = _describe(error)
    response: dict[str, Any] = {
        "error_type": type(error).__name__,
        "message": described["message"],
        "details": described["details"] if isinstance(error, ResearchAdequacyError) else {},
        "recoverable": described["recoverable"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if node:
        response["node"] = node
    if include_traceback:
        response["traceback"] = traceback.format_exc()
    return response


def create_workflow_error_model(
    error: Exception,
    node: str,
    category: str | None = None,
) -> WorkflowError:
    """Build the ``WorkflowError`` recorded on gate state for ``error``."""
    described = _describe(error)
    return WorkflowError(
        node=node,
        category=category or _detect_error_category(error),
        message=described["message"],
        recoverable=described["recoverable"],
        details=described["details"],
    )


def log_error_with_context(
    error: Exception,
    node: str | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """
    Log one line describing the error and where it happened.

    The traceback goes to DEBUG so it is available without cluttering
    normal output.
    """
    parts = [f"{type(error).__name__}: {error}"]
    if node:
        parts.append(f"Node: {node}")
    if isinstance(error, ResearchAdequacyError):
        if error.details:
            parts.append(f"Details: {error.details}")
        parts.append(f"Recoverable: {error.recoverable}")
    if context:
        parts.append(f"Context: {context}")

    logger.log(level, "%s", " | ".join(parts))
    logger.debug("Traceback:\n%s", traceback.format_exc())


# =============================================================================
# Tool and Node Handlers
# =============================================================================


def handle_tool_error(error: Exception, tool_name: str | None = None) -> str:
    """
    Log a tool failure and phrase it for the calling model.

    Args:
        error: The exception raised inside the tool
        tool_name: Name of the failing tool

    Returns:
        Short message suitable as tool output
    """
    log_error_with_context(error, node=f"tool:{tool_name}", level=logging.WARNING)

    if isinstance(error, SourceParseError):
        return f"Invalid research source: {error.message}"
    if isinstance(error, DataValidationError):
        field = f" ({error.field})" if error.field else ""
        return f"Invalid input{field}: {error.message}"
    if isinstance(error, DocumentProcessingError):
        return f"Document could not be processed: {error.message}"
    if isinstance(error, ToolExecutionError):
        return f"Tool error: {error.message}"
    return f"An error occurred: {str(error)[:100]}"


def handle_node_error(
    error: Exception,
    node: str,
    state: dict[str, Any],
) -> dict[str, Any]:
    """
    Log a node failure and return the ``errors`` update for gate state.

    Existing errors on the state are kept; the new one is appended.
    """
    log_error_with_context(error, node=node)

    errors = list(state.get("errors") or [])
    errors.append(create_workflow_error_model(error, node))
    return {"errors": errors}
