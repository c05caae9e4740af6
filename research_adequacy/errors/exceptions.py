"""Custom exception types for the research aggregation pipeline.

The merge, scoring, and validation core degrades gracefully and does not
raise for sparse or empty input. These exceptions cover the edges: rows
that are not source records at all, uploads that cannot be turned into
text, and failures inside the tool and workflow wrappers.
"""

from typing import Any


class ResearchAdequacyError(Exception):
    """Base exception for all research pipeline errors.
    
    Attributes:
        message: Human-readable error description
        details: Additional error context
        recoverable: Whether the caller can continue with the remaining input
    """
    
    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
    ):
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        super().__init__(message)
    
    def to_dict(self) -> dict[str, Any]:
        """Serializable form used in error responses and workflow state."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# Input Errors
# =============================================================================


class DataValidationError(ResearchAdequacyError):
    """A value failed validation.
    
    Raised when options, uploads, or intermediate state fail validation.
    """
    
    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
    ):
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)[:100]
        if constraint:
            details["constraint"] = constraint
        super().__init__(message, details, recoverable)
        self.field = field
        self.constraint = constraint


class SourceParseError(DataValidationError):
    """A research item is not a source record or a mapping."""
    
    def __init__(
        self,
        message: str,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message,
            field="source",
            value=value,
            constraint="mapping or SourceRecord",
            details=details,
            recoverable=True,
        )


class DocumentProcessingError(ResearchAdequacyError):
    """Error turning an uploaded document into research text."""
    
    def __init__(
        self,
        message: str,
        file_name: str | None = None,
        file_type: str | None = None,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
    ):
        details = details or {}
        if file_name:
            details["file_name"] = file_name
        if file_type:
            details["file_type"] = file_type
        super().__init__(message, details, recoverable)
        self.file_name = file_name
        self.file_type = file_type


# =============================================================================
# Execution Errors
# =============================================================================


class ToolExecutionError(ResearchAdequacyError):
    """Error during tool execution."""
    
    def __init__(
        self,
        message: str,
        tool_name: str,
        tool_input: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
    ):
        details = details or {}
        details["tool_name"] = tool_name
        if tool_input:
            details["tool_input"] = tool_input
        super().__init__(message, details, recoverable)
        self.tool_name = tool_name
        self.tool_input = tool_input


class NodeExecutionError(ResearchAdequacyError):
    """Error inside a research gate node."""
    
    def __init__(
        self,
        message: str,
        node: str,
        details: dict[str, Any] | None = None,
        recoverable: bool = False,
    ):
        details = details or {}
        details["node"] = node
        super().__init__(message, details, recoverable)
        self.node = node
