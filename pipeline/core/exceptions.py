"""
Custom exceptions for pipeline definition and execution.

Validation and not-found errors are raised before any side effect.
Step failures are converted into a failed run by the PipelineRunner.
Persistence failures carry a user-facing message classified from the
underlying database error.
"""

from typing import Optional


class PipelineExecutionError(Exception):
    """
    Base exception for the pipeline engine.

    All engine-specific exceptions inherit from this.
    """
    pass


class StepExecutionError(PipelineExecutionError):
    """
    Raised when a pipeline step fails.

    Attributes:
        step_name: Type tag of the failed step (e.g. "summarize")
        original_error: The underlying exception (may be None after deserialization)

    Note: step_name is embedded in the message so it survives Celery's
    JSON serialization.
    """

    def __init__(self, step_name: str, original_error: Exception):
        self.step_name = step_name
        self.original_error = original_error
        error_message = f"Step '{step_name}' failed: {str(original_error)}"
        super().__init__(error_message)


class ValidationError(PipelineExecutionError):
    """
    Raised when a required field is missing or empty.

    Example: running a pipeline with blank input text
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class NotFoundError(PipelineExecutionError):
    """Raised when an id is absent or not owned by the caller."""
    pass


class ExternalAPIError(PipelineExecutionError):
    """
    Raised when the text-generation backend call fails or returns nothing.

    Always wrapped in StepExecutionError at the step boundary.
    """
    pass


class PersistenceError(PipelineExecutionError):
    """
    Raised when a create/update/delete fails in the storage layer.

    Attributes:
        detail: Raw database error message
    """

    def __init__(self, message: str, detail: Optional[str] = None):
        self.detail = detail or message
        super().__init__(message)


def classify_persistence_error(error: Exception, default: str = "Database operation failed") -> str:
    """
    Turn a raw database error into a user-facing message.

    Known constraint violations get a friendly message; anything else
    returns the raw message.

    Example:
        >>> classify_persistence_error(Exception("FOREIGN KEY constraint failed"))
        'User not found. Please sign in again.'
    """
    message = str(getattr(error, "orig", None) or error)
    lowered = message.lower()

    if "foreign key" in lowered:
        return "User not found. Please sign in again."
    if "duplicate key" in lowered or "unique constraint" in lowered:
        return "Pipeline with this name already exists."
    return message or default
