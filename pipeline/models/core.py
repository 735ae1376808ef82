"""Core data models for the text pipeline engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, List


class ExecutionStatus(str, Enum):
    """Execution lifecycle status. Inherits from str for JSON serialization."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ExecutionStatus.COMPLETED, ExecutionStatus.FAILED)


# Monotonic lifecycle: pending -> running -> completed | failed
ALLOWED_TRANSITIONS: Dict[ExecutionStatus, frozenset] = {
    ExecutionStatus.PENDING: frozenset({ExecutionStatus.RUNNING, ExecutionStatus.FAILED}),
    ExecutionStatus.RUNNING: frozenset({ExecutionStatus.COMPLETED, ExecutionStatus.FAILED}),
    ExecutionStatus.COMPLETED: frozenset(),
    ExecutionStatus.FAILED: frozenset(),
}


def can_transition(current: ExecutionStatus, target: ExecutionStatus) -> bool:
    """Return True if an execution may move from current to target status."""
    return target in ALLOWED_TRANSITIONS[ExecutionStatus(current)]


class StepType(str, Enum):
    """Closed set of text transformations a step can perform."""
    SUMMARIZE = "summarize"
    TRANSLATE = "translate"
    REWRITE = "rewrite"
    EXTRACT = "extract"


@dataclass
class StepDefinition:
    """
    One step as the runner sees it. Not persisted directly.

    Built from a stored PipelineStep row or from an ad-hoc request body.
    `type` stays a plain string so unknown types can reach the processor,
    which passes their input through unchanged.
    """

    id: str
    """Step identifier, echoed back on each output"""

    type: str
    """Step type tag (normally one of StepType)"""

    config: Dict[str, Any] = field(default_factory=dict)
    """Type-specific configuration as stored (camelCase keys)"""

    order: int = 0
    """Execution position; ties keep ingestion order"""


@dataclass
class StepOutput:
    """Output of one completed step."""

    step_id: str
    output: str
    processing_time_ms: int


@dataclass
class PipelineRunResult:
    """
    Terminal result of PipelineRunner.run().

    `outputs` holds only steps that completed. When status is FAILED,
    `error` and `failed_step_id` identify the step that stopped the chain.
    """

    status: ExecutionStatus
    total_processing_time_ms: int
    outputs: List[StepOutput] = field(default_factory=list)
    error: Optional[str] = None
    failed_step_id: Optional[str] = None

    @property
    def final_output(self) -> Optional[str]:
        """Text produced by the last completed step, if any."""
        return self.outputs[-1].output if self.outputs else None

    def __post_init__(self):
        """Validation: a failed result must explain itself"""
        if self.status == ExecutionStatus.FAILED and not self.error:
            raise ValueError("PipelineRunResult with status=failed must have error message")
