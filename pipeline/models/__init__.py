"""
Models package for Pipeline models

NOTE: not database models
"""

from .core import (
    # Enums
    ExecutionStatus,
    StepType,

    # Core data models
    StepDefinition,
    StepOutput,
    PipelineRunResult,

    # Helpers
    can_transition,
)

__all__ = [
    # Enums
    "ExecutionStatus",
    "StepType",

    # Core data models
    "StepDefinition",
    "StepOutput",
    "PipelineRunResult",

    # Helpers
    "can_transition",
]
