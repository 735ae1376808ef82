"""
Pydantic schemas for request/response validation.
"""

from schemas.pipeline import (
    AdHocExecuteRequest,
    AdHocStep,
    AsyncExecuteResponse,
    ExecuteRequest,
    ExecutionOutputResponse,
    ExecutionResponse,
    GenerateStepsRequest,
    GenerateStepsResponse,
    PipelineCreate,
    PipelineResponse,
    PipelineUpdate,
    RunResultResponse,
    StepCreate,
    StepResponse,
    TaskStatusResponse,
    UserStatsResponse,
)
from schemas.user import UserCreate, UserResponse

__all__ = [
    # Pipeline schemas
    "PipelineCreate",
    "PipelineUpdate",
    "PipelineResponse",
    "StepCreate",
    "StepResponse",
    "UserStatsResponse",

    # Execution schemas
    "ExecuteRequest",
    "ExecutionResponse",
    "ExecutionOutputResponse",
    "AdHocStep",
    "AdHocExecuteRequest",
    "RunResultResponse",
    "AsyncExecuteResponse",
    "TaskStatusResponse",
    "GenerateStepsRequest",
    "GenerateStepsResponse",

    # User schemas
    "UserCreate",
    "UserResponse",
]
