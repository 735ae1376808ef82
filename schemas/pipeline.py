"""
Pydantic schemas for pipeline API endpoints.

These models validate API requests and responses for pipeline definition,
execution and step generation. All fields are exposed in camelCase.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from pipeline.models.core import PipelineRunResult, StepType
from pipeline.steps.processor import validate_step_config


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python, ORM-readable."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ===================================================================
# REQUEST SCHEMAS
# ===================================================================

class StepCreate(CamelModel):
    """
    One step in a pipeline create/update body.

    The config is checked against the step type's config model; the record
    is stored as supplied.
    """

    type: StepType = Field(..., description="Step type")
    config: Dict[str, Any] = Field(default_factory=dict, description="Step configuration")
    order: Optional[int] = Field(
        None,
        ge=0,
        description="Execution position; defaults to the step's 1-based index"
    )

    @model_validator(mode="after")
    def check_config(self) -> "StepCreate":
        try:
            validate_step_config(self.type, self.config)
        except PydanticValidationError as e:
            error = e.errors()[0]
            location = ".".join(str(part) for part in error["loc"])
            raise ValueError(f"Invalid {self.type.value} config ({location}): {error['msg']}") from e
        return self

    def to_record(self) -> Dict[str, Any]:
        return {"type": self.type.value, "config": self.config, "order": self.order}


class PipelineCreate(CamelModel):
    """
    Request body for POST /api/pipelines

    Missing name, userId or steps are reported as 400 by the store.
    """

    name: Optional[str] = Field(None, max_length=255, description="Pipeline name")
    description: Optional[str] = Field(None, description="Optional description")
    user_id: Optional[uuid.UUID] = Field(None, description="Owner id")
    steps: List[StepCreate] = Field(default_factory=list, description="Ordered steps")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Summarize and translate",
                "description": "Short Spanish summary",
                "userId": "550e8400-e29b-41d4-a716-446655440000",
                "steps": [
                    {"type": "summarize", "config": {"length": "short"}, "order": 1},
                    {"type": "translate", "config": {"targetLanguage": "Spanish"}, "order": 2},
                ],
            }
        }
    )


class PipelineUpdate(CamelModel):
    """Request body for PUT /api/pipelines/{id}. Omit steps to keep the current set."""

    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    steps: Optional[List[StepCreate]] = None


class ExecuteRequest(CamelModel):
    """Request body for POST /api/pipelines/execute and /execute/async"""

    pipeline_id: uuid.UUID = Field(..., description="Pipeline to run")
    user_id: Optional[uuid.UUID] = Field(None, description="Executing user")
    input: Optional[str] = Field(None, description="Text fed to the first step")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "pipelineId": "770e8400-e29b-41d4-a716-446655440002",
                "userId": "550e8400-e29b-41d4-a716-446655440000",
                "input": "Artificial intelligence is changing how software is built...",
            }
        }
    )


class AdHocStep(CamelModel):
    """A step supplied inline. Unknown types pass their input through."""

    id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    config: Dict[str, Any] = Field(default_factory=dict)
    order: int = 0


class AdHocExecuteRequest(CamelModel):
    """Request body for POST /api/ai/execute"""

    steps: List[AdHocStep] = Field(default_factory=list)
    input: Optional[str] = None


class GenerateStepsRequest(CamelModel):
    """Request body for POST /api/pipelines/generate-steps"""

    instruction: Optional[str] = Field(None, max_length=2000)


# ===================================================================
# RESPONSE SCHEMAS
# ===================================================================

class StepResponse(CamelModel):
    id: uuid.UUID
    type: str
    config: Dict[str, Any]
    order: int
    created_at: Optional[datetime] = None


class PipelineResponse(CamelModel):
    """Pipeline with its steps in execution order."""

    id: uuid.UUID
    name: str
    description: Optional[str] = None
    user_id: uuid.UUID
    steps: List[StepResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ExecutionOutputResponse(CamelModel):
    step_id: str
    output: str
    processing_time: int


class ExecutionResponse(CamelModel):
    """
    Response from POST /api/pipelines/execute and GET /api/pipelines/executions/{id}

    outputs holds only completed steps, in production order.
    """

    id: uuid.UUID
    pipeline_id: uuid.UUID
    user_id: uuid.UUID
    input: str
    status: str
    total_processing_time: Optional[int] = None
    error: Optional[str] = None
    failed_step_id: Optional[str] = None
    outputs: List[ExecutionOutputResponse] = Field(default_factory=list)
    created_at: datetime


class RunResultResponse(CamelModel):
    """Response from POST /api/ai/execute (nothing persisted)."""

    status: str
    total_processing_time: int
    outputs: List[ExecutionOutputResponse] = Field(default_factory=list)
    error: Optional[str] = None
    failed_step_id: Optional[str] = None
    final_output: Optional[str] = None

    @classmethod
    def from_result(cls, result: PipelineRunResult) -> "RunResultResponse":
        return cls(
            status=result.status.value,
            total_processing_time=result.total_processing_time_ms,
            outputs=[
                ExecutionOutputResponse(
                    step_id=output.step_id,
                    output=output.output,
                    processing_time=output.processing_time_ms,
                )
                for output in result.outputs
            ],
            error=result.error,
            failed_step_id=result.failed_step_id,
            final_output=result.final_output,
        )


class UserStatsResponse(CamelModel):
    total_pipelines: int
    total_executions: int
    completed_executions: int
    failed_executions: int
    average_processing_time: int


class GeneratedStepResponse(CamelModel):
    type: str
    config: Dict[str, Any]
    order: int


class GenerateStepsResponse(CamelModel):
    steps: List[GeneratedStepResponse]


class AsyncExecuteResponse(CamelModel):
    """
    Response from POST /api/pipelines/execute/async

    Returns Celery task_id for status polling.
    """

    task_id: str = Field(..., description="Celery task ID for polling status")


class TaskStatusResponse(CamelModel):
    """
    Response from GET /api/pipelines/tasks/{task_id}

    Returns current Celery task state and result if complete.
    """

    task_id: str = Field(..., description="Celery task ID")

    status: str = Field(
        ...,
        description="Task status: PENDING, STARTED, SUCCESS, FAILURE"
    )

    result: Optional[Dict[str, Any]] = Field(
        None,
        description="Result data when status=SUCCESS (contains execution_id), progress when STARTED"
    )

    error: Optional[Any] = Field(
        None,
        description="Error message or {message, type, failed_step} when status=FAILURE"
    )
