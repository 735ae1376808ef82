"""
Pipeline API endpoints.

Pipeline definitions (CRUD, search, stats), synchronous and Celery-backed
execution, execution history and step generation.

Callers identify themselves with a userId; authentication happens upstream.
Domain exceptions raised here are mapped to HTTP responses by
api.exception_handlers.
"""

from typing import List, Optional

import logfire
from celery.result import AsyncResult
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from api.dependencies import PaginationParams, RunnerDep, get_step_generator_model
from database import get_db
from pipeline.core.exceptions import ValidationError
from schemas.pipeline import (
    AsyncExecuteResponse,
    ExecuteRequest,
    ExecutionResponse,
    GenerateStepsRequest,
    GenerateStepsResponse,
    PipelineCreate,
    PipelineResponse,
    PipelineUpdate,
    TaskStatusResponse,
    UserStatsResponse,
)
from services import execution_store, pipeline_store
from services.pipeline_executor import execute_pipeline
from services.step_generator import generate_pipeline_steps
from utils.celery_helpers import build_task_status
from utils.uuid_helpers import parse_uuid_param


router = APIRouter(prefix="/api/pipelines", tags=["Pipelines"])


@router.post("", response_model=PipelineResponse, status_code=status.HTTP_201_CREATED)
async def create_pipeline(
    request: PipelineCreate,
    db: Session = Depends(get_db),
):
    """
    Create a pipeline with its ordered steps.

    Steps without an explicit order take their 1-based position in the list.

    Raises:
        400: Missing name, userId or steps
        422: Unknown step type or invalid step config
        500: Unknown user (classified database error)
    """
    with logfire.span("api.create_pipeline", user_id=str(request.user_id), step_count=len(request.steps)):
        if request.user_id is None:
            raise ValidationError("userId is required", field="userId")

        pipeline = pipeline_store.create_pipeline(
            db,
            user_id=request.user_id,
            name=request.name,
            description=request.description,
            steps=[step.to_record() for step in request.steps],
        )
        return PipelineResponse.model_validate(pipeline)


@router.get("", response_model=List[PipelineResponse])
async def list_pipelines(
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    """List a user's pipelines, oldest first, with steps in execution order."""
    owner_id = parse_uuid_param(user_id, "userId")

    with logfire.span("api.list_pipelines", user_id=str(owner_id)):
        pipelines = pipeline_store.list_pipelines(db, owner_id)
        return [PipelineResponse.model_validate(p) for p in pipelines]


@router.get("/search", response_model=List[PipelineResponse])
async def search_pipelines(
    user_id: Optional[str] = Query(None, alias="userId"),
    q: str = Query("", max_length=255),
    db: Session = Depends(get_db),
):
    """Case-insensitive name search over a user's pipelines."""
    owner_id = parse_uuid_param(user_id, "userId")

    with logfire.span("api.search_pipelines", user_id=str(owner_id), term=q):
        pipelines = pipeline_store.search_pipelines(db, owner_id, q)
        return [PipelineResponse.model_validate(p) for p in pipelines]


@router.get("/stats", response_model=UserStatsResponse)
async def get_user_stats(
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    """Pipeline and execution counts for a user."""
    owner_id = parse_uuid_param(user_id, "userId")

    with logfire.span("api.user_stats", user_id=str(owner_id)):
        return UserStatsResponse(**execution_store.get_user_stats(db, owner_id))


@router.post("/execute", response_model=ExecutionResponse)
async def execute(
    request: ExecuteRequest,
    runner: RunnerDep,
    db: Session = Depends(get_db),
):
    """
    Run a stored pipeline synchronously.

    A failing step does not produce an error response: the execution comes
    back with status `failed`, the outputs of the steps that completed, the
    error message and the failing step id.

    Raises:
        400: Blank input or missing userId (no execution is recorded)
        404: Pipeline absent or not owned by userId
    """
    with logfire.span(
        "api.execute_pipeline",
        pipeline_id=str(request.pipeline_id),
        user_id=str(request.user_id),
    ):
        execution = await execute_pipeline(
            db,
            pipeline_id=request.pipeline_id,
            user_id=request.user_id,
            input_text=request.input,
            runner=runner,
        )
        return ExecutionResponse.model_validate(execution)


@router.post("/execute/async", response_model=AsyncExecuteResponse, status_code=status.HTTP_202_ACCEPTED)
async def execute_async(
    request: ExecuteRequest,
    db: Session = Depends(get_db),
):
    """
    Enqueue a pipeline execution on a Celery worker.

    The request is validated and the pipeline looked up before dispatch, so
    a bad request never reaches the queue. Poll GET /tasks/{taskId}.
    """
    # Imported here so the API process only needs Redis when this route is used
    from tasks.execution_tasks import execute_pipeline_task

    with logfire.span("api.execute_pipeline_async", pipeline_id=str(request.pipeline_id)):
        if request.user_id is None:
            raise ValidationError("userId is required", field="userId")
        if not (request.input or "").strip():
            raise ValidationError("Input text is required", field="input")
        pipeline_store.get_pipeline(db, request.pipeline_id, request.user_id)

        task = execute_pipeline_task.apply_async(
            kwargs={
                "pipeline_id": str(request.pipeline_id),
                "user_id": str(request.user_id),
                "input_text": request.input,
            },
            queue="pipelines_default",
        )

        return AsyncExecuteResponse(task_id=task.id)


@router.get("/tasks/{task_id}", response_model=TaskStatusResponse)
async def get_task_status(task_id: str):
    """
    Check the status of a queued execution.

    **Note**: Task results expire after 1 hour (configurable in celery_config.py).
    After expiration, status will return PENDING even if the task completed.
    """
    from celery_config import celery_app

    with logfire.span("api.task_status", task_id=task_id):
        result = AsyncResult(task_id, app=celery_app)
        return TaskStatusResponse(**build_task_status(task_id, result))


@router.get("/executions", response_model=List[ExecutionResponse])
async def list_executions(
    pagination: PaginationParams,
    user_id: Optional[str] = Query(None, alias="userId"),
    pipeline_id: Optional[str] = Query(None, alias="pipelineId"),
    db: Session = Depends(get_db),
):
    """A user's execution history, newest first."""
    owner_id = parse_uuid_param(user_id, "userId")
    pipeline_uuid = parse_uuid_param(pipeline_id, "pipelineId") if pipeline_id else None

    with logfire.span("api.list_executions", user_id=str(owner_id)):
        executions = execution_store.list_executions(
            db,
            owner_id,
            pipeline_id=pipeline_uuid,
            limit=pagination["limit"],
            offset=pagination["offset"],
        )
        return [ExecutionResponse.model_validate(e) for e in executions]


@router.get("/executions/{execution_id}", response_model=ExecutionResponse)
async def get_execution(
    execution_id: str,
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    """Fetch one execution with its outputs. 404 if absent or not owned."""
    execution_uuid = parse_uuid_param(execution_id, "executionId")
    owner_id = parse_uuid_param(user_id, "userId") if user_id else None

    execution = execution_store.get_execution(db, execution_uuid, owner_id)
    return ExecutionResponse.model_validate(execution)


@router.post("/generate-steps", response_model=GenerateStepsResponse)
async def generate_steps(
    request: GenerateStepsRequest,
    model=Depends(get_step_generator_model),
):
    """Propose 1-10 steps for a natural-language instruction."""
    with logfire.span("api.generate_steps"):
        steps = await generate_pipeline_steps(request.instruction, model=model)
        return GenerateStepsResponse(steps=steps)


@router.get("/{pipeline_id}", response_model=PipelineResponse)
async def get_pipeline(
    pipeline_id: str,
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    """Fetch one pipeline. 404 if absent or not owned by userId."""
    pipeline_uuid = parse_uuid_param(pipeline_id, "pipelineId")
    owner_id = parse_uuid_param(user_id, "userId") if user_id else None

    pipeline = pipeline_store.get_pipeline(db, pipeline_uuid, owner_id)
    return PipelineResponse.model_validate(pipeline)


@router.put("/{pipeline_id}", response_model=PipelineResponse)
async def update_pipeline(
    pipeline_id: str,
    request: PipelineUpdate,
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    """Replace name and description, and the whole step set when steps are given."""
    pipeline_uuid = parse_uuid_param(pipeline_id, "pipelineId")
    owner_id = parse_uuid_param(user_id, "userId")

    with logfire.span("api.update_pipeline", pipeline_id=str(pipeline_uuid)):
        pipeline = pipeline_store.update_pipeline(
            db,
            pipeline_uuid,
            owner_id,
            name=request.name,
            description=request.description,
            steps=[step.to_record() for step in request.steps] if request.steps is not None else None,
        )
        return PipelineResponse.model_validate(pipeline)


@router.delete("/{pipeline_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pipeline(
    pipeline_id: str,
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    """Delete a pipeline with its steps, executions and outputs."""
    pipeline_uuid = parse_uuid_param(pipeline_id, "pipelineId")
    owner_id = parse_uuid_param(user_id, "userId")

    with logfire.span("api.delete_pipeline", pipeline_id=str(pipeline_uuid)):
        pipeline_store.delete_pipeline(db, pipeline_uuid, owner_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
