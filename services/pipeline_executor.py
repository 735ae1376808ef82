"""
Pipeline execution service.

Glue between the definition store, the runner and the execution store:
validate, load the definition, create the execution row, run, finalize.
"""

import time
from typing import List, Optional
from uuid import UUID

import logfire
from sqlalchemy.orm import Session

from models.execution import PipelineExecution
from pipeline.core.exceptions import PersistenceError, ValidationError
from pipeline.core.runner import PipelineRunner, ProgressCallback, elapsed_ms
from pipeline.models.core import ExecutionStatus, PipelineRunResult, StepDefinition
from services import execution_store, pipeline_store


async def execute_pipeline(
    db: Session,
    pipeline_id: UUID,
    user_id: UUID,
    input_text: str,
    runner: PipelineRunner,
    progress_callback: Optional[ProgressCallback] = None,
) -> PipelineExecution:
    """
    Run a stored pipeline against input_text and persist the result.

    Validation happens before anything is written: a blank input or a
    pipeline without steps never produces an execution row.

    Args:
        db: Database session
        pipeline_id: Pipeline to run
        user_id: Executing user (must own the pipeline)
        input_text: Text fed to the first step
        runner: Configured PipelineRunner
        progress_callback: Optional async callback(step_id, status)

    Returns:
        The finalized PipelineExecution with outputs loaded. A failed step
        yields status `failed`, not an exception.

    Raises:
        ValidationError: If input_text is blank or user_id is missing
        NotFoundError: If the pipeline is absent or not owned by user_id
        PersistenceError: If the execution row cannot be written
    """
    if user_id is None:
        raise ValidationError("User ID is required", field="userId")
    if not (input_text or "").strip():
        raise ValidationError("Input text is required", field="input")

    with logfire.span(
        "pipeline_executor.execute",
        pipeline_id=str(pipeline_id),
        user_id=str(user_id),
    ):
        pipeline = pipeline_store.get_pipeline(db, pipeline_id, user_id)
        steps = pipeline_store.to_step_definitions(pipeline)
        runner.validate_run(steps, input_text)

        execution = execution_store.create_execution(db, pipeline.id, user_id, input_text)
        execution_id = execution.id

        run_start = time.perf_counter()
        try:
            result = await runner.run(steps, input_text, progress_callback=progress_callback)
        except Exception as e:
            # Never leave the row in `running`
            _finalize(
                db,
                execution,
                execution_id,
                PipelineRunResult(
                    status=ExecutionStatus.FAILED,
                    total_processing_time_ms=elapsed_ms(run_start),
                    error=str(e) or type(e).__name__,
                ),
            )
            raise

        return _finalize(db, execution, execution_id, result)


def _finalize(
    db: Session,
    execution: PipelineExecution,
    execution_id: UUID,
    result: PipelineRunResult,
) -> PipelineExecution:
    try:
        return execution_store.finalize_execution(db, execution, result)
    except PersistenceError as e:
        execution_store.mark_execution_failed(
            db,
            execution_id,
            error=f"Execution result could not be saved: {e}",
            total_processing_time_ms=result.total_processing_time_ms,
        )
        raise


async def execute_steps(
    steps: List[StepDefinition],
    input_text: str,
    runner: PipelineRunner,
) -> PipelineRunResult:
    """
    Run an ad-hoc step list. Nothing is persisted.

    Raises:
        ValidationError: If steps is empty or input_text is blank
    """
    with logfire.span("pipeline_executor.execute_steps", step_count=len(steps or [])):
        return await runner.run(steps, input_text)
