"""
Execution record store.

An execution row is inserted in `running` and committed before any step
runs, so in-flight work is visible. Finalization writes the terminal status,
the timing and every produced output in a single transaction.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

import logfire
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from models.execution import PipelineExecution, PipelineExecutionOutput
from models.pipeline import Pipeline
from pipeline.core.exceptions import NotFoundError, PersistenceError, classify_persistence_error
from pipeline.models.core import ExecutionStatus, PipelineRunResult


def create_execution(
    db: Session,
    pipeline_id: UUID,
    user_id: UUID,
    input_text: str,
) -> PipelineExecution:
    """
    Insert an execution in `running` state and commit.

    Raises:
        PersistenceError: If the insert fails (e.g. unknown user or pipeline)
    """
    execution = PipelineExecution(
        pipeline_id=pipeline_id,
        user_id=user_id,
        input=input_text,
        status=ExecutionStatus.PENDING.value,
    )
    execution.transition_to(ExecutionStatus.RUNNING)
    db.add(execution)

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logfire.error(
            "Failed to create execution",
            pipeline_id=str(pipeline_id),
            user_id=str(user_id),
            error=str(e),
        )
        raise PersistenceError(classify_persistence_error(e), detail=str(e)) from e

    logfire.info(
        "Execution created",
        execution_id=str(execution.id),
        pipeline_id=str(pipeline_id),
    )
    return execution


def finalize_execution(
    db: Session,
    execution: PipelineExecution,
    result: PipelineRunResult,
) -> PipelineExecution:
    """
    Record a run's terminal state.

    Sets status, total processing time, error and failed step, and inserts
    one output row per produced output in production order. Either all of
    this is committed or none of it.

    Raises:
        ValueError: If the execution is already terminal
        PersistenceError: If the commit fails
    """
    with logfire.span("execution_store.finalize", execution_id=str(execution.id)):
        execution.transition_to(result.status)
        execution.total_processing_time = result.total_processing_time_ms
        execution.error = result.error
        execution.failed_step_id = result.failed_step_id

        for position, step_output in enumerate(result.outputs):
            execution.outputs.append(
                PipelineExecutionOutput(
                    step_id=step_output.step_id,
                    output=step_output.output,
                    processing_time=step_output.processing_time_ms,
                    position=position,
                )
            )

        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logfire.error(
                "Failed to finalize execution",
                execution_id=str(execution.id),
                error=str(e),
            )
            raise PersistenceError(classify_persistence_error(e), detail=str(e)) from e

        logfire.info(
            "Execution finalized",
            execution_id=str(execution.id),
            status=execution.status,
            total_processing_time_ms=execution.total_processing_time,
            output_count=len(result.outputs),
        )
        return execution


def mark_execution_failed(
    db: Session,
    execution_id: UUID,
    error: str,
    total_processing_time_ms: Optional[int] = None,
) -> bool:
    """
    Move a still-running execution to `failed` in a fresh transaction.

    Used when finalization itself could not be committed. Outputs are not
    written. Returns True if a row was updated; a second failure is logged
    and reported as False.
    """
    db.rollback()
    try:
        updated = db.execute(
            update(PipelineExecution)
            .where(PipelineExecution.id == execution_id)
            .where(PipelineExecution.status == ExecutionStatus.RUNNING.value)
            .values(
                status=ExecutionStatus.FAILED.value,
                error=error,
                total_processing_time=total_processing_time_ms,
            )
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logfire.error(
            "Failed to mark execution as failed",
            execution_id=str(execution_id),
            error=str(e),
        )
        return False

    logfire.warning(
        "Execution marked failed after finalization error",
        execution_id=str(execution_id),
        error=error,
    )
    return updated.rowcount > 0


def get_execution(db: Session, execution_id: UUID, user_id: Optional[UUID] = None) -> PipelineExecution:
    """
    Load an execution with its outputs.

    Raises:
        NotFoundError: If absent or not owned by user_id
    """
    stmt = (
        select(PipelineExecution)
        .options(selectinload(PipelineExecution.outputs))
        .where(PipelineExecution.id == execution_id)
    )
    if user_id is not None:
        stmt = stmt.where(PipelineExecution.user_id == user_id)

    execution = db.execute(stmt).scalar_one_or_none()
    if execution is None:
        raise NotFoundError("Execution not found")
    return execution


def list_executions(
    db: Session,
    user_id: UUID,
    pipeline_id: Optional[UUID] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[PipelineExecution]:
    """A user's executions, newest first, optionally for one pipeline."""
    stmt = (
        select(PipelineExecution)
        .options(selectinload(PipelineExecution.outputs))
        .where(PipelineExecution.user_id == user_id)
    )
    if pipeline_id is not None:
        stmt = stmt.where(PipelineExecution.pipeline_id == pipeline_id)

    stmt = stmt.order_by(PipelineExecution.created_at.desc(), PipelineExecution.id).offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)

    return list(db.execute(stmt).scalars().all())


def get_user_stats(db: Session, user_id: UUID) -> Dict[str, Any]:
    """
    Pipeline and execution counts for a user.

    averageProcessingTime is the mean total time of finalized executions,
    rounded to whole milliseconds (0 when there are none).
    """
    total_pipelines = db.scalar(
        select(func.count()).select_from(Pipeline).where(Pipeline.user_id == user_id)
    ) or 0

    rows = db.execute(
        select(PipelineExecution.status, func.count())
        .where(PipelineExecution.user_id == user_id)
        .group_by(PipelineExecution.status)
    ).all()
    by_status = {status: count for status, count in rows}

    average = db.scalar(
        select(func.avg(PipelineExecution.total_processing_time))
        .where(PipelineExecution.user_id == user_id)
        .where(PipelineExecution.total_processing_time.is_not(None))
    )

    return {
        "total_pipelines": total_pipelines,
        "total_executions": sum(by_status.values()),
        "completed_executions": by_status.get(ExecutionStatus.COMPLETED.value, 0),
        "failed_executions": by_status.get(ExecutionStatus.FAILED.value, 0),
        "average_processing_time": int(round(average)) if average is not None else 0,
    }
