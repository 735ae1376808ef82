"""
Celery tasks that run stored pipelines on a worker.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Optional

import logfire
from celery.exceptions import Ignore
from sqlalchemy.orm import Session

from celery_config import celery_app
from database.base import SessionLocal
from pipeline import create_pipeline_runner
from pipeline.core.exceptions import PipelineExecutionError
from pipeline.core.runner import PipelineRunner, ProgressCallback
from pipeline.models.core import ExecutionStatus
from services.pipeline_executor import execute_pipeline
from utils.uuid_helpers import ensure_uuid

# Mapping between execution statuses and Celery task states.
EXECUTION_STATUS_TO_CELERY_STATE = {
    ExecutionStatus.PENDING: "PENDING",
    ExecutionStatus.RUNNING: "STARTED",
    ExecutionStatus.COMPLETED: "SUCCESS",
    ExecutionStatus.FAILED: "FAILURE",
}


async def run_execution_job(
    pipeline_id: str,
    user_id: str,
    input_text: str,
    runner: Optional[PipelineRunner] = None,
    session_factory: Callable[[], Session] = SessionLocal,
    progress_callback: Optional[ProgressCallback] = None,
) -> Dict[str, Any]:
    """
    Execute a stored pipeline in its own session and summarize the outcome.

    Returns:
        {execution_id, status, total_processing_time, error, failed_step_id}

    Raises:
        ValidationError / NotFoundError / PersistenceError: As execute_pipeline
    """
    runner = runner or create_pipeline_runner()
    db = session_factory()
    try:
        execution = await execute_pipeline(
            db,
            pipeline_id=ensure_uuid(pipeline_id),
            user_id=ensure_uuid(user_id),
            input_text=input_text,
            runner=runner,
            progress_callback=progress_callback,
        )
        return {
            "execution_id": str(execution.id),
            "status": execution.status,
            "total_processing_time": execution.total_processing_time,
            "error": execution.error,
            "failed_step_id": execution.failed_step_id,
        }
    finally:
        db.close()


@celery_app.task(bind=True)
def execute_pipeline_task(
    self,
    *,
    pipeline_id: Optional[str] = None,
    user_id: Optional[str] = None,
    input_text: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Celery entrypoint for running a stored pipeline.

    A step failure is recorded on the execution row and reported as a
    FAILURE state carrying the execution id and the failed step.
    """

    celery_request_id = getattr(self.request, "id", None)

    required_fields = {
        "pipeline_id": pipeline_id,
        "user_id": user_id,
        "input_text": input_text,
    }
    missing = [field for field, value in required_fields.items() if not value]
    if missing:
        raise ValueError(f"Missing required parameters: {', '.join(missing)}")

    def _update_status(status: ExecutionStatus, extra_meta: Optional[Dict[str, Any]] = None) -> None:
        """
        Persist task status/progress in Redis via Celery's backend.
        """
        meta: Dict[str, Any] = {
            "status": status.value,
            "task_id": celery_request_id,
            "pipeline_id": pipeline_id,
        }
        if extra_meta:
            meta.update(extra_meta)

        celery_state = EXECUTION_STATUS_TO_CELERY_STATE[status]

        # FAILURE metadata must follow Celery's exception format
        if celery_state == "FAILURE" and extra_meta:
            meta = {
                "exc_type": extra_meta.get("error_type", "UnknownError"),
                "exc_message": extra_meta.get("error", "Unknown error occurred"),
                # Preserve custom fields for API status endpoint
                "status": status.value,
                "task_id": celery_request_id,
                "execution_id": extra_meta.get("execution_id"),
                "failed_step": extra_meta.get("failed_step"),
            }

        self.update_state(state=celery_state, meta=meta)

    async def progress_callback(step_id: str, step_status: str) -> None:
        _update_status(
            ExecutionStatus.RUNNING,
            {"current_step": step_id, "step_status": step_status},
        )

    with logfire.span(
        "tasks.execute_pipeline",
        celery_id=celery_request_id,
        pipeline_id=pipeline_id,
        user_id=user_id,
    ):
        logfire.info(
            "Pipeline execution task started",
            celery_id=celery_request_id,
            pipeline_id=pipeline_id,
        )
        _update_status(ExecutionStatus.RUNNING, {"current_step": None, "step_status": "accepted"})

        try:
            outcome = asyncio.run(
                run_execution_job(
                    pipeline_id,
                    user_id,
                    input_text,
                    progress_callback=progress_callback,
                )
            )
        except PipelineExecutionError as exc:
            logfire.error(
                "Pipeline execution task rejected",
                celery_id=celery_request_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            _update_status(
                ExecutionStatus.FAILED,
                {"error": str(exc), "error_type": type(exc).__name__},
            )
            # Raise Ignore to prevent Celery from overwriting FAILURE state with SUCCESS
            raise Ignore()

        except Exception as exc:
            logfire.error(
                "Unhandled exception during pipeline execution",
                celery_id=celery_request_id,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )
            _update_status(
                ExecutionStatus.FAILED,
                {"error": str(exc), "error_type": type(exc).__name__},
            )
            raise Ignore()

        if outcome["status"] == ExecutionStatus.FAILED.value:
            _update_status(
                ExecutionStatus.FAILED,
                {
                    "error": outcome["error"],
                    "error_type": "StepExecutionError",
                    "execution_id": outcome["execution_id"],
                    "failed_step": outcome["failed_step_id"],
                },
            )
            raise Ignore()

        logfire.info(
            "Pipeline execution task completed",
            celery_id=celery_request_id,
            execution_id=outcome["execution_id"],
            total_processing_time=outcome["total_processing_time"],
        )

        return outcome
