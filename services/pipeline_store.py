"""
Pipeline definition store.

Persists named pipelines and their ordered step definitions. Every write
commits or rolls back as a unit; database failures surface as
PersistenceError carrying a user-facing message.
"""

from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

import logfire
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from models.pipeline import Pipeline, PipelineStep
from pipeline.core.exceptions import (
    NotFoundError,
    PersistenceError,
    ValidationError,
    classify_persistence_error,
)
from pipeline.models.core import StepDefinition


def _require_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Pipeline name is required", field="name")
    return cleaned


def _build_steps(steps: Sequence[Dict[str, Any]]) -> List[PipelineStep]:
    """
    Turn raw step records into PipelineStep rows.

    A missing `order` defaults to the step's 1-based position in the list.
    """
    if not steps:
        raise ValidationError("At least one step is required", field="steps")

    rows = []
    for index, step in enumerate(steps):
        order = step.get("order")
        rows.append(
            PipelineStep(
                type=step["type"],
                config=dict(step.get("config") or {}),
                order=index + 1 if order is None else order,
                position=index,
            )
        )
    return rows


def _commit(db: Session, action: str, **log_fields) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        message = classify_persistence_error(e)
        logfire.error(
            f"Failed to {action}",
            error=str(e),
            error_type=type(e).__name__,
            **log_fields,
        )
        raise PersistenceError(message, detail=str(e)) from e


def create_pipeline(
    db: Session,
    user_id: UUID,
    name: str,
    steps: Sequence[Dict[str, Any]],
    description: Optional[str] = None,
) -> Pipeline:
    """
    Create a pipeline with its steps in one transaction.

    Args:
        db: Database session
        user_id: Owner id (must reference an existing user)
        name: Pipeline name, trimmed
        steps: Step records with `type`, `config` and optional `order`
        description: Optional description

    Returns:
        The persisted Pipeline with steps loaded

    Raises:
        ValidationError: If name is blank, user_id is missing, or steps is empty
        PersistenceError: If the insert fails (e.g. unknown user)
    """
    if user_id is None:
        raise ValidationError("User ID is required", field="userId")
    cleaned_name = _require_name(name)
    rows = _build_steps(steps)

    with logfire.span("pipeline_store.create", user_id=str(user_id), step_count=len(rows)):
        pipeline = Pipeline(
            user_id=user_id,
            name=cleaned_name,
            description=description,
            steps=rows,
        )
        db.add(pipeline)
        _commit(db, "create pipeline", user_id=str(user_id))

        logfire.info(
            "Pipeline created",
            pipeline_id=str(pipeline.id),
            user_id=str(user_id),
            step_count=len(rows),
        )
        return pipeline


def get_pipeline(db: Session, pipeline_id: UUID, user_id: Optional[UUID] = None) -> Pipeline:
    """
    Load a pipeline with its ordered steps.

    When user_id is given, a pipeline owned by someone else is reported as
    not found.

    Raises:
        NotFoundError: If absent or not owned by user_id
    """
    stmt = (
        select(Pipeline)
        .options(selectinload(Pipeline.steps))
        .where(Pipeline.id == pipeline_id)
    )
    if user_id is not None:
        stmt = stmt.where(Pipeline.user_id == user_id)

    pipeline = db.execute(stmt).scalar_one_or_none()
    if pipeline is None:
        raise NotFoundError("Pipeline not found")
    return pipeline


def list_pipelines(db: Session, user_id: UUID) -> List[Pipeline]:
    """All of a user's pipelines, oldest first, steps in execution order."""
    stmt = (
        select(Pipeline)
        .options(selectinload(Pipeline.steps))
        .where(Pipeline.user_id == user_id)
        .order_by(Pipeline.created_at.asc(), Pipeline.id)
    )
    return list(db.execute(stmt).scalars().all())


def search_pipelines(db: Session, user_id: UUID, term: str) -> List[Pipeline]:
    """A user's pipelines whose name contains term (case-insensitive)."""
    term = (term or "").strip()
    if not term:
        return list_pipelines(db, user_id)

    stmt = (
        select(Pipeline)
        .options(selectinload(Pipeline.steps))
        .where(Pipeline.user_id == user_id)
        .where(Pipeline.name.icontains(term, autoescape=True))
        .order_by(Pipeline.created_at.asc(), Pipeline.id)
    )
    return list(db.execute(stmt).scalars().all())


def update_pipeline(
    db: Session,
    pipeline_id: UUID,
    user_id: UUID,
    name: str,
    description: Optional[str] = None,
    steps: Optional[Sequence[Dict[str, Any]]] = None,
) -> Pipeline:
    """
    Replace a pipeline's name and description, and optionally its whole step set.

    The old steps are deleted and the new ones inserted in the same
    transaction; on failure the previous step set is untouched.

    Raises:
        ValidationError: If name is blank or steps is an empty list
        NotFoundError: If absent or not owned by user_id
        PersistenceError: If the update fails
    """
    cleaned_name = _require_name(name)
    rows = _build_steps(steps) if steps is not None else None

    pipeline = get_pipeline(db, pipeline_id, user_id)

    with logfire.span("pipeline_store.update", pipeline_id=str(pipeline_id)):
        pipeline.name = cleaned_name
        pipeline.description = description
        if rows is not None:
            pipeline.steps = rows

        _commit(db, "update pipeline", pipeline_id=str(pipeline_id))

        logfire.info(
            "Pipeline updated",
            pipeline_id=str(pipeline_id),
            steps_replaced=rows is not None,
        )
        return pipeline


def delete_pipeline(db: Session, pipeline_id: UUID, user_id: UUID) -> None:
    """
    Delete a pipeline along with its steps, executions and outputs.

    Raises:
        NotFoundError: If absent or not owned by user_id
        PersistenceError: If the delete fails
    """
    pipeline = get_pipeline(db, pipeline_id, user_id)

    db.delete(pipeline)
    _commit(db, "delete pipeline", pipeline_id=str(pipeline_id))

    logfire.info("Pipeline deleted", pipeline_id=str(pipeline_id), user_id=str(user_id))


def to_step_definitions(pipeline: Pipeline) -> List[StepDefinition]:
    """Runner view of a pipeline's stored steps, in stored order."""
    return [
        StepDefinition(
            id=str(step.id),
            type=step.type,
            config=dict(step.config or {}),
            order=step.order,
        )
        for step in pipeline.steps
    ]
