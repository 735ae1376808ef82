"""
Integration tests for the pipeline definition store.

Runs against an in-memory SQLite database with foreign keys enforced.

Usage:
    pytest tests/integration/test_pipeline_store.py -v
"""

from uuid import uuid4

import pytest
from sqlalchemy import delete, func, select

from models.execution import PipelineExecution, PipelineExecutionOutput
from models.pipeline import Pipeline, PipelineStep
from models.user import User
from pipeline.core.exceptions import NotFoundError, PersistenceError, ValidationError
from pipeline.models.core import ExecutionStatus, PipelineRunResult, StepOutput
from services import execution_store, pipeline_store


STEPS = [
    {"type": "summarize", "config": {"length": "short", "format": "bullets"}, "order": 1},
    {"type": "translate", "config": {"targetLanguage": "Spanish"}, "order": 2},
]


def _count(db, model):
    return db.scalar(select(func.count()).select_from(model))


# ===================================================================
# CREATE / READ
# ===================================================================

@pytest.mark.integration
def test_create_then_read_round_trips(db_session, test_user):
    created = pipeline_store.create_pipeline(
        db_session,
        user_id=test_user.id,
        name="  Summarize and translate  ",
        description="Short Spanish summary",
        steps=STEPS,
    )

    loaded = pipeline_store.get_pipeline(db_session, created.id, test_user.id)

    assert loaded.name == "Summarize and translate"
    assert loaded.description == "Short Spanish summary"
    assert [(s.type, s.config, s.order) for s in loaded.steps] == [
        ("summarize", {"length": "short", "format": "bullets"}, 1),
        ("translate", {"targetLanguage": "Spanish"}, 2),
    ]


@pytest.mark.integration
def test_reads_are_idempotent(db_session, test_user):
    created = pipeline_store.create_pipeline(db_session, test_user.id, "Twice", STEPS)

    first = pipeline_store.to_step_definitions(pipeline_store.get_pipeline(db_session, created.id))
    db_session.expire_all()
    second = pipeline_store.to_step_definitions(pipeline_store.get_pipeline(db_session, created.id))

    assert first == second


@pytest.mark.integration
def test_missing_order_defaults_to_position(db_session, test_user):
    created = pipeline_store.create_pipeline(
        db_session,
        test_user.id,
        "Implicit order",
        [{"type": "rewrite", "config": {}}, {"type": "extract", "config": {}}],
    )

    assert [s.order for s in created.steps] == [1, 2]


@pytest.mark.integration
def test_steps_load_in_execution_order_with_ties_by_ingestion(db_session, test_user):
    created = pipeline_store.create_pipeline(
        db_session,
        test_user.id,
        "Shuffled",
        [
            {"type": "extract", "config": {}, "order": 5},
            {"type": "rewrite", "config": {}, "order": 1},
            {"type": "summarize", "config": {}, "order": 1},
        ],
    )
    db_session.expire_all()

    loaded = pipeline_store.get_pipeline(db_session, created.id)
    assert [s.type for s in loaded.steps] == ["rewrite", "summarize", "extract"]


@pytest.mark.integration
@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"name": "   ", "steps": STEPS}, "name"),
        ({"name": "No steps", "steps": []}, "steps"),
    ],
)
def test_invalid_definitions_are_rejected_before_insert(db_session, test_user, kwargs, field):
    with pytest.raises(ValidationError) as exc_info:
        pipeline_store.create_pipeline(db_session, test_user.id, **kwargs)

    assert exc_info.value.field == field
    assert _count(db_session, Pipeline) == 0


@pytest.mark.integration
def test_unknown_user_is_classified(db_session):
    with pytest.raises(PersistenceError) as exc_info:
        pipeline_store.create_pipeline(db_session, uuid4(), "Orphan", STEPS)

    assert str(exc_info.value) == "User not found. Please sign in again."
    assert "FOREIGN KEY" in exc_info.value.detail.upper()
    assert _count(db_session, PipelineStep) == 0


@pytest.mark.integration
def test_get_hides_other_users_pipelines(db_session, test_user):
    created = pipeline_store.create_pipeline(db_session, test_user.id, "Private", STEPS)

    with pytest.raises(NotFoundError):
        pipeline_store.get_pipeline(db_session, created.id, uuid4())
    with pytest.raises(NotFoundError):
        pipeline_store.get_pipeline(db_session, uuid4())


# ===================================================================
# LIST / SEARCH
# ===================================================================

@pytest.mark.integration
def test_list_and_search(db_session, test_user):
    pipeline_store.create_pipeline(db_session, test_user.id, "Weekly Summary", STEPS)
    pipeline_store.create_pipeline(db_session, test_user.id, "Keyword extractor", STEPS)

    names = [p.name for p in pipeline_store.list_pipelines(db_session, test_user.id)]
    assert names == ["Weekly Summary", "Keyword extractor"]

    found = pipeline_store.search_pipelines(db_session, test_user.id, "SUMMARY")
    assert [p.name for p in found] == ["Weekly Summary"]

    assert pipeline_store.search_pipelines(db_session, test_user.id, "100%") == []
    assert pipeline_store.list_pipelines(db_session, uuid4()) == []


# ===================================================================
# UPDATE / DELETE
# ===================================================================

@pytest.mark.integration
def test_update_replaces_whole_step_set(db_session, test_user):
    created = pipeline_store.create_pipeline(db_session, test_user.id, "Before", STEPS)

    updated = pipeline_store.update_pipeline(
        db_session,
        created.id,
        test_user.id,
        name="After",
        description=None,
        steps=[{"type": "extract", "config": {"extractType": "sentiment"}, "order": 1}],
    )
    db_session.expire_all()

    loaded = pipeline_store.get_pipeline(db_session, updated.id)
    assert loaded.name == "After"
    assert [(s.type, s.config) for s in loaded.steps] == [("extract", {"extractType": "sentiment"})]
    assert _count(db_session, PipelineStep) == 1


@pytest.mark.integration
def test_update_without_steps_keeps_existing_steps(db_session, test_user):
    created = pipeline_store.create_pipeline(db_session, test_user.id, "Keep", STEPS)

    pipeline_store.update_pipeline(db_session, created.id, test_user.id, name="Renamed", description="d")

    assert len(pipeline_store.get_pipeline(db_session, created.id).steps) == 2


@pytest.mark.integration
def test_delete_cascades_to_steps_executions_and_outputs(db_session, test_user):
    created = pipeline_store.create_pipeline(db_session, test_user.id, "Doomed", STEPS)
    execution = execution_store.create_execution(db_session, created.id, test_user.id, "input")
    execution_store.finalize_execution(
        db_session,
        execution,
        PipelineRunResult(
            status=ExecutionStatus.COMPLETED,
            total_processing_time_ms=5,
            outputs=[StepOutput(step_id="s1", output="out", processing_time_ms=4)],
        ),
    )

    pipeline_store.delete_pipeline(db_session, created.id, test_user.id)
    db_session.expire_all()

    assert _count(db_session, Pipeline) == 0
    assert _count(db_session, PipelineStep) == 0
    assert _count(db_session, PipelineExecution) == 0
    assert _count(db_session, PipelineExecutionOutput) == 0


@pytest.mark.integration
def test_delete_user_cascades(db_session, test_user):
    created = pipeline_store.create_pipeline(db_session, test_user.id, "Owned", STEPS)
    execution = execution_store.create_execution(db_session, created.id, test_user.id, "input")
    execution_store.finalize_execution(
        db_session,
        execution,
        PipelineRunResult(
            status=ExecutionStatus.COMPLETED,
            total_processing_time_ms=5,
            outputs=[StepOutput(step_id="s1", output="out", processing_time_ms=4)],
        ),
    )

    db_session.execute(delete(User).where(User.id == test_user.id))
    db_session.commit()
    db_session.expire_all()

    assert [
        _count(db_session, model)
        for model in (Pipeline, PipelineStep, PipelineExecution, PipelineExecutionOutput)
    ] == [0, 0, 0, 0]


@pytest.mark.integration
def test_delete_requires_ownership(db_session, test_user):
    created = pipeline_store.create_pipeline(db_session, test_user.id, "Mine", STEPS)

    with pytest.raises(NotFoundError):
        pipeline_store.delete_pipeline(db_session, created.id, uuid4())

    assert _count(db_session, Pipeline) == 1
