"""
Integration tests for execution records and the execution service.

Uses an in-memory SQLite database and the FakeTextClient-backed runner
from conftest.py.
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from models.execution import PipelineExecution
from pipeline.core.exceptions import NotFoundError, PersistenceError, ValidationError
from pipeline.core.runner import PipelineRunner
from pipeline.models.core import ExecutionStatus, PipelineRunResult, StepDefinition, StepOutput
from services import execution_store, pipeline_store
from services.pipeline_executor import execute_pipeline, execute_steps


STEPS = [
    {"type": "summarize", "config": {"length": "short"}, "order": 1},
    {"type": "translate", "config": {"targetLanguage": "Spanish"}, "order": 2},
    {"type": "extract", "config": {"extractType": "sentiment"}, "order": 3},
]


@pytest.fixture
def stored_pipeline(db_session, test_user):
    return pipeline_store.create_pipeline(db_session, test_user.id, "Three steps", STEPS)


def _execution_count(db):
    return db.scalar(select(func.count()).select_from(PipelineExecution))


# ===================================================================
# EXECUTION SERVICE
# ===================================================================

@pytest.mark.integration
@pytest.mark.asyncio
async def test_successful_run_is_persisted(db_session, test_user, stored_pipeline, pipeline_runner):
    execution = await execute_pipeline(
        db_session, stored_pipeline.id, test_user.id, "Long input text.", pipeline_runner
    )
    db_session.expire_all()

    loaded = execution_store.get_execution(db_session, execution.id, test_user.id)
    step_ids = [str(s.id) for s in stored_pipeline.steps]

    assert loaded.status == ExecutionStatus.COMPLETED.value
    assert loaded.input == "Long input text."
    assert loaded.error is None
    assert loaded.failed_step_id is None
    assert [o.step_id for o in loaded.outputs] == step_ids
    assert [o.output for o in loaded.outputs] == ["output 1", "output 2", "output 3"]
    assert loaded.total_processing_time >= sum(o.processing_time for o in loaded.outputs)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_second_step_failure_keeps_first_output(
    db_session, test_user, stored_pipeline, pipeline_runner, fake_client
):
    fake_client.handler = lambda request: "" if "Translate" in request.prompt else "summary"

    execution = await execute_pipeline(
        db_session, stored_pipeline.id, test_user.id, "Input", pipeline_runner
    )
    db_session.expire_all()

    loaded = execution_store.get_execution(db_session, execution.id)
    translate_step = stored_pipeline.steps[1]

    assert loaded.status == ExecutionStatus.FAILED.value
    assert len(loaded.outputs) == 1
    assert loaded.outputs[0].output == "summary"
    assert loaded.failed_step_id == str(translate_step.id)
    assert "Step 'translate' failed" in loaded.error
    assert loaded.total_processing_time is not None
    # Third step never reached the backend
    assert len(fake_client.requests) == 2


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.parametrize("blank", ["", "   "])
async def test_blank_input_creates_no_execution(db_session, test_user, stored_pipeline, pipeline_runner, blank):
    with pytest.raises(ValidationError):
        await execute_pipeline(db_session, stored_pipeline.id, test_user.id, blank, pipeline_runner)

    assert _execution_count(db_session) == 0


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unknown_or_foreign_pipeline_is_not_found(db_session, test_user, stored_pipeline, pipeline_runner):
    with pytest.raises(NotFoundError):
        await execute_pipeline(db_session, uuid4(), test_user.id, "Input", pipeline_runner)
    with pytest.raises(NotFoundError):
        await execute_pipeline(db_session, stored_pipeline.id, uuid4(), "Input", pipeline_runner)

    assert _execution_count(db_session) == 0


@pytest.mark.integration
@pytest.mark.asyncio
async def test_runner_crash_still_finalizes_execution(db_session, test_user, stored_pipeline):
    class CrashingRunner(PipelineRunner):
        async def run(self, steps, input_text, progress_callback=None):
            raise RuntimeError("worker lost")

    with pytest.raises(RuntimeError):
        await execute_pipeline(
            db_session, stored_pipeline.id, test_user.id, "Input", CrashingRunner(processor=None)
        )

    execution = db_session.execute(select(PipelineExecution)).scalar_one()
    assert execution.status == ExecutionStatus.FAILED.value
    assert execution.error == "worker lost"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_progress_callback_error_keeps_completed_outputs(
    db_session, test_user, stored_pipeline, pipeline_runner
):
    async def flaky_progress(step_id, status):
        if status == "completed":
            raise ConnectionError("result backend unavailable")

    execution = await execute_pipeline(
        db_session,
        stored_pipeline.id,
        test_user.id,
        "Input",
        pipeline_runner,
        progress_callback=flaky_progress,
    )
    db_session.expire_all()

    loaded = execution_store.get_execution(db_session, execution.id)
    assert loaded.status == ExecutionStatus.COMPLETED.value
    assert [o.output for o in loaded.outputs] == ["output 1", "output 2", "output 3"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unsaved_result_leaves_execution_failed(
    db_session, test_user, stored_pipeline, pipeline_runner, monkeypatch
):
    def failing_finalize(db, execution, result):
        raise PersistenceError("Database operation failed", detail="disk I/O error")

    monkeypatch.setattr(execution_store, "finalize_execution", failing_finalize)

    with pytest.raises(PersistenceError):
        await execute_pipeline(
            db_session, stored_pipeline.id, test_user.id, "Input", pipeline_runner
        )
    db_session.expire_all()

    execution = db_session.execute(select(PipelineExecution)).scalar_one()
    assert execution.status == ExecutionStatus.FAILED.value
    assert "could not be saved" in execution.error
    assert execution.total_processing_time is not None


@pytest.mark.integration
def test_mark_execution_failed_ignores_finished_rows(db_session, test_user, stored_pipeline):
    execution = execution_store.create_execution(db_session, stored_pipeline.id, test_user.id, "x")
    execution_store.finalize_execution(
        db_session,
        execution,
        PipelineRunResult(status=ExecutionStatus.COMPLETED, total_processing_time_ms=1),
    )

    assert execution_store.mark_execution_failed(db_session, execution.id, "late") is False
    db_session.expire_all()
    assert execution_store.get_execution(db_session, execution.id).status == ExecutionStatus.COMPLETED.value


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ad_hoc_steps_are_not_persisted(db_session, pipeline_runner):
    result = await execute_steps(
        [StepDefinition(id="a", type="rewrite", config={"tone": "casual"}, order=1)],
        "Please rewrite me.",
        pipeline_runner,
    )

    assert result.status == ExecutionStatus.COMPLETED
    assert result.final_output == "output 1"
    assert _execution_count(db_session) == 0


# ===================================================================
# EXECUTION STORE
# ===================================================================

@pytest.mark.integration
def test_created_execution_is_running(db_session, test_user, stored_pipeline):
    execution = execution_store.create_execution(db_session, stored_pipeline.id, test_user.id, "x")

    assert execution.status == ExecutionStatus.RUNNING.value
    assert execution.total_processing_time is None


@pytest.mark.integration
def test_finalize_is_once_only(db_session, test_user, stored_pipeline):
    execution = execution_store.create_execution(db_session, stored_pipeline.id, test_user.id, "x")
    result = PipelineRunResult(status=ExecutionStatus.COMPLETED, total_processing_time_ms=1)
    execution_store.finalize_execution(db_session, execution, result)

    with pytest.raises(ValueError):
        execution_store.finalize_execution(db_session, execution, result)


@pytest.mark.integration
def test_list_executions_newest_first_and_filtered(db_session, test_user, stored_pipeline):
    other = pipeline_store.create_pipeline(db_session, test_user.id, "Other", STEPS[:1])
    first = execution_store.create_execution(db_session, stored_pipeline.id, test_user.id, "first")
    second = execution_store.create_execution(db_session, stored_pipeline.id, test_user.id, "second")
    execution_store.create_execution(db_session, other.id, test_user.id, "other")

    listed = execution_store.list_executions(db_session, test_user.id, pipeline_id=stored_pipeline.id)

    assert [e.id for e in listed] == [second.id, first.id]
    assert len(execution_store.list_executions(db_session, test_user.id)) == 3
    assert len(execution_store.list_executions(db_session, test_user.id, limit=1)) == 1
    assert execution_store.list_executions(db_session, uuid4()) == []


@pytest.mark.integration
def test_user_stats(db_session, test_user, stored_pipeline):
    for status, total in [(ExecutionStatus.COMPLETED, 100), (ExecutionStatus.FAILED, 50)]:
        execution = execution_store.create_execution(db_session, stored_pipeline.id, test_user.id, "x")
        execution_store.finalize_execution(
            db_session,
            execution,
            PipelineRunResult(
                status=status,
                total_processing_time_ms=total,
                outputs=[StepOutput(step_id="s", output="o", processing_time_ms=total)],
                error="boom" if status == ExecutionStatus.FAILED else None,
                failed_step_id="s2" if status == ExecutionStatus.FAILED else None,
            ),
        )
    execution_store.create_execution(db_session, stored_pipeline.id, test_user.id, "still running")

    stats = execution_store.get_user_stats(db_session, test_user.id)

    assert stats == {
        "total_pipelines": 1,
        "total_executions": 3,
        "completed_executions": 1,
        "failed_executions": 1,
        "average_processing_time": 75,
    }
