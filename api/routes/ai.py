"""Ad-hoc pipeline execution. Nothing is persisted."""

import logfire
from fastapi import APIRouter

from api.dependencies import RunnerDep
from pipeline.models.core import StepDefinition
from schemas.pipeline import AdHocExecuteRequest, RunResultResponse
from services.pipeline_executor import execute_steps


router = APIRouter(prefix="/api/ai", tags=["AI"])


@router.post("/execute", response_model=RunResultResponse)
async def execute_ad_hoc(request: AdHocExecuteRequest, runner: RunnerDep):
    """
    Run an inline step list against input text.

    Unknown step types pass their input through unchanged. A failing step
    yields status `failed` with the outputs produced before it.

    Raises:
        400: Empty steps or blank input
    """
    with logfire.span("api.execute_ad_hoc", step_count=len(request.steps)):
        steps = [
            StepDefinition(id=step.id, type=step.type, config=step.config, order=step.order)
            for step in request.steps
        ]
        result = await execute_steps(steps, request.input, runner)
        return RunResultResponse.from_result(result)
