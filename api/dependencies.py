"""Shared FastAPI dependencies for the pipeline API."""

from typing import Annotated, Optional

from fastapi import Depends, Query

from config.settings import settings
from pipeline import create_pipeline_runner
from pipeline.core.runner import PipelineRunner
from utils.llm_agent import ModelLike


def get_pipeline_runner() -> PipelineRunner:
    """
    Runner wired to the configured text-generation backend.

    Overridden in tests with a runner around a fake client.
    """
    return create_pipeline_runner()


def get_step_generator_model() -> Optional[ModelLike]:
    """Model used by step generation; None means settings.planner_model."""
    return None


def pagination_params(
    limit: int = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0)
) -> dict:
    """Reusable pagination with configurable defaults and max limits from settings."""
    if limit is None:
        limit = settings.pagination_default_limit
    limit = min(limit, settings.pagination_max_limit)

    return {"limit": limit, "offset": offset}


# Type aliases for dependency injection
PaginationParams = Annotated[dict, Depends(pagination_params)]
RunnerDep = Annotated[PipelineRunner, Depends(get_pipeline_runner)]
