"""
Tests for step generation from an instruction.

pydantic-ai's TestModel stands in for the planner model so the structured
output path runs without network access.
"""

import pytest
from pydantic_ai.models.test import TestModel as StubModel

from pipeline.core.exceptions import ValidationError
from services.step_generator import (
    GeneratedPipeline,
    GeneratedStep,
    generate_pipeline_steps,
    normalize_generated_steps,
)


@pytest.mark.unit
def test_invalid_generated_config_is_replaced_by_defaults():
    generated = GeneratedPipeline(
        steps=[
            GeneratedStep(type="rewrite", config={"tone": "sarcastic"}),
            GeneratedStep(type="extract", config={"extractType": "topics"}),
        ]
    )

    assert normalize_generated_steps(generated) == [
        {"type": "rewrite", "config": {"tone": "professional", "style": "informative"}, "order": 1},
        {"type": "extract", "config": {"extractType": "topics"}, "order": 2},
    ]


@pytest.mark.unit
def test_generated_pipeline_is_bounded():
    with pytest.raises(Exception):
        GeneratedPipeline(steps=[])
    with pytest.raises(Exception):
        GeneratedPipeline(steps=[GeneratedStep(type="summarize")] * 11)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_pipeline_steps_with_stub_model():
    model = StubModel(
        custom_output_args={
            "steps": [
                {"type": "extract", "config": {"extractType": "sentiment"}},
                {"type": "summarize", "config": {"length": "tiny"}},
            ]
        }
    )

    steps = await generate_pipeline_steps("Tell me the mood, then summarize", model=model)

    assert [s["order"] for s in steps] == [1, 2]
    assert steps[0]["config"] == {"extractType": "sentiment"}
    assert steps[1]["config"] == {"length": "medium", "format": "paragraph"}


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("instruction", ["", "   ", None])
async def test_blank_instruction_is_rejected(instruction):
    with pytest.raises(ValidationError):
        await generate_pipeline_steps(instruction, model=StubModel())
