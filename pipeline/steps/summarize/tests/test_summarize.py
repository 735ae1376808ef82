"""
Test suite for the Summarize step.

Run with:
    pytest pipeline/steps/summarize/tests/test_summarize.py -v
"""

import pytest

from pipeline.core.exceptions import StepExecutionError
from pipeline.steps.summarize import SummarizeConfig, SummarizeStep
from pipeline.steps.summarize.prompts import create_user_prompt


SOURCE_TEXT = (
    "Artificial intelligence is transforming software development. Teams use "
    "assistants to write tests, review code and draft documentation."
)


@pytest.fixture
def summarize_step(fake_client):
    return SummarizeStep(client=fake_client, model="test-model")


def test_defaults_are_medium_paragraph():
    config = SummarizeConfig()

    assert config.length == "medium"
    assert config.format == "paragraph"
    assert config.sentence_range == (3, 4)


@pytest.mark.parametrize(
    "length, expected",
    [("short", "1-2 sentences"), ("medium", "3-4 sentences"), ("long", "5-6 sentences")],
)
def test_prompt_targets_sentence_count(length, expected):
    prompt = create_user_prompt(SummarizeConfig(length=length), SOURCE_TEXT)

    assert expected in prompt
    assert prompt.endswith(SOURCE_TEXT)


def test_bullets_format_requests_bulleted_list():
    prompt = create_user_prompt(SummarizeConfig(format="bullets"), SOURCE_TEXT)
    assert "bulleted list" in prompt


@pytest.mark.asyncio
async def test_execute_sends_request_with_step_parameters(summarize_step, fake_client):
    output = await summarize_step.execute({"length": "short", "format": "outline"}, SOURCE_TEXT)

    request = fake_client.requests[0]
    assert output == "output 1"
    assert request.model == "test-model"
    assert request.temperature == 0.3
    assert request.max_tokens == 800
    assert "1-2 sentences" in request.prompt
    assert "numbered outline" in request.prompt
    assert "faithful" in request.system_prompt


@pytest.mark.asyncio
async def test_invalid_length_fails_the_step(summarize_step, fake_client):
    with pytest.raises(StepExecutionError) as exc_info:
        await summarize_step.execute({"length": "enormous"}, SOURCE_TEXT)

    assert exc_info.value.step_name == "summarize"
    assert "Invalid summarize config" in str(exc_info.value)
    assert fake_client.requests == []
