"""
Test suite for the Extract step.

Covers each extract type's prompt contract and the normalization applied
to the backend's answer.
"""

import pytest

from pipeline.core.exceptions import StepExecutionError
from pipeline.steps.extract import ExtractStep
from pipeline.steps.extract.utils import format_itemized, format_keywords, split_items


@pytest.fixture
def extract_step(fake_client):
    return ExtractStep(client=fake_client, model="test-model")


# ===================================================================
# FORMATTING HELPERS
# ===================================================================

def test_split_items_handles_bullets_numbers_and_commas():
    assert split_items("- AI\n2. robotics, automation\n\n* cloud") == [
        "AI", "robotics", "automation", "cloud",
    ]


def test_split_items_keeps_leading_decimals():
    assert split_items("1.5 billion, funding\n3) 2.0 release") == [
        "1.5 billion", "funding", "2.0 release",
    ]


def test_format_keywords_dedupes_and_strips_label():
    assert format_keywords("Keywords: AI, ai\n- robotics") == "AI, robotics"


def test_format_itemized_keeps_commas_inside_items():
    assert format_itemized("Ada Lovelace (person)\n2. Paris, France (place)") == (
        "- Ada Lovelace (person)\n- Paris, France (place)"
    )


# ===================================================================
# STEP EXECUTION
# ===================================================================

@pytest.mark.asyncio
async def test_keywords_output_is_single_comma_line(extract_step, fake_client):
    fake_client.handler = lambda request: "- machine learning\n- AI\n- ai"

    output = await extract_step.execute({"extractType": "keywords"}, "Some text about AI.")

    assert output == "machine learning, AI"
    assert fake_client.requests[0].temperature == 0.0
    assert "comma-separated" in fake_client.requests[0].prompt


@pytest.mark.asyncio
async def test_entities_output_is_itemized(extract_step, fake_client):
    fake_client.handler = lambda request: "Ada Lovelace (person)\nLondon (place)"

    output = await extract_step.execute({"extractType": "entities"}, "Ada Lovelace lived in London.")

    assert output == "- Ada Lovelace (person)\n- London (place)"


@pytest.mark.asyncio
async def test_sentiment_output_is_returned_as_is(extract_step, fake_client):
    fake_client.handler = lambda request: "Positive (0.85) - Optimistic tone"

    output = await extract_step.execute({"extractType": "sentiment"}, "What a great day!")

    assert output == "Positive (0.85) - Optimistic tone"
    assert "Positive, Negative, Neutral or Mixed" in fake_client.requests[0].prompt


@pytest.mark.asyncio
async def test_default_extract_type_is_keywords(extract_step, fake_client):
    await extract_step.execute({}, "text")
    assert "keywords" in fake_client.requests[0].prompt


@pytest.mark.asyncio
async def test_invalid_extract_type_fails_the_step(extract_step):
    with pytest.raises(StepExecutionError) as exc_info:
        await extract_step.execute({"extractType": "emotions"}, "text")

    assert exc_info.value.step_name == "extract"
