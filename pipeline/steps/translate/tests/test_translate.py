"""Test suite for the Translate step."""

import pytest

from pipeline.steps.translate import TranslateConfig, TranslateStep


@pytest.fixture
def translate_step(fake_client):
    return TranslateStep(client=fake_client, model="test-model")


def test_target_language_defaults_to_english():
    assert TranslateConfig().target_language == "English"
    assert TranslateConfig.model_validate({"targetLanguage": "   "}).target_language == "English"


def test_camel_and_snake_case_keys_are_accepted():
    assert TranslateConfig.model_validate({"targetLanguage": "Spanish"}).target_language == "Spanish"
    assert TranslateConfig.model_validate({"target_language": "German"}).target_language == "German"


def test_config_dumps_with_stored_key_names():
    assert TranslateConfig(target_language="French").model_dump(by_alias=True) == {
        "targetLanguage": "French"
    }


@pytest.mark.asyncio
async def test_prompt_names_target_language(translate_step, fake_client):
    await translate_step.execute({"targetLanguage": "Japanese"}, "Good morning")

    request = fake_client.requests[0]
    assert "into Japanese" in request.prompt
    assert "TEXT:\nGood morning" in request.prompt
    assert request.temperature == 0.1


@pytest.mark.asyncio
async def test_missing_config_uses_defaults(translate_step, fake_client):
    await translate_step.execute(None, "Bonjour")

    assert "into English" in fake_client.requests[0].prompt
