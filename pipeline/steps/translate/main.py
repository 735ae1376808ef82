"""
Translate Step

Renders the carried text in the configured target language.
"""

from pipeline.core.runner import BaseTextStep
from pipeline.core.text_generation import TextGenerationClient
from pipeline.models.core import StepType

from .models import TranslateConfig
from .prompts import SYSTEM_PROMPT, create_user_prompt


class TranslateStep(BaseTextStep):
    """Translate the input, translation only."""

    config_model = TranslateConfig
    system_prompt = SYSTEM_PROMPT
    temperature = 0.1  # Low temperature for faithful translation
    max_tokens = 2000

    def __init__(self, client: TextGenerationClient, model: str):
        super().__init__(step_name=StepType.TRANSLATE.value, client=client, model=model)

    def _build_prompt(self, config: TranslateConfig, input_text: str) -> str:
        return create_user_prompt(config, input_text)
