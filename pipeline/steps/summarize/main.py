"""
Summarize Step

Condenses the carried text. Length controls the target sentence count,
format controls the layout (paragraph, bullets or outline).
"""

from pipeline.core.runner import BaseTextStep
from pipeline.core.text_generation import TextGenerationClient
from pipeline.models.core import StepType

from .models import SummarizeConfig
from .prompts import SYSTEM_PROMPT, create_user_prompt


class SummarizeStep(BaseTextStep):
    """Produce a condensed version of the input."""

    config_model = SummarizeConfig
    system_prompt = SYSTEM_PROMPT
    temperature = 0.3
    max_tokens = 800

    def __init__(self, client: TextGenerationClient, model: str):
        super().__init__(step_name=StepType.SUMMARIZE.value, client=client, model=model)

    def _build_prompt(self, config: SummarizeConfig, input_text: str) -> str:
        return create_user_prompt(config, input_text)
