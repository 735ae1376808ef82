"""
Rewrite Step

Rewrites the carried text along two independent axes: tone and style.
"""

from pipeline.core.runner import BaseTextStep
from pipeline.core.text_generation import TextGenerationClient
from pipeline.models.core import StepType

from .models import RewriteConfig
from .prompts import SYSTEM_PROMPT, create_user_prompt


class RewriteStep(BaseTextStep):
    """Rewrite the input for a tone and a style."""

    config_model = RewriteConfig
    system_prompt = SYSTEM_PROMPT
    temperature = 0.7  # Higher for creative rewriting
    max_tokens = 2000

    def __init__(self, client: TextGenerationClient, model: str):
        super().__init__(step_name=StepType.REWRITE.value, client=client, model=model)

    def _build_prompt(self, config: RewriteConfig, input_text: str) -> str:
        return create_user_prompt(config, input_text)
