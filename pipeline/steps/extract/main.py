"""
Extract Step

Pulls structured information out of the carried text: keywords as a
comma list, entities and topics as itemized lists, or a sentiment label
with a confidence score.
"""

from pipeline.core.runner import BaseTextStep
from pipeline.core.text_generation import TextGenerationClient
from pipeline.models.core import StepType

from .models import ExtractConfig
from .prompts import SYSTEM_PROMPT, create_user_prompt
from .utils import format_itemized, format_keywords


class ExtractStep(BaseTextStep):
    """Produce a structured extraction of the input."""

    config_model = ExtractConfig
    system_prompt = SYSTEM_PROMPT
    temperature = 0.0  # Deterministic extraction
    max_tokens = 600

    def __init__(self, client: TextGenerationClient, model: str):
        super().__init__(step_name=StepType.EXTRACT.value, client=client, model=model)

    def _build_prompt(self, config: ExtractConfig, input_text: str) -> str:
        return create_user_prompt(config, input_text)

    def _postprocess(self, config: ExtractConfig, text: str) -> str:
        if config.extract_type == "keywords":
            return format_keywords(text)
        if config.extract_type in ("entities", "topics"):
            return format_itemized(text)
        return text
