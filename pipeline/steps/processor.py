"""
Step Processor

Dispatches one step (type tag + config) to its text step implementation.
Unknown step types pass their input through unchanged.
"""

from typing import Any, Dict, Optional, Type

import logfire

from pipeline.core.runner import BaseTextStep
from pipeline.core.text_generation import TextGenerationClient
from pipeline.models.config import StepConfigBase
from pipeline.models.core import StepType
from pipeline.steps.extract import ExtractConfig, ExtractStep
from pipeline.steps.rewrite import RewriteConfig, RewriteStep
from pipeline.steps.summarize import SummarizeConfig, SummarizeStep
from pipeline.steps.translate import TranslateConfig, TranslateStep

STEP_CLASSES: Dict[StepType, Type[BaseTextStep]] = {
    StepType.SUMMARIZE: SummarizeStep,
    StepType.TRANSLATE: TranslateStep,
    StepType.REWRITE: RewriteStep,
    StepType.EXTRACT: ExtractStep,
}

CONFIG_MODELS: Dict[StepType, Type[StepConfigBase]] = {
    StepType.SUMMARIZE: SummarizeConfig,
    StepType.TRANSLATE: TranslateConfig,
    StepType.REWRITE: RewriteConfig,
    StepType.EXTRACT: ExtractConfig,
}


def resolve_step_type(step_type: str) -> Optional[StepType]:
    """Return the StepType for a tag, or None if the tag is not recognized."""
    try:
        return StepType(step_type)
    except ValueError:
        return None


def validate_step_config(step_type: StepType, config: Optional[Dict[str, Any]]) -> StepConfigBase:
    """
    Validate a raw config record for a step type.

    Raises:
        pydantic.ValidationError: If a recognized key has an invalid value
    """
    return CONFIG_MODELS[StepType(step_type)].model_validate(config or {})


def default_step_config(step_type: StepType) -> Dict[str, Any]:
    """Config record with every default filled in, camelCase keys."""
    return CONFIG_MODELS[StepType(step_type)]().model_dump(by_alias=True)


class StepProcessor:
    """
    Runs a single step against an input string.

    Args:
        client: Text-generation backend shared by all steps
        model: Model identifier placed on each backend request
    """

    def __init__(self, client: TextGenerationClient, model: str):
        self.client = client
        self.model = model
        self.steps: Dict[StepType, BaseTextStep] = {
            step_type: step_class(client=client, model=model)
            for step_type, step_class in STEP_CLASSES.items()
        }

    async def process(self, step_type: str, config: Optional[Dict[str, Any]], input_text: str) -> str:
        """
        Transform input_text with the step identified by step_type.

        Returns:
            Output text, or input_text unchanged for unrecognized step types

        Raises:
            StepExecutionError: If the backend call fails or returns empty content
        """
        resolved = resolve_step_type(step_type)
        if resolved is None:
            logfire.warning(
                "Unrecognized step type, passing input through",
                step_type=step_type,
            )
            return input_text

        return await self.steps[resolved].execute(config, input_text)
