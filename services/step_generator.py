"""Pipeline step generation from a natural-language instruction."""

from typing import Any, Dict, List, Optional

import logfire
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from pipeline.core.exceptions import ExternalAPIError, ValidationError
from pipeline.models.core import StepType
from pipeline.steps.processor import default_step_config, validate_step_config
from utils.llm_agent import ModelLike, run_agent

MAX_GENERATED_STEPS = 10

SYSTEM_PROMPT = """You design text-processing pipelines.

Given an instruction, return the ordered list of steps that accomplishes it.
Use only these step types and config keys:

- summarize: {"length": "short" | "medium" | "long", "format": "paragraph" | "bullets" | "outline"}
- translate: {"targetLanguage": "<language name>"}
- rewrite: {"tone": "casual" | "formal" | "professional" | "friendly" | "academic",
            "style": "concise" | "detailed" | "persuasive" | "informative"}
- extract: {"extractType": "keywords" | "entities" | "topics" | "sentiment"}

Use between 1 and 10 steps. Do not add steps the instruction does not ask for."""


class GeneratedStep(BaseModel):
    """One step proposed by the model."""

    type: StepType = Field(..., description="Step type")
    config: Dict[str, Any] = Field(default_factory=dict, description="Step configuration, camelCase keys")


class GeneratedPipeline(BaseModel):
    """Structured output for step generation."""

    steps: List[GeneratedStep] = Field(..., min_length=1, max_length=MAX_GENERATED_STEPS)


def normalize_generated_steps(generated: GeneratedPipeline) -> List[Dict[str, Any]]:
    """
    Validate each proposed config against its type and number the steps 1..n.

    A config that fails validation is replaced by the type's defaults.
    """
    steps = []
    for index, step in enumerate(generated.steps[:MAX_GENERATED_STEPS]):
        try:
            config = validate_step_config(step.type, step.config).model_dump(by_alias=True)
        except PydanticValidationError:
            logfire.warning(
                "Generated step config invalid, using defaults",
                step_type=step.type.value,
                config=step.config,
            )
            config = default_step_config(step.type)

        steps.append({"type": step.type.value, "config": config, "order": index + 1})
    return steps


async def generate_pipeline_steps(
    instruction: str,
    model: Optional[ModelLike] = None,
) -> List[Dict[str, Any]]:
    """
    Propose an ordered step list for an instruction.

    Args:
        instruction: What the pipeline should do, in plain language
        model: Model identifier or instance (defaults to settings.planner_model)

    Returns:
        List of {type, config, order} records ready for pipeline creation

    Raises:
        ValidationError: If instruction is blank
        ExternalAPIError: If the backend call fails
    """
    if not (instruction or "").strip():
        raise ValidationError("Instruction text is required", field="instruction")

    if model is None:
        from config.settings import settings
        model = settings.planner_model

    with logfire.span("step_generator.generate", instruction_length=len(instruction)):
        try:
            generated = await run_agent(
                f"INSTRUCTION:\n{instruction.strip()}",
                model=model,
                output_type=GeneratedPipeline,
                system_prompt=SYSTEM_PROMPT,
                temperature=0.2,
                max_tokens=1500,
                retries=2,
            )
        except Exception as e:
            logfire.error(
                "Pipeline step generation failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ExternalAPIError(f"Pipeline step generation failed: {str(e)}") from e

        steps = normalize_generated_steps(generated)
        logfire.info("Pipeline steps generated", step_count=len(steps))
        return steps
