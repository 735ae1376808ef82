"""
Pipeline factory functions.

This module provides create_pipeline_runner() which wires the text-generation
client, the step processor and the runner together from settings.
"""

from typing import Optional

from pipeline.core.runner import PipelineRunner
from pipeline.core.text_generation import TextGenerationClient


def create_text_generation_client() -> TextGenerationClient:
    """Build the backend client from settings."""
    from config.settings import settings

    return TextGenerationClient(
        retries=settings.generation_retries,
        timeout=settings.step_timeout_seconds,
    )


def create_pipeline_runner(client: Optional[TextGenerationClient] = None) -> PipelineRunner:
    """
    Factory function to create a fully configured pipeline runner.

    Args:
        client: Optional backend client. Defaults to one built from settings;
            tests pass their own.

    Returns:
        PipelineRunner ready to execute step lists

    Example:
        ```python
        from pipeline import create_pipeline_runner
        from pipeline.models.core import StepDefinition

        runner = create_pipeline_runner()
        result = await runner.run(
            [
                StepDefinition(id="s1", type="summarize", config={"length": "short"}, order=1),
                StepDefinition(id="s2", type="translate", config={"targetLanguage": "Spanish"}, order=2),
            ],
            "Artificial intelligence is changing how software is built...",
        )
        print(result.status, result.final_output)
        ```
    """
    # Import lazily to avoid circular dependencies at package import time
    from config.settings import settings
    from pipeline.steps.processor import StepProcessor

    processor = StepProcessor(
        client=client or create_text_generation_client(),
        model=settings.llm_model,
    )

    return PipelineRunner(
        processor=processor,
        step_timeout=settings.step_timeout_seconds,
        run_deadline=settings.run_deadline_seconds,
    )
