"""
Core pipeline infrastructure.

BaseTextStep: Abstract base class for text-transformation steps
PipelineRunner: Orchestrates sequential step execution
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

import logfire
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from pipeline.core.exceptions import ExternalAPIError, StepExecutionError, ValidationError
from pipeline.core.text_generation import GenerationRequest, TextGenerationClient
from pipeline.models.core import (
    ExecutionStatus,
    PipelineRunResult,
    StepDefinition,
    StepOutput,
)

ProgressCallback = Callable[[str, str], Awaitable[None]]


def elapsed_ms(start: float, end: Optional[float] = None) -> int:
    """Whole milliseconds between two perf_counter readings, floored."""
    end = time.perf_counter() if end is None else end
    return int((end - start) * 1000)


class BaseTextStep(ABC):
    """
    Abstract base class for all text-transformation steps.

    Each step must define:
    - config_model: pydantic model for its configuration
    - _build_prompt(): user prompt for the backend

    The execute() method wraps the backend call with:
    - Logfire observability spans
    - Config validation
    - Empty-output detection
    - Error wrapping into StepExecutionError
    """

    config_model: Type[BaseModel]
    system_prompt: str = "You are a helpful writing assistant."
    temperature: float = 0.3
    max_tokens: int = 1000

    def __init__(self, step_name: str, client: TextGenerationClient, model: str):
        """
        Initialize a text step.

        Args:
            step_name: Step type tag (used in logs and errors)
            client: Text-generation backend
            model: Model identifier placed on each request
        """
        self.step_name = step_name
        self.client = client
        self.model = model

    def parse_config(self, config: Optional[Dict[str, Any]]) -> BaseModel:
        """
        Validate a raw config record against this step's config model.

        Raises:
            ValidationError: If a recognized key has an invalid value
        """
        try:
            return self.config_model.model_validate(config or {})
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid {self.step_name} config: {e.errors()[0]['msg']}",
                field="config",
            ) from e

    async def execute(self, config: Optional[Dict[str, Any]], input_text: str) -> str:
        """
        Transform input_text according to config.

        Returns:
            Output text (never empty)

        Raises:
            StepExecutionError: If config is invalid, the backend fails,
                or the backend returns no text
        """
        start_time = time.perf_counter()

        with logfire.span(f"pipeline.step.{self.step_name}", step=self.step_name):
            try:
                parsed = self.parse_config(config)
                request = GenerationRequest(
                    prompt=self._build_prompt(parsed, input_text),
                    system_prompt=self.system_prompt,
                    model=self.model,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                )

                response = await self.client.generate(request)
                text = (response.text or "").strip()
                if not text:
                    raise ExternalAPIError("Text generation returned empty content")

                output = self._postprocess(parsed, text)

                logfire.info(
                    f"{self.step_name} completed",
                    input_length=len(input_text),
                    output_length=len(output),
                    duration=time.perf_counter() - start_time,
                )
                return output

            except Exception as e:
                logfire.error(
                    f"{self.step_name} failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    duration=time.perf_counter() - start_time,
                )
                raise StepExecutionError(self.step_name, e) from e

    @abstractmethod
    def _build_prompt(self, config: BaseModel, input_text: str) -> str:
        """
        Build the user prompt for this step.

        MUST BE IMPLEMENTED by each step.
        """
        pass

    def _postprocess(self, config: BaseModel, text: str) -> str:
        """Optional cleanup of the backend output. Default: unchanged."""
        return text


class PipelineRunner:
    """
    Orchestrates sequential execution of a step list.

    Responsibilities:
    - Order steps (ascending order, ties keep ingestion order)
    - Carry each step's output into the next step
    - Time every step and the whole run
    - Stop at the first failing step and report it
    - Enforce per-step timeout and overall run deadline

    Args:
        processor: Object exposing `async process(step_type, config, input_text) -> str`
        step_timeout: Seconds allowed per step (None disables)
        run_deadline: Seconds allowed for the whole run (None disables)
    """

    def __init__(
        self,
        processor,
        step_timeout: Optional[float] = None,
        run_deadline: Optional[float] = None,
    ):
        self.processor = processor
        self.step_timeout = step_timeout
        self.run_deadline = run_deadline

    @staticmethod
    def validate_run(steps: List[StepDefinition], input_text: Optional[str]) -> None:
        """
        Check run preconditions.

        Raises:
            ValidationError: If steps is empty or input_text is blank
        """
        if not steps:
            raise ValidationError("At least one step is required", field="steps")
        if not (input_text or "").strip():
            raise ValidationError("Input text is required", field="input")

    @staticmethod
    def order_steps(steps: List[StepDefinition]) -> List[StepDefinition]:
        """Sort by `order`; sorted() is stable so ties keep ingestion order."""
        return sorted(steps, key=lambda step: step.order)

    def _step_budget(self, run_start: float) -> Optional[float]:
        """Seconds the next step may take, bounded by the step timeout and run deadline."""
        budgets = []
        if self.step_timeout is not None:
            budgets.append(self.step_timeout)
        if self.run_deadline is not None:
            budgets.append(max(self.run_deadline - (time.perf_counter() - run_start), 0.0))
        return min(budgets) if budgets else None

    async def _run_step(self, step: StepDefinition, carried_text: str, run_start: float) -> str:
        budget = self._step_budget(run_start)
        if budget is not None and budget <= 0:
            raise StepExecutionError(step.type, TimeoutError("Pipeline run deadline exceeded"))

        call = self.processor.process(step.type, step.config, carried_text)
        try:
            if budget is None:
                return await call
            try:
                return await asyncio.wait_for(call, timeout=budget)
            except asyncio.TimeoutError as e:
                raise StepExecutionError(
                    step.type, TimeoutError(f"Step timed out after {budget:.1f}s")
                ) from e
        except StepExecutionError:
            raise
        except Exception as e:
            # Processors are expected to wrap their own errors; anything that
            # escapes still fails only this run.
            raise StepExecutionError(step.type, e) from e

    async def _notify(
        self,
        progress_callback: Optional[ProgressCallback],
        step_id: str,
        status: str,
    ) -> None:
        """Report step progress. A failing callback is logged and never fails the run."""
        if not progress_callback:
            return
        try:
            await progress_callback(step_id, status)
        except Exception as e:
            logfire.warning(
                "Progress callback failed",
                step_id=step_id,
                step_status=status,
                error=str(e),
                error_type=type(e).__name__,
            )

    async def run(
        self,
        steps: List[StepDefinition],
        input_text: str,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> PipelineRunResult:
        """
        Run all steps sequentially against input_text.

        Args:
            steps: Step definitions (any order)
            input_text: Text fed to the first step
            progress_callback: Optional async callback(step_id, status) with
                status in started/completed/failed

        Returns:
            PipelineRunResult with status COMPLETED or FAILED

        Raises:
            ValidationError: If steps is empty or input_text is blank
                (nothing is started)
        """
        self.validate_run(steps, input_text)
        ordered = self.order_steps(steps)

        run_start = time.perf_counter()
        outputs: List[StepOutput] = []
        carried_text = input_text

        with logfire.span("pipeline.run", total_steps=len(ordered)):
            logfire.info(
                "Pipeline execution started",
                total_steps=len(ordered),
                input_length=len(input_text),
            )

            for i, step in enumerate(ordered):
                logfire.info(
                    f"Executing step {i + 1}/{len(ordered)}",
                    step_id=step.id,
                    step_type=step.type,
                )
                await self._notify(progress_callback, step.id, "started")

                step_start = time.perf_counter()
                try:
                    output = await self._run_step(step, carried_text, run_start)
                except StepExecutionError as e:
                    total_ms = elapsed_ms(run_start)
                    logfire.error(
                        "Pipeline execution failed",
                        failed_step_id=step.id,
                        failed_step=e.step_name,
                        completed_steps=len(outputs),
                        total_processing_time_ms=total_ms,
                        error=str(e),
                    )
                    await self._notify(progress_callback, step.id, "failed")
                    return PipelineRunResult(
                        status=ExecutionStatus.FAILED,
                        total_processing_time_ms=total_ms,
                        outputs=outputs,
                        error=str(e),
                        failed_step_id=step.id,
                    )

                outputs.append(
                    StepOutput(
                        step_id=step.id,
                        output=output,
                        processing_time_ms=elapsed_ms(step_start),
                    )
                )
                carried_text = output

                await self._notify(progress_callback, step.id, "completed")

            total_ms = elapsed_ms(run_start)
            logfire.info(
                "Pipeline execution completed",
                total_processing_time_ms=total_ms,
                step_timings={o.step_id: o.processing_time_ms for o in outputs},
            )

            return PipelineRunResult(
                status=ExecutionStatus.COMPLETED,
                total_processing_time_ms=total_ms,
                outputs=outputs,
            )
