"""
Text-generation backend boundary.

Steps never talk to an LLM SDK directly. They build a GenerationRequest
and hand it to a TextGenerationClient, which is passed into the
StepProcessor at construction so tests can substitute their own.
"""

from typing import Optional

import logfire
from pydantic import BaseModel, Field

from pipeline.core.exceptions import ExternalAPIError
from utils.llm_agent import ModelLike, create_agent


class GenerationRequest(BaseModel):
    """Request sent to the text-generation backend."""

    prompt: str = Field(..., description="User prompt carrying the text to transform")
    system_prompt: Optional[str] = Field(None, description="Type-specific instructions")
    model: str = Field(..., description="pydantic-ai model identifier")
    temperature: float = Field(0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(1000, ge=1)


class GenerationResponse(BaseModel):
    """Response from the text-generation backend. Missing text is a failure."""

    text: Optional[str] = None


class TextGenerationClient:
    """
    pydantic-ai backed text generation.

    Args:
        model: Optional model override. When set it replaces the model named
            in each request (used to inject FunctionModel/TestModel).
        retries: Agent-level retries on output validation failures
        timeout: Per-request HTTP timeout in seconds
    """

    def __init__(
        self,
        model: Optional[ModelLike] = None,
        retries: int = 1,
        timeout: Optional[float] = None,
    ):
        self.model = model
        self.retries = retries
        self.timeout = timeout

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """
        Run one generation request.

        Raises:
            ExternalAPIError: If the backend call fails
        """
        model = self.model if self.model is not None else request.model
        agent = create_agent(
            model=model,
            system_prompt=request.system_prompt,
            temperature=request.temperature,
            max_tokens=request.max_tokens,
            retries=self.retries,
            timeout=self.timeout,
        )

        try:
            result = await agent.run(request.prompt)
        except Exception as e:
            logfire.error(
                "Text generation request failed",
                model=request.model,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ExternalAPIError(f"Text generation failed: {str(e)}") from e

        return GenerationResponse(text=result.output)
