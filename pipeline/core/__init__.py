"""
Core pipeline infrastructure.

This package contains the core components of the pipeline:
- BaseTextStep: Abstract base class for all text steps
- PipelineRunner: Orchestrator for sequential step execution
- TextGenerationClient: Backend boundary used by every step

Data models are in pipeline.models.core
Custom exceptions are in pipeline.core.exceptions
"""

from pipeline.core.runner import BaseTextStep, PipelineRunner
from pipeline.core.text_generation import (
    GenerationRequest,
    GenerationResponse,
    TextGenerationClient,
)

__all__ = [
    "BaseTextStep",
    "PipelineRunner",
    "GenerationRequest",
    "GenerationResponse",
    "TextGenerationClient",
]
