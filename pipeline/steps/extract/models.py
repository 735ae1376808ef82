"""Extract step configuration."""

from typing import Literal

from pydantic import Field

from pipeline.models.config import StepConfigBase

ExtractType = Literal["keywords", "entities", "topics", "sentiment"]


class ExtractConfig(StepConfigBase):
    """Configuration for an extract step."""

    extract_type: ExtractType = Field(default="keywords", description="What to extract from the text")
