"""Summarize step configuration."""

from typing import Literal

from pydantic import Field

from pipeline.models.config import StepConfigBase

SummaryLength = Literal["short", "medium", "long"]
SummaryFormat = Literal["paragraph", "bullets", "outline"]

# Target sentence range per length setting
SENTENCE_TARGETS = {
    "short": (1, 2),
    "medium": (3, 4),
    "long": (5, 6),
}


class SummarizeConfig(StepConfigBase):
    """Configuration for a summarize step."""

    length: SummaryLength = Field(default="medium", description="Target summary length")
    format: SummaryFormat = Field(default="paragraph", description="Layout of the summary")

    @property
    def sentence_range(self) -> tuple:
        return SENTENCE_TARGETS[self.length]
