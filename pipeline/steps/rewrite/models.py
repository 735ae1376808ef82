"""Rewrite step configuration."""

from typing import Literal

from pydantic import Field

from pipeline.models.config import StepConfigBase

RewriteTone = Literal["casual", "formal", "professional", "friendly", "academic"]
RewriteStyle = Literal["concise", "detailed", "persuasive", "informative"]


class RewriteConfig(StepConfigBase):
    """Configuration for a rewrite step. Tone and style are independent axes."""

    tone: RewriteTone = Field(default="professional", description="Register and word choice")
    style: RewriteStyle = Field(default="informative", description="Length, structure and framing")
