"""Translate step configuration."""

from pydantic import Field, field_validator

from pipeline.models.config import StepConfigBase

DEFAULT_TARGET_LANGUAGE = "English"


class TranslateConfig(StepConfigBase):
    """Configuration for a translate step."""

    target_language: str = Field(
        default=DEFAULT_TARGET_LANGUAGE,
        max_length=100,
        description="Language to translate into (free text, e.g. 'Spanish')",
    )

    @field_validator("target_language")
    @classmethod
    def default_blank_language(cls, v: str) -> str:
        """Blank language falls back to the default"""
        return v.strip() or DEFAULT_TARGET_LANGUAGE
