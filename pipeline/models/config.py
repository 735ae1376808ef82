"""Shared base for per-type step configuration models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StepConfigBase(BaseModel):
    """
    Base for typed step configurations.

    Stored configs use camelCase keys (e.g. "targetLanguage"); snake_case is
    accepted too. Unrecognized keys are ignored so open-ended config records
    from clients still validate.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )
