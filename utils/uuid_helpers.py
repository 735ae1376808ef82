"""Helpers for converting string UUIDs to UUID objects."""

from typing import Optional, Union
from uuid import UUID

from pipeline.core.exceptions import ValidationError


def ensure_uuid(value: Union[str, UUID]) -> UUID:
    """Return a UUID object, coercing from string when needed."""
    if isinstance(value, UUID):
        return value

    try:
        return UUID(value)
    except (ValueError, AttributeError, TypeError) as e:
        raise ValueError(f"Invalid UUID format: {value}") from e


def parse_uuid_param(value: Optional[Union[str, UUID]], field: str) -> UUID:
    """
    Parse a required id from a request.

    Raises:
        ValidationError: If the value is missing or not a UUID
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required", field=field)
    try:
        return ensure_uuid(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: {value}", field=field) from e
