"""
Column types shared by the ORM models.

UUID and JSON map to native PostgreSQL types (uuid, jsonb) and fall back to
portable representations on SQLite.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB

UUIDType = Uuid(as_uuid=True)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    """Timezone-aware current time for Python-side column defaults."""
    return datetime.now(timezone.utc)
