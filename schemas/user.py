"""
User Pydantic schemas.

Users are plain owner records; authentication happens upstream.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, ConfigDict

from schemas.pipeline import CamelModel


class UserCreate(CamelModel):
    """Request body for POST /api/users"""

    id: uuid.UUID = Field(..., description="User id from the identity provider")
    email: EmailStr
    name: Optional[str] = Field(None, max_length=255)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "email": "user@example.com",
                "name": "Jane Doe",
            }
        }
    )


class UserResponse(CamelModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None
    created_at: datetime
