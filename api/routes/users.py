"""User record endpoints. Users only exist as owners of pipelines and executions."""

import logfire
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.user import UserCreate, UserResponse
from services import user_store
from utils.uuid_helpers import parse_uuid_param


router = APIRouter(prefix="/api/users", tags=["User Management"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(request: UserCreate, db: Session = Depends(get_db)):
    """
    Register a user record.

    Idempotent - returns the existing record if the id is already registered.
    """
    with logfire.span("api.create_user", user_id=str(request.id)):
        user = user_store.create_user(db, request.id, request.email, request.name)
        return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db: Session = Depends(get_db)):
    """Fetch a user record. 404 if absent."""
    user = user_store.get_user(db, parse_uuid_param(user_id, "userId"))
    return UserResponse.model_validate(user)
