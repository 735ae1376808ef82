"""Owner records for pipelines and executions."""

from typing import Optional
from uuid import UUID

import logfire
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models.user import User
from pipeline.core.exceptions import NotFoundError, PersistenceError, ValidationError


def create_user(db: Session, user_id: UUID, email: str, name: Optional[str] = None) -> User:
    """
    Create a user record.

    Idempotent - returns the existing user if the id is already registered.

    Raises:
        ValidationError: If email is blank
        PersistenceError: If the email belongs to a different user
    """
    if not (email or "").strip():
        raise ValidationError("Email is required", field="email")

    existing = db.get(User, user_id)
    if existing:
        logfire.info("Returning existing user", user_id=str(user_id))
        return existing

    user = User(id=user_id, email=email.strip(), name=name)
    try:
        db.add(user)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # A concurrent request may have created the same user
        existing = db.get(User, user_id)
        if existing:
            return existing
        raise PersistenceError("A user with this email already exists.", detail=str(e)) from e
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Failed to create user: {str(e)}", detail=str(e)) from e

    logfire.info("User created", user_id=str(user_id))
    return user


def get_user(db: Session, user_id: UUID) -> User:
    """
    Raises:
        NotFoundError: If no user has this id
    """
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
