"""
FastAPI dependency injection for database sessions.
Provides database session dependencies for API endpoints.
"""

from typing import Generator

import logfire
from sqlalchemy.orm import Session

from database.base import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a database session.

    Usage:
        @router.get("/pipelines")
        def list_pipelines(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: SQLAlchemy database session

    Ensures:
        - Session is automatically closed after the request
        - Connection is returned to the pool
    """
    db = SessionLocal()
    logfire.debug("Database session opened")
    try:
        yield db
    finally:
        db.close()
        logfire.debug("Database session closed")
