"""
Database module initialization.
Exports database components for use throughout the application.
"""

from database.base import Base, engine, SessionLocal, build_engine
from database.dependencies import get_db
from database.utils import (
    check_db_connection,
    get_db_info,
)

__all__ = [
    # Base components
    "Base",
    "engine",
    "SessionLocal",
    "build_engine",
    # FastAPI dependencies
    "get_db",
    # Utilities
    "check_db_connection",
    "get_db_info",
]
