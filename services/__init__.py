"""
Services module for persistence and execution business logic.
"""

from services import execution_store, pipeline_store, user_store

__all__ = ["execution_store", "pipeline_store", "user_store"]
