"""
Models module initialization.
Imports all SQLAlchemy models for Alembic autodiscovery.
"""

from models.user import User
from models.pipeline import Pipeline, PipelineStep
from models.execution import PipelineExecution, PipelineExecutionOutput

__all__ = [
    "User",
    "Pipeline",
    "PipelineStep",
    "PipelineExecution",
    "PipelineExecutionOutput",
]
