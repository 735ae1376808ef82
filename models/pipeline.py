"""
Pipeline and PipelineStep models for SQLAlchemy ORM.
Represent the pipelines and pipeline_steps tables in the database.
"""

from uuid import uuid4

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database.base import Base
from models.types import JSONType, UUIDType, utcnow


class Pipeline(Base):
    """
    Named, ordered list of text-transformation steps owned by a user.

    Attributes:
        id (UUID): Primary key, auto-generated
        name (str): Pipeline name (not unique)
        description (str): Optional description
        user_id (UUID): Foreign key to users table
        created_at / updated_at (datetime): Timestamps

    Relationships:
        user: Many-to-one relationship with User model
        steps: Ordered steps, replaced as a whole on update
        executions: Runs of this pipeline, deleted with it
    """

    __tablename__ = "pipelines"

    id = Column(
        UUIDType,
        primary_key=True,
        default=uuid4,
        nullable=False,
        comment="Unique pipeline ID"
    )

    name = Column(
        String(255),
        nullable=False,
        comment="Pipeline name"
    )

    description = Column(
        Text,
        nullable=True,
        comment="Optional pipeline description"
    )

    user_id = Column(
        UUIDType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="User who owns this pipeline"
    )

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        comment="When the pipeline was created"
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        comment="When the pipeline was last updated"
    )

    user = relationship("User", back_populates="pipelines")

    steps = relationship(
        "PipelineStep",
        back_populates="pipeline",
        order_by="(PipelineStep.order, PipelineStep.position)",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    executions = relationship(
        "PipelineExecution",
        back_populates="pipeline",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index('ix_pipelines_user_created', 'user_id', 'created_at'),
    )

    def __repr__(self) -> str:
        """String representation of Pipeline model."""
        return f"<Pipeline(id={self.id}, user_id={self.user_id}, name='{self.name}')>"


class PipelineStep(Base):
    """
    One typed text transformation inside a pipeline.

    Attributes:
        id (UUID): Primary key, auto-generated
        pipeline_id (UUID): Foreign key to pipelines table
        type (str): summarize, translate, rewrite or extract
        config (dict): Type-specific configuration (camelCase keys)
        order (int): Execution position; not unique
        position (int): Ingestion index within the step set, breaks order ties
    """

    __tablename__ = "pipeline_steps"

    id = Column(
        UUIDType,
        primary_key=True,
        default=uuid4,
        nullable=False,
        comment="Unique step ID"
    )

    pipeline_id = Column(
        UUIDType,
        ForeignKey("pipelines.id", ondelete="CASCADE"),
        nullable=False,
        comment="Pipeline this step belongs to"
    )

    type = Column(
        String(20),
        nullable=False,
        comment="Step type: summarize, translate, rewrite, extract"
    )

    config = Column(
        JSONType,
        nullable=False,
        default=dict,
        comment="Step configuration as JSON"
    )

    order = Column(
        Integer,
        nullable=False,
        comment="Execution order (ascending)"
    )

    position = Column(
        Integer,
        nullable=False,
        default=0,
        comment="Ingestion index used to break order ties"
    )

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        comment="When the step was created"
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        comment="When the step was last updated"
    )

    pipeline = relationship("Pipeline", back_populates="steps")

    __table_args__ = (
        Index('ix_pipeline_steps_pipeline_order', 'pipeline_id', 'order', 'position'),
    )

    def __repr__(self) -> str:
        """String representation of PipelineStep model."""
        return f"<PipelineStep(id={self.id}, type='{self.type}', order={self.order})>"
