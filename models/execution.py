"""
Execution models for SQLAlchemy ORM.
Represent the pipeline_executions and pipeline_execution_outputs tables.
"""

from uuid import uuid4

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database.base import Base
from models.types import UUIDType, utcnow
from pipeline.models.core import ExecutionStatus, can_transition


class PipelineExecution(Base):
    """
    One run of a pipeline against a specific input.

    Created in `running` before any step executes and finalized exactly
    once as `completed` or `failed`.

    Attributes:
        id (UUID): Primary key, auto-generated
        pipeline_id (UUID): Foreign key to pipelines table
        user_id (UUID): Foreign key to users table (executing user)
        input (str): Input text, verbatim
        status (str): pending, running, completed, failed
        total_processing_time (int): Milliseconds, set at finalization
        error (str): Failure message, null on success
        failed_step_id (UUID): Step that stopped the chain, null on success
    """

    __tablename__ = "pipeline_executions"

    id = Column(
        UUIDType,
        primary_key=True,
        default=uuid4,
        nullable=False,
        comment="Unique execution ID"
    )

    pipeline_id = Column(
        UUIDType,
        ForeignKey("pipelines.id", ondelete="CASCADE"),
        nullable=False,
        comment="Pipeline that was executed"
    )

    user_id = Column(
        UUIDType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="User who executed the pipeline"
    )

    input = Column(
        Text,
        nullable=False,
        comment="Input text, verbatim"
    )

    status = Column(
        String(20),
        nullable=False,
        default=ExecutionStatus.PENDING.value,
        comment="Current status: pending, running, completed, failed"
    )

    total_processing_time = Column(
        Integer,
        nullable=True,
        comment="Total run time in milliseconds"
    )

    error = Column(
        Text,
        nullable=True,
        comment="Error details if status is failed"
    )

    failed_step_id = Column(
        String(64),
        nullable=True,
        comment="Step that failed, if any"
    )

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        comment="When the execution was created"
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        comment="When the execution was last updated"
    )

    pipeline = relationship("Pipeline", back_populates="executions")
    user = relationship("User", back_populates="executions")

    outputs = relationship(
        "PipelineExecutionOutput",
        back_populates="execution",
        order_by="PipelineExecutionOutput.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index('ix_pipeline_executions_user_created', 'user_id', 'created_at'),
        Index('ix_pipeline_executions_pipeline', 'pipeline_id'),
        Index('ix_pipeline_executions_status', 'status'),
    )

    def transition_to(self, target: ExecutionStatus) -> None:
        """
        Move to a new status.

        Raises:
            ValueError: If the transition would go backwards or leave a terminal state
        """
        current = ExecutionStatus(self.status or ExecutionStatus.PENDING.value)
        if not can_transition(current, target):
            raise ValueError(f"Invalid execution status transition: {current.value} -> {target.value}")
        self.status = target.value

    def __repr__(self) -> str:
        """String representation of PipelineExecution model."""
        return (
            f"<PipelineExecution(id={self.id}, pipeline_id={self.pipeline_id}, "
            f"status='{self.status}')>"
        )


class PipelineExecutionOutput(Base):
    """
    Output of one completed step within an execution. Append-only.

    step_id is deliberately not a foreign key: step sets are replaced on
    pipeline update, and execution history must survive that.
    """

    __tablename__ = "pipeline_execution_outputs"

    id = Column(
        UUIDType,
        primary_key=True,
        default=uuid4,
        nullable=False,
        comment="Unique output ID"
    )

    execution_id = Column(
        UUIDType,
        ForeignKey("pipeline_executions.id", ondelete="CASCADE"),
        nullable=False,
        comment="Execution this output belongs to"
    )

    step_id = Column(
        String(64),
        nullable=False,
        comment="Step definition that produced this output"
    )

    output = Column(
        Text,
        nullable=False,
        comment="Step output text"
    )

    processing_time = Column(
        Integer,
        nullable=False,
        comment="Step run time in milliseconds"
    )

    position = Column(
        Integer,
        nullable=False,
        default=0,
        comment="Order in which the output was produced"
    )

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        comment="When the output was recorded"
    )

    execution = relationship("PipelineExecution", back_populates="outputs")

    __table_args__ = (
        Index('ix_pipeline_execution_outputs_execution', 'execution_id', 'position'),
    )

    def __repr__(self) -> str:
        """String representation of PipelineExecutionOutput model."""
        return (
            f"<PipelineExecutionOutput(execution_id={self.execution_id}, "
            f"step_id='{self.step_id}', processing_time={self.processing_time})>"
        )
