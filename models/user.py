"""
User model for SQLAlchemy ORM.
Represents the users table in the database.
"""

from uuid import uuid4

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database.base import Base
from models.types import UUIDType, utcnow


class User(Base):
    """
    Owner of pipelines and executions.

    Attributes:
        id (UUID): Primary key (supplied by the identity provider)
        email (str): Unique email address
        name (str): Optional display name
        created_at (datetime): When the user record was created

    Relationships:
        pipelines: One-to-many, deleted with the user
        executions: One-to-many, deleted with the user
    """

    __tablename__ = "users"

    id = Column(
        UUIDType,
        primary_key=True,
        default=uuid4,
        nullable=False,
        comment="Unique user ID"
    )

    email = Column(
        String(255),
        nullable=False,
        unique=True,
        comment="User email address"
    )

    name = Column(
        String(255),
        nullable=True,
        comment="Display name"
    )

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        comment="When the user was created"
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        comment="When the user was last updated"
    )

    pipelines = relationship(
        "Pipeline",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    executions = relationship(
        "PipelineExecution",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """String representation of User model."""
        return f"<User(id={self.id}, email='{self.email}')>"
