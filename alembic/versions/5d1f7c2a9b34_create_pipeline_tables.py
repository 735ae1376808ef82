"""create_pipeline_tables

Creates users, pipelines, pipeline_steps, pipeline_executions and
pipeline_execution_outputs. Child rows cascade from their parents.

Revision ID: 5d1f7c2a9b34
Revises:
Create Date: 2026-10-19 10:12:41.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5d1f7c2a9b34'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False, comment='Unique user ID'),
        sa.Column('email', sa.String(length=255), nullable=False, comment='User email address'),
        sa.Column('name', sa.String(length=255), nullable=True, comment='Display name'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='users_email_key'),
    )

    op.create_table(
        'pipelines',
        sa.Column('id', sa.Uuid(), nullable=False, comment='Unique pipeline ID'),
        sa.Column('name', sa.String(length=255), nullable=False, comment='Pipeline name'),
        sa.Column('description', sa.Text(), nullable=True, comment='Optional pipeline description'),
        sa.Column('user_id', sa.Uuid(), nullable=False, comment='User who owns this pipeline'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_pipelines_user_created', 'pipelines', ['user_id', 'created_at'])

    op.create_table(
        'pipeline_steps',
        sa.Column('id', sa.Uuid(), nullable=False, comment='Unique step ID'),
        sa.Column('pipeline_id', sa.Uuid(), nullable=False, comment='Pipeline this step belongs to'),
        sa.Column('type', sa.String(length=20), nullable=False, comment='Step type: summarize, translate, rewrite, extract'),
        sa.Column('config', JSON_TYPE, nullable=False, comment='Step configuration as JSON'),
        sa.Column('order', sa.Integer(), nullable=False, comment='Execution order (ascending)'),
        sa.Column('position', sa.Integer(), nullable=False, comment='Ingestion index used to break order ties'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['pipeline_id'], ['pipelines.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_pipeline_steps_pipeline_order', 'pipeline_steps', ['pipeline_id', 'order', 'position'])

    op.create_table(
        'pipeline_executions',
        sa.Column('id', sa.Uuid(), nullable=False, comment='Unique execution ID'),
        sa.Column('pipeline_id', sa.Uuid(), nullable=False, comment='Pipeline that was executed'),
        sa.Column('user_id', sa.Uuid(), nullable=False, comment='User who executed the pipeline'),
        sa.Column('input', sa.Text(), nullable=False, comment='Input text, verbatim'),
        sa.Column('status', sa.String(length=20), nullable=False, comment='Current status: pending, running, completed, failed'),
        sa.Column('total_processing_time', sa.Integer(), nullable=True, comment='Total run time in milliseconds'),
        sa.Column('error', sa.Text(), nullable=True, comment='Error details if status is failed'),
        sa.Column('failed_step_id', sa.String(length=64), nullable=True, comment='Step that failed, if any'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['pipeline_id'], ['pipelines.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_pipeline_executions_user_created', 'pipeline_executions', ['user_id', 'created_at'])
    op.create_index('ix_pipeline_executions_pipeline', 'pipeline_executions', ['pipeline_id'])
    op.create_index('ix_pipeline_executions_status', 'pipeline_executions', ['status'])

    op.create_table(
        'pipeline_execution_outputs',
        sa.Column('id', sa.Uuid(), nullable=False, comment='Unique output ID'),
        sa.Column('execution_id', sa.Uuid(), nullable=False, comment='Execution this output belongs to'),
        sa.Column('step_id', sa.String(length=64), nullable=False, comment='Step definition that produced this output'),
        sa.Column('output', sa.Text(), nullable=False, comment='Step output text'),
        sa.Column('processing_time', sa.Integer(), nullable=False, comment='Step run time in milliseconds'),
        sa.Column('position', sa.Integer(), nullable=False, comment='Order in which the output was produced'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['execution_id'], ['pipeline_executions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_pipeline_execution_outputs_execution',
        'pipeline_execution_outputs',
        ['execution_id', 'position'],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_pipeline_execution_outputs_execution', table_name='pipeline_execution_outputs')
    op.drop_table('pipeline_execution_outputs')

    op.drop_index('ix_pipeline_executions_status', table_name='pipeline_executions')
    op.drop_index('ix_pipeline_executions_pipeline', table_name='pipeline_executions')
    op.drop_index('ix_pipeline_executions_user_created', table_name='pipeline_executions')
    op.drop_table('pipeline_executions')

    op.drop_index('ix_pipeline_steps_pipeline_order', table_name='pipeline_steps')
    op.drop_table('pipeline_steps')

    op.drop_index('ix_pipelines_user_created', table_name='pipelines')
    op.drop_table('pipelines')

    op.drop_table('users')
