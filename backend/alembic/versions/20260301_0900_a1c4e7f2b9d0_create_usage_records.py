"""create usage_records table

Revision ID: a1c4e7f2b9d0
Revises:
Create Date: 2026-03-01 09:00:00

One row of capability counters per (user_id, period_key). The unique
constraint is the conflict target of the ledger's upsert-increment.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = 'a1c4e7f2b9d0'
down_revision = None
branch_labels = None
depends_on = None

COUNTERS = (
    'content_generated',
    'sentiment_analysis_used',
    'keyword_extraction_used',
    'text_summarization_used',
    'api_calls',
)


def upgrade() -> None:
    """Create usage_records table."""
    op.create_table(
        'usage_records',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('period_key', sa.String(length=7), nullable=False, comment='Accounting period, YYYY-MM'),
        *[
            sa.Column(counter, sa.Integer(), server_default='0', nullable=False)
            for counter in COUNTERS
        ],
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'period_key', name='uq_usage_records_user_period'),
        sa.CheckConstraint(
            ' AND '.join(f'{counter} >= 0' for counter in COUNTERS),
            name='ck_usage_records_non_negative',
        ),
    )

    op.create_index('ix_usage_records_id', 'usage_records', ['id'])
    op.create_index('ix_usage_records_user_id', 'usage_records', ['user_id'])
    op.create_index('ix_usage_records_period_key', 'usage_records', ['period_key'])
    op.create_index('ix_usage_records_created_at', 'usage_records', ['created_at'])


def downgrade() -> None:
    """Drop usage_records table."""
    op.drop_index('ix_usage_records_created_at', table_name='usage_records')
    op.drop_index('ix_usage_records_period_key', table_name='usage_records')
    op.drop_index('ix_usage_records_user_id', table_name='usage_records')
    op.drop_index('ix_usage_records_id', table_name='usage_records')
    op.drop_table('usage_records')
