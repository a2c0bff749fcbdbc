"""widen usage_records.period_key

Revision ID: 5e2d8b3c6f14
Revises: a1c4e7f2b9d0
Create Date: 2026-10-19 11:00:00

Period keys are caller-supplied; only the default is YYYY-MM.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '5e2d8b3c6f14'
down_revision = 'a1c4e7f2b9d0'
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Drop the length limit on period_key."""
    op.alter_column(
        'usage_records',
        'period_key',
        existing_type=sa.String(length=7),
        type_=sa.String(),
        existing_nullable=False,
        comment='Accounting period, YYYY-MM by default',
        existing_comment='Accounting period, YYYY-MM',
    )


def downgrade() -> None:
    """Restore the YYYY-MM length limit. Fails if longer keys were recorded."""
    op.alter_column(
        'usage_records',
        'period_key',
        existing_type=sa.String(),
        type_=sa.String(length=7),
        existing_nullable=False,
        comment='Accounting period, YYYY-MM',
        existing_comment='Accounting period, YYYY-MM by default',
    )
