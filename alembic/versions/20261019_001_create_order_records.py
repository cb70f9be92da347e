"""Create order_records table

Revision ID: 20261019_001
Revises:
Create Date: 2026-10-19 10:00:00

One row per (kind, scope_key):
- kind: 'order' (id list) or 'layout' (widget layout document)
- content: JSONB payload
- revision: bumped on every save, checked when a client sends base_revision
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '20261019_001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create order_records."""
    op.create_table(
        'order_records',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('kind', sa.String(length=20), nullable=False),
        sa.Column('scope_key', sa.String(length=255), nullable=False),
        sa.Column('content', postgresql.JSONB(), nullable=False),
        sa.Column('revision', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('kind', 'scope_key', name='uq_order_records_kind_scope'),
    )

    op.create_index('ix_order_records_scope_key', 'order_records', ['scope_key'])


def downgrade() -> None:
    """Drop order_records."""
    op.drop_index('ix_order_records_scope_key', table_name='order_records')
    op.drop_table('order_records')
