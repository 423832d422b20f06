"""key-value entries table

Revision ID: 0001_kv_entries
Revises:
Create Date: 2026-10-18
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

revision = '0001_kv_entries'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    if 'kv_entries' in inspect(bind).get_table_names():
        # created earlier by SqlStore(create_tables=True)
        return
    op.create_table('kv_entries',
        sa.Column('key', sa.String(length=128), primary_key=True),
        sa.Column('value', sa.JSON(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True)
    )


def downgrade():
    op.drop_table('kv_entries')
