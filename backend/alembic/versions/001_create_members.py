"""Create members table with durable login session columns.

Revision ID: 001_create_members
Revises:
Create Date: 2026-10-17

session_token / session_expiry hold the persistent-login session; both NULL
for members without one.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_create_members'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'members',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('password_hash', sa.String(128), nullable=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('phone_number', sa.String(32), nullable=False),
        sa.Column('is_worker', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('session_token', sa.String(128), nullable=True),
        sa.Column('session_expiry', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_members_session_token', 'members', ['session_token'])


def downgrade() -> None:
    op.drop_index('ix_members_session_token', table_name='members')
    op.drop_table('members')
