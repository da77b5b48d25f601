"""Create tokens and meme_drop_entries tables

Revision ID: 20261018_000001
Revises: 
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261018_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Token pages, resolved by lower(token_name)
    op.create_table(
        'tokens',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('token_name', sa.Text(), nullable=False),
        sa.Column('token_address', sa.Text(), nullable=False),
        sa.Column('chain', sa.String(32), nullable=False),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('theme', sa.String(32), nullable=False, server_default='dark'),
        sa.Column('button_style', sa.String(32), nullable=False, server_default='rounded'),
        sa.Column('font_style', sa.String(32), nullable=False, server_default='sans'),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('creation_key', sa.String(128), nullable=True, comment='Idempotency key'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('creation_key', name='uq_tokens_creation_key'),
        sa.CheckConstraint('view_count >= 0', name='ck_tokens_view_count_non_negative'),
    )
    op.create_index(
        'ix_tokens_name_lower_chain_created',
        'tokens',
        [sa.text('lower(token_name)'), 'chain', 'created_at'],
    )

    # MemeDrop weekly drawing entries
    op.create_table(
        'meme_drop_entries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('wallet_address', sa.Text(), nullable=False),
        sa.Column('token_name', sa.Text(), nullable=False),
        sa.Column('chain', sa.String(32), nullable=False),
        sa.Column('twitter', sa.Text(), nullable=True),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_meme_drop_entries_created_at', 'meme_drop_entries', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_meme_drop_entries_created_at', 'meme_drop_entries')
    op.drop_table('meme_drop_entries')

    op.drop_index('ix_tokens_name_lower_chain_created', 'tokens')
    op.drop_table('tokens')
