"""Create verification ledger and used nonce tables

Revision ID: 3b7e1c2d9a41
Revises:
Create Date: 2026-01-12 09:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b7e1c2d9a41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create tables, constraints and indexes."""

    # =================================================================
    # TABLE: verification_records
    # =================================================================
    op.create_table(
        'verification_records',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('wallet_address', sa.String(length=44), nullable=False),
        sa.Column('invite_link', sa.String(length=255), nullable=False),
        sa.Column('issued_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('consumed', sa.Boolean(), nullable=False),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('telegram_user_id', sa.BigInteger(), nullable=True),
        sa.Column('telegram_username', sa.String(length=64), nullable=True),
        sa.Column('telegram_display_name', sa.String(length=128), nullable=True),
        sa.Column('linked_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "(telegram_user_id IS NULL AND telegram_display_name IS NULL"
            " AND linked_at IS NULL)"
            " OR (telegram_user_id IS NOT NULL"
            " AND telegram_display_name IS NOT NULL AND linked_at IS NOT NULL)",
            name='member_identity_all_or_none'
        ),
        sa.CheckConstraint(
            'expires_at > issued_at',
            name='expires_after_issued'
        )
    )
    op.create_index(
        op.f('ix_verification_records_wallet_address'),
        'verification_records',
        ['wallet_address'],
        unique=True
    )
    op.create_index(
        op.f('ix_verification_records_issued_at'),
        'verification_records',
        ['issued_at'],
        unique=False
    )
    op.create_index(
        op.f('ix_verification_records_expires_at'),
        'verification_records',
        ['expires_at'],
        unique=False
    )
    op.create_index(
        op.f('ix_verification_records_telegram_user_id'),
        'verification_records',
        ['telegram_user_id'],
        unique=False
    )

    # =================================================================
    # TABLE: used_nonces
    # =================================================================
    op.create_table(
        'used_nonces',
        sa.Column('nonce', sa.String(length=192), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('nonce')
    )
    op.create_index(
        op.f('ix_used_nonces_expires_at'),
        'used_nonces',
        ['expires_at'],
        unique=False
    )


def downgrade() -> None:
    """Drop all tables (indexes go with them)."""
    op.drop_table('used_nonces')
    op.drop_table('verification_records')
