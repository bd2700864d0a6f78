"""Adds faucet_claim

Revision ID: 000000000001
Revises:
Create Date: 2024-12-09 10:12:41.301842

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '000000000001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'faucet_claim',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('address', sa.String(length=42), nullable=False),
        sa.Column('asset', sa.String(length=42), nullable=False),
        sa.Column('network', sa.String(length=64), nullable=False),
        sa.Column('amount', sa.String(length=78), nullable=False),
        sa.Column('contract_address', sa.String(length=42), nullable=False),
        sa.Column('state', sa.String(length=16), nullable=False),
        sa.Column('transaction_hash', sa.String(length=128), nullable=True),
        sa.Column('reserved_at', sa.DateTime(), nullable=False),
        sa.Column('committed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('address', 'asset', 'network', name='uq_faucet_claim_address_asset_network'),
    )
    op.create_index('ix_faucet_claim_state_reserved_at', 'faucet_claim', ['state', 'reserved_at'], unique=False)
    op.create_index('ix_faucet_claim_state_committed_at', 'faucet_claim', ['state', 'committed_at'], unique=False)


def downgrade():
    op.drop_index('ix_faucet_claim_state_committed_at', table_name='faucet_claim')
    op.drop_index('ix_faucet_claim_state_reserved_at', table_name='faucet_claim')
    op.drop_table('faucet_claim')
