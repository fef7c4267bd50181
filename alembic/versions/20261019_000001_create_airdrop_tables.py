"""Create airdrop tracker tables

Revision ID: 20261019_000001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CLAIM_CONTRACT_ADDRESS = '0x6a9c6b5507e322aa00eb9c45e80c07ab63acabb6'
DISTRIBUTION_WALLET_ADDRESS = '0xb03e8e11730228c2d03270bcd1ab57818d7b6d8c'


def upgrade() -> None:
    # Transaction records, one per (tx_hash, log_index)
    op.create_table(
        'airdrop_transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tx_hash', sa.String(66), nullable=False),
        sa.Column('log_index', sa.Integer(), nullable=False, server_default='-1'),
        sa.Column('block_number', sa.BigInteger(), nullable=False),
        sa.Column('block_timestamp', sa.DateTime(timezone=True), nullable=True),
        sa.Column('from_address', sa.String(42), nullable=False),
        sa.Column('to_address', sa.String(42), nullable=False),
        sa.Column('value', sa.String(80), nullable=False, server_default='0'),
        sa.Column('token_amount', sa.String(80), nullable=False),
        sa.Column('token_type', sa.String(8), nullable=False),
        sa.Column('phase', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='success'),
        sa.Column('gas_used', sa.String(40), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tx_hash', 'log_index', name='uq_airdrop_tx_hash_log'),
        sa.CheckConstraint('phase IN (1, 2)', name='ck_airdrop_tx_phase'),
        sa.CheckConstraint("token_type IN ('W0G', '0G')", name='ck_airdrop_tx_token'),
    )
    op.create_index('ix_airdrop_transactions_tx_hash', 'airdrop_transactions', ['tx_hash'])
    op.create_index('ix_airdrop_transactions_block_number', 'airdrop_transactions', ['block_number'])
    op.create_index('ix_airdrop_transactions_block_timestamp', 'airdrop_transactions', ['block_timestamp'])
    op.create_index('ix_airdrop_transactions_from_address', 'airdrop_transactions', ['from_address'])
    op.create_index('ix_airdrop_transactions_to_address', 'airdrop_transactions', ['to_address'])
    op.create_index('ix_airdrop_transactions_token_type', 'airdrop_transactions', ['token_type'])
    op.create_index('ix_airdrop_transactions_phase', 'airdrop_transactions', ['phase'])

    # Wallet aggregates
    op.create_table(
        'airdrop_wallets',
        sa.Column('address', sa.String(42), nullable=False),
        sa.Column('total_native_received', sa.String(80), nullable=False, server_default='0'),
        sa.Column('total_token_received', sa.String(80), nullable=False, server_default='0'),
        sa.Column('phase1_amount', sa.String(80), nullable=False, server_default='0'),
        sa.Column('phase2_amount', sa.String(80), nullable=False, server_default='0'),
        sa.Column('transaction_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('first_transaction_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_transaction_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_suspicious', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('suspicious_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('address')
    )
    op.create_index('ix_airdrop_wallets_phase1_amount', 'airdrop_wallets', ['phase1_amount'])
    op.create_index('ix_airdrop_wallets_phase2_amount', 'airdrop_wallets', ['phase2_amount'])
    op.create_index('ix_airdrop_wallets_is_suspicious', 'airdrop_wallets', ['is_suspicious'])

    # Scan checkpoints, one per watched entity
    checkpoints = op.create_table(
        'scan_checkpoints',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('entity_address', sa.String(42), nullable=False),
        sa.Column('entity_kind', sa.String(32), nullable=False),
        sa.Column('last_block_scanned', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('total_transactions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_scanning', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_error', sa.Text(), nullable=True),
        sa.Column('error_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_update', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_scan_checkpoints_entity_address', 'scan_checkpoints', ['entity_address'], unique=True)

    op.bulk_insert(
        checkpoints,
        [
            {'entity_address': CLAIM_CONTRACT_ADDRESS, 'entity_kind': 'claim_contract'},
            {'entity_address': DISTRIBUTION_WALLET_ADDRESS, 'entity_kind': 'distribution_wallet'},
        ],
    )


def downgrade() -> None:
    op.drop_index('ix_scan_checkpoints_entity_address', 'scan_checkpoints')
    op.drop_table('scan_checkpoints')

    op.drop_index('ix_airdrop_wallets_is_suspicious', 'airdrop_wallets')
    op.drop_index('ix_airdrop_wallets_phase2_amount', 'airdrop_wallets')
    op.drop_index('ix_airdrop_wallets_phase1_amount', 'airdrop_wallets')
    op.drop_table('airdrop_wallets')

    op.drop_index('ix_airdrop_transactions_phase', 'airdrop_transactions')
    op.drop_index('ix_airdrop_transactions_token_type', 'airdrop_transactions')
    op.drop_index('ix_airdrop_transactions_to_address', 'airdrop_transactions')
    op.drop_index('ix_airdrop_transactions_from_address', 'airdrop_transactions')
    op.drop_index('ix_airdrop_transactions_block_timestamp', 'airdrop_transactions')
    op.drop_index('ix_airdrop_transactions_block_number', 'airdrop_transactions')
    op.drop_index('ix_airdrop_transactions_tx_hash', 'airdrop_transactions')
    op.drop_table('airdrop_transactions')
