"""
JSON shapes of ledger records shared by the API and push frames.

Phase-1 totals stay raw smallest-unit strings, phase-2 totals are
scaled to whole tokens.
"""

from typing import Any

from airdrop_tracker.models.airdrop_transaction import AirdropTransaction
from airdrop_tracker.utils.amounts import format_tokens
from airdrop_tracker.utils.datetime_utils import isoformat_or_none

from .models import AggregateStats


def serialize_transaction(tx: AirdropTransaction) -> dict[str, Any]:
    """Transaction record as JSON."""
    return {
        "id": tx.id,
        "tx_hash": tx.tx_hash,
        "log_index": tx.log_index,
        "block_number": tx.block_number,
        "from_address": tx.from_address,
        "to_address": tx.to_address,
        "value": tx.value,
        "token_amount": tx.token_amount,
        "token_type": tx.token_type,
        "phase": tx.phase,
        "status": tx.status,
        "timestamp": isoformat_or_none(tx.block_timestamp),
        "gas_used": tx.gas_used,
        "created_at": isoformat_or_none(tx.created_at),
    }


def serialize_stats(stats: AggregateStats) -> dict[str, Any]:
    """Aggregate statistics as JSON."""
    return {
        "total_wallets": stats.total_wallets,
        "phase1_wallets": stats.phase1_wallets,
        "phase2_wallets": stats.phase2_wallets,
        "total_w0g_distributed": str(stats.total_w0g_distributed),
        "total_0g_distributed": format_tokens(stats.total_0g_distributed),
        "overlapping_wallets": stats.overlapping_wallets,
        "last_block_scanned": stats.last_block_scanned,
        "last_update": isoformat_or_none(stats.last_update),
    }
