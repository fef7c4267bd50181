"""
JSON serializers for wallet responses.

Phase-1 amounts are emitted as raw smallest-unit strings, phase-2
amounts as decimal strings already scaled to whole tokens.
"""

from typing import Any

from airdrop_tracker.config.constants import EXPLORER_URL
from airdrop_tracker.models.airdrop_wallet import AirdropWallet
from airdrop_tracker.utils.amounts import format_tokens
from airdrop_tracker.utils.datetime_utils import isoformat_or_none


def explorer_address_url(address: str) -> str:
    return f"{EXPLORER_URL}/address/{address}"


def serialize_wallet(wallet: AirdropWallet) -> dict[str, Any]:
    """Wallet aggregate as JSON."""
    return {
        "address": wallet.address,
        "phase1_amount": wallet.phase1_amount,
        "phase2_amount": format_tokens(wallet.phase2_amount),
        "total_w0g_received": wallet.total_token_received,
        "total_0g_received": format_tokens(wallet.total_native_received),
        "total_amount": format(wallet.total_tokens, "f"),
        "transaction_count": wallet.transaction_count,
        "first_transaction": isoformat_or_none(wallet.first_transaction_at),
        "last_transaction": isoformat_or_none(wallet.last_transaction_at),
        "is_suspicious": wallet.is_suspicious,
        "suspicious_reason": wallet.suspicious_reason,
        "created_at": isoformat_or_none(wallet.created_at),
        "updated_at": isoformat_or_none(wallet.updated_at),
    }
