"""
Ledger value types.
"""

from dataclasses import dataclass
from datetime import datetime

from airdrop_tracker.config.constants import NATIVE_TRANSFER_LOG_INDEX
from airdrop_tracker.models.enums import Phase, TokenKind, TransactionStatus
from airdrop_tracker.utils.amounts import format_tokens
from airdrop_tracker.utils.datetime_utils import isoformat_or_none


@dataclass(frozen=True)
class DistributionEvent:
    """
    One decoded distribution event.

    recipient is the wallet credited: the transaction sender for
    claims and the transaction recipient for wallet transfers.
    Amounts are integers in the smallest unit.
    """

    tx_hash: str
    block_number: int
    from_address: str
    to_address: str
    recipient: str
    token_amount: int
    token_type: TokenKind
    phase: Phase
    log_index: int = NATIVE_TRANSFER_LOG_INDEX
    value: int = 0
    block_timestamp: datetime | None = None
    gas_used: int | None = None
    status: TransactionStatus = TransactionStatus.SUCCESS

    @property
    def key(self) -> tuple[str, int]:
        """Deduplication key."""
        return self.tx_hash, self.log_index

    @property
    def notification_name(self) -> str:
        return "new-claim" if self.phase == Phase.CLAIM else "new-transfer"

    def to_payload(self) -> dict:
        """Notification payload with a human-scaled amount."""
        return {
            "type": self.token_type.value,
            "txHash": self.tx_hash,
            "recipient": self.recipient,
            "amount": format_tokens(self.token_amount),
            "block": self.block_number,
            "timestamp": isoformat_or_none(self.block_timestamp),
        }

    def to_record(self) -> dict:
        """Column values of the transaction record."""
        return {
            "tx_hash": self.tx_hash.lower(),
            "log_index": self.log_index,
            "block_number": self.block_number,
            "block_timestamp": self.block_timestamp,
            "from_address": self.from_address.lower(),
            "to_address": self.to_address.lower(),
            "value": str(self.value),
            "token_amount": str(self.token_amount),
            "token_type": self.token_type.value,
            "phase": int(self.phase),
            "status": self.status.value,
            "gas_used": str(self.gas_used) if self.gas_used is not None else None,
        }


@dataclass
class AggregateStats:
    """Global distribution statistics. Totals are smallest-unit integers."""

    total_wallets: int = 0
    phase1_wallets: int = 0
    phase2_wallets: int = 0
    overlapping_wallets: int = 0
    total_w0g_distributed: int = 0
    total_0g_distributed: int = 0
    last_block_scanned: int = 0
    last_update: datetime | None = None
