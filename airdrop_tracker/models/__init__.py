"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from airdrop_tracker.models.airdrop_transaction import AirdropTransaction
from airdrop_tracker.models.airdrop_wallet import AirdropWallet
from airdrop_tracker.models.base import Base
from airdrop_tracker.models.enums import (
    EntityKind,
    Phase,
    TokenKind,
    TransactionStatus,
)
from airdrop_tracker.models.scan_checkpoint import ScanCheckpoint

__all__ = [
    # Base
    "Base",
    # Enums
    "EntityKind",
    "Phase",
    "TokenKind",
    "TransactionStatus",
    # Models
    "AirdropTransaction",
    "AirdropWallet",
    "ScanCheckpoint",
]
