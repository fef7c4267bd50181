"""
Airdrop Transaction model.

One row per on-chain distribution event consumed by the scanner.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from airdrop_tracker.models.base import Base
from airdrop_tracker.models.types import AddressType, RawAmountType, TxHashType


class AirdropTransaction(Base):
    """
    Recorded distribution event.

    Keyed by (tx_hash, log_index) so a transaction emitting several
    qualifying logs keeps each of them. Native transfers carry
    log_index -1. Rows are never updated after insertion.
    """

    __tablename__ = "airdrop_transactions"
    __table_args__ = (
        UniqueConstraint("tx_hash", "log_index", name="uq_airdrop_tx_hash_log"),
        CheckConstraint("phase IN (1, 2)", name="ck_airdrop_tx_phase"),
        CheckConstraint("token_type IN ('W0G', '0G')", name="ck_airdrop_tx_token"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Transaction identification
    tx_hash: Mapped[str] = mapped_column(TxHashType, nullable=False, index=True)
    log_index: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)
    block_number: Mapped[int] = mapped_column(
        BigInteger, nullable=False, index=True
    )
    block_timestamp: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    # Addresses (normalized to lowercase)
    from_address: Mapped[str] = mapped_column(
        AddressType, nullable=False, index=True
    )
    to_address: Mapped[str] = mapped_column(
        AddressType, nullable=False, index=True
    )

    # Amounts in smallest unit
    value: Mapped[str] = mapped_column(RawAmountType, nullable=False, default="0")
    token_amount: Mapped[str] = mapped_column(RawAmountType, nullable=False)

    token_type: Mapped[str] = mapped_column(
        String(8), nullable=False, index=True
    )  # W0G, 0G
    phase: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="success"
    )
    gas_used: Mapped[str | None] = mapped_column(String(40), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<AirdropTransaction(tx_hash={self.tx_hash[:16]}..., "
            f"phase={self.phase}, token={self.token_type}, "
            f"amount={self.token_amount})>"
        )
