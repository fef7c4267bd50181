"""
Airdrop Wallet model.

Running per-recipient totals across both distribution phases.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from airdrop_tracker.models.base import Base
from airdrop_tracker.models.types import AddressType, RawAmountType
from airdrop_tracker.utils.amounts import from_smallest_unit


class AirdropWallet(Base):
    """
    Wallet aggregate.

    All sums are integer strings in the smallest unit and only ever
    grow. transaction_count equals the number of transaction records
    applied to this wallet.
    """

    __tablename__ = "airdrop_wallets"

    address: Mapped[str] = mapped_column(AddressType, primary_key=True)

    # Totals per token
    total_native_received: Mapped[str] = mapped_column(
        RawAmountType, nullable=False, default="0"
    )
    total_token_received: Mapped[str] = mapped_column(
        RawAmountType, nullable=False, default="0"
    )

    # Totals per phase
    phase1_amount: Mapped[str] = mapped_column(
        RawAmountType, nullable=False, default="0", index=True
    )
    phase2_amount: Mapped[str] = mapped_column(
        RawAmountType, nullable=False, default="0", index=True
    )

    transaction_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    first_transaction_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_transaction_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Set by external analysis only
    is_suspicious: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )
    suspicious_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<AirdropWallet(address={self.address}, "
            f"phase1={self.phase1_amount}, phase2={self.phase2_amount}, "
            f"txs={self.transaction_count})>"
        )

    @property
    def phase1_tokens(self) -> Decimal:
        """Phase-1 total scaled to whole tokens."""
        return from_smallest_unit(self.phase1_amount)

    @property
    def phase2_tokens(self) -> Decimal:
        """Phase-2 total scaled to whole tokens."""
        return from_smallest_unit(self.phase2_amount)

    @property
    def total_tokens(self) -> Decimal:
        """Combined total of both phases in whole tokens."""
        return self.phase1_tokens + self.phase2_tokens

    @property
    def has_phase1(self) -> bool:
        """Check if wallet received a phase-1 claim."""
        return int(self.phase1_amount) > 0

    @property
    def has_phase2(self) -> bool:
        """Check if wallet received a phase-2 transfer."""
        return int(self.phase2_amount) > 0
