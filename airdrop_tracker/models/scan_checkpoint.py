"""
Scan Checkpoint model.

Tracks scanning progress for each watched entity.
"""

from datetime import UTC, datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from airdrop_tracker.models.base import Base
from airdrop_tracker.models.types import AddressType


class ScanCheckpoint(Base):
    """
    Tracks scan state of one watched entity.

    Used to:
    - Resume scanning after restart
    - Report progress to the status endpoints
    - Record the last chain error seen for the entity
    """

    __tablename__ = "scan_checkpoints"

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Entity identification
    entity_address: Mapped[str] = mapped_column(
        AddressType, nullable=False, unique=True, index=True
    )
    entity_kind: Mapped[str] = mapped_column(String(32), nullable=False)

    # Inclusive; never decreases
    last_block_scanned: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0
    )

    # Statistics
    total_transactions: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )

    is_scanning: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    # Error tracking
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    error_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )

    # Timestamps
    last_update: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ScanCheckpoint(entity={self.entity_address}, "
            f"last_block={self.last_block_scanned}, "
            f"txs={self.total_transactions})>"
        )
