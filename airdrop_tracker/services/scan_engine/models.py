"""
Scan Engine result types.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from airdrop_tracker.models.enums import EntityKind, TokenKind
from airdrop_tracker.utils.amounts import format_tokens
from airdrop_tracker.utils.datetime_utils import isoformat_or_none


@dataclass
class EntityScanResult:
    """Outcome of scanning one watched entity."""

    entity_address: str
    entity_kind: str
    success: bool = True
    up_to_date: bool = False
    from_block: int | None = None
    to_block: int | None = None
    last_block_reached: int | None = None
    events_found: int = 0
    total_value: int = 0
    batches_processed: int = 0
    batches_failed: int = 0
    error: str | None = None

    @property
    def token(self) -> str:
        """Symbol of the token total_value is counted in."""
        if self.entity_kind == EntityKind.CLAIM_CONTRACT.value:
            return TokenKind.W0G.value
        return TokenKind.NATIVE.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity_address,
            "kind": self.entity_kind,
            "success": self.success,
            "upToDate": self.up_to_date,
            "fromBlock": self.from_block,
            "toBlock": self.to_block,
            "lastBlock": self.last_block_reached,
            "eventsFound": self.events_found,
            "totalValue": format_tokens(self.total_value),
            "token": self.token,
            "batchesProcessed": self.batches_processed,
            "batchesFailed": self.batches_failed,
            "error": self.error,
        }


@dataclass
class ScanResult:
    """
    Outcome of a full scan run.

    Totals are kept per token in the smallest unit; W0G and native 0G
    are never added together.
    """

    success: bool
    events_found: int = 0
    total_w0g: int = 0
    total_0g: int = 0
    last_block_reached: int | None = None
    entities: list[EntityScanResult] = field(default_factory=list)
    message: str | None = None
    error: str | None = None

    @classmethod
    def rejected(cls) -> "ScanResult":
        return cls(success=False, message="Scan already in progress")

    @classmethod
    def from_entities(
        cls, entities: list[EntityScanResult], error: str | None = None
    ) -> "ScanResult":
        reached = [
            e.last_block_reached
            for e in entities
            if e.last_block_reached is not None
        ]
        return cls(
            success=error is None and all(e.success for e in entities),
            events_found=sum(e.events_found for e in entities),
            total_w0g=sum(
                e.total_value
                for e in entities
                if e.token == TokenKind.W0G.value
            ),
            total_0g=sum(
                e.total_value
                for e in entities
                if e.token == TokenKind.NATIVE.value
            ),
            last_block_reached=max(reached) if reached else None,
            entities=entities,
            error=error or next((e.error for e in entities if e.error), None),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "eventsFound": self.events_found,
            "totalW0g": format_tokens(self.total_w0g),
            "total0g": format_tokens(self.total_0g),
            "lastBlock": self.last_block_reached,
            "message": self.message,
            "error": self.error,
            "entities": [e.to_dict() for e in self.entities],
        }


@dataclass
class EntityStatus:
    """Progress of one watched entity."""

    entity_address: str
    entity_kind: str
    last_scanned_block: int
    transactions_recorded: int
    progress_percent: float
    blocks_remaining: int | None
    is_scanning: bool
    last_update: datetime | None
    last_error: str | None = None
    error_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity_address,
            "kind": self.entity_kind,
            "lastScannedBlock": self.last_scanned_block,
            "totalTransactions": self.transactions_recorded,
            "progress": f"{self.progress_percent:.2f}",
            "blocksRemaining": self.blocks_remaining,
            "isScanning": self.is_scanning,
            "lastUpdate": isoformat_or_none(self.last_update),
            "lastError": self.last_error,
            "errorCount": self.error_count,
        }


@dataclass
class ScanStatus:
    """
    Advisory scanner status.

    Top-level figures describe the claim contract, as the dashboard
    expects; per-entity details are in entities.
    """

    is_scanning: bool
    current_chain_height: int | None
    last_scanned_block: int
    transactions_recorded: int
    progress_percent: float
    blocks_remaining: int | None
    last_update: datetime | None
    entities: list[EntityStatus] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isScanning": self.is_scanning,
            "currentBlock": self.current_chain_height,
            "lastScannedBlock": self.last_scanned_block,
            "blocksRemaining": self.blocks_remaining,
            "totalTransactions": self.transactions_recorded,
            "lastUpdate": isoformat_or_none(self.last_update),
            "progress": f"{self.progress_percent:.2f}",
            "entities": [e.to_dict() for e in self.entities],
        }
