"""
Scan Engine Status Mixin.

Pure reads of scanner progress.
"""

from typing import Any

from loguru import logger

from airdrop_tracker.utils.datetime_utils import ensure_utc
from airdrop_tracker.utils.exceptions import ChainReaderError

from .entities import WatchedEntity
from .models import EntityStatus, ScanStatus


def progress_percent(
    last_scanned: int, genesis_block: int, height: int | None
) -> float:
    """
    Share of [genesis, height] already scanned, clamped to [0, 100].

    Examples:
        >>> progress_percent(150, 100, 200)
        50.0
    """
    if height is None:
        return 0.0
    span = height - genesis_block
    if span <= 0:
        return 100.0 if last_scanned >= height else 0.0
    percent = (last_scanned - genesis_block) / span * 100
    return max(0.0, min(100.0, percent))


class StatusMixin:
    """Mixin providing status queries."""

    @property
    def is_scanning(self) -> bool:
        """True while a scan holds the engine lock."""
        return self._lock.locked()

    async def _entity_status(
        self, entity: WatchedEntity, height: int | None
    ) -> EntityStatus:
        checkpoint = await self.store.get_checkpoint(entity.address)
        last_scanned = checkpoint.last_block_scanned if checkpoint else 0
        # A seeded-but-unscanned entity counts from its genesis block
        effective = max(last_scanned, entity.genesis_block - 1)

        return EntityStatus(
            entity_address=entity.address,
            entity_kind=entity.kind.value,
            last_scanned_block=last_scanned,
            transactions_recorded=(
                checkpoint.total_transactions if checkpoint else 0
            ),
            progress_percent=progress_percent(
                effective, entity.genesis_block, height
            ),
            blocks_remaining=(
                max(0, height - effective) if height is not None else None
            ),
            is_scanning=bool(checkpoint and checkpoint.is_scanning),
            last_update=ensure_utc(checkpoint.last_update) if checkpoint else None,
            last_error=checkpoint.last_error if checkpoint else None,
            error_count=checkpoint.error_count if checkpoint else 0,
        )

    async def get_status(self) -> ScanStatus:
        """
        Advisory status. Safe to call while a scan is running.

        The chain height is None when the chain cannot be read.
        """
        try:
            height = await self.reader.current_height()
        except ChainReaderError as e:
            logger.warning(f"[Scanner] Status without chain height: {e}")
            height = None

        entities = [
            await self._entity_status(entity, height)
            for entity in self.entities
        ]
        primary = entities[0]

        return ScanStatus(
            is_scanning=self.is_scanning,
            current_chain_height=height,
            last_scanned_block=primary.last_scanned_block,
            transactions_recorded=primary.transactions_recorded,
            progress_percent=primary.progress_percent,
            blocks_remaining=primary.blocks_remaining,
            last_update=primary.last_update,
            entities=entities,
        )

    async def get_last_run(self) -> dict[str, Any]:
        """Checkpoint snapshot of the claim contract."""
        checkpoint = await self.store.get_checkpoint(self.entities[0].address)
        if checkpoint is None:
            return {
                "last_block_scanned": 0,
                "last_update": None,
                "total_transactions": 0,
                "is_scanning": False,
            }
        return {
            "last_block_scanned": checkpoint.last_block_scanned,
            "last_update": ensure_utc(checkpoint.last_update),
            "total_transactions": checkpoint.total_transactions,
            "is_scanning": checkpoint.is_scanning,
        }
