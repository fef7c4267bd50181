"""
Scan Checkpoint repository.
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from airdrop_tracker.models.scan_checkpoint import ScanCheckpoint
from airdrop_tracker.repositories.base import BaseRepository


class CheckpointRepository(BaseRepository[ScanCheckpoint]):
    """Repository for scan checkpoints."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository."""
        super().__init__(ScanCheckpoint, session)

    async def get_for_entity(
        self, entity_address: str, for_update: bool = False
    ) -> ScanCheckpoint | None:
        """Get checkpoint of a watched entity."""
        return await self.get_by(
            for_update=for_update, entity_address=entity_address.lower()
        )

    async def seed(self, entity_address: str, entity_kind: str) -> bool:
        """
        Create the checkpoint row if missing.

        Returns:
            True if a row was created
        """
        return await self.insert_ignore(
            {
                "entity_address": entity_address.lower(),
                "entity_kind": entity_kind,
                "last_block_scanned": 0,
                "total_transactions": 0,
                "is_scanning": False,
                "error_count": 0,
            },
            conflict_columns=["entity_address"],
        )

    async def get_all(self) -> list[ScanCheckpoint]:
        """Get all checkpoints ordered by id."""
        result = await self.session.execute(
            select(ScanCheckpoint).order_by(ScanCheckpoint.id.asc())
        )
        return list(result.scalars().all())

    async def clear_scanning_flags(self) -> int:
        """
        Reset is_scanning on every row.

        Returns:
            Number of rows that were flagged
        """
        result = await self.session.execute(
            update(ScanCheckpoint)
            .where(ScanCheckpoint.is_scanning.is_(True))
            .values(is_scanning=False)
        )
        return result.rowcount
