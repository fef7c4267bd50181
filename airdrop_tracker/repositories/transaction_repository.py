"""
Airdrop Transaction repository.

Data access layer for recorded distribution events.
"""

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from airdrop_tracker.models.airdrop_transaction import AirdropTransaction
from airdrop_tracker.models.enums import Phase
from airdrop_tracker.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[AirdropTransaction]):
    """Repository for airdrop transactions."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository."""
        super().__init__(AirdropTransaction, session)

    async def insert_if_absent(self, **values) -> bool:
        """
        Insert a transaction unless (tx_hash, log_index) already exists.

        Returns:
            True if inserted, False if it was a duplicate
        """
        return await self.insert_ignore(
            values, conflict_columns=["tx_hash", "log_index"]
        )

    async def get_by_tx_hash(
        self, tx_hash: str, log_index: int
    ) -> AirdropTransaction | None:
        """Get a recorded event by its key."""
        return await self.get_by(tx_hash=tx_hash.lower(), log_index=log_index)

    async def get_for_address(
        self, address: str, limit: int = 50
    ) -> list[AirdropTransaction]:
        """
        Get transactions sent or received by an address, newest first.

        Args:
            address: Wallet address
            limit: Max results

        Returns:
            List of transactions
        """
        addr = address.lower()
        query = (
            select(AirdropTransaction)
            .where(
                or_(
                    AirdropTransaction.to_address == addr,
                    AirdropTransaction.from_address == addr,
                )
            )
            .order_by(AirdropTransaction.block_number.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_recent(self, limit: int = 100) -> list[AirdropTransaction]:
        """Get latest transactions by block."""
        query = (
            select(AirdropTransaction)
            .order_by(
                AirdropTransaction.block_number.desc(),
                AirdropTransaction.block_timestamp.desc(),
                AirdropTransaction.id.desc(),
            )
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_for_entity(self, entity_address: str) -> int:
        """
        Count records produced by a watched entity.

        Claims are recorded with the claim contract as destination,
        wallet transfers with the distribution wallet as sender.
        """
        addr = entity_address.lower()
        query = select(func.count(AirdropTransaction.id)).where(
            or_(
                and_(
                    AirdropTransaction.phase == int(Phase.CLAIM),
                    AirdropTransaction.to_address == addr,
                ),
                and_(
                    AirdropTransaction.phase == int(Phase.TRANSFER),
                    AirdropTransaction.from_address == addr,
                ),
            )
        )
        result = await self.session.execute(query)
        return result.scalar_one()
