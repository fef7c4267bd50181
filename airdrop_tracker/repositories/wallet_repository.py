"""
Airdrop Wallet repository.

Data access layer for wallet aggregates.
"""

from sqlalchemy import Numeric, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from airdrop_tracker.models.airdrop_wallet import AirdropWallet
from airdrop_tracker.repositories.base import BaseRepository

# Sort key only; exact sums are computed in Python from the strings
_TOTAL_AMOUNT = (
    cast(AirdropWallet.phase1_amount, Numeric(78, 0))
    + cast(AirdropWallet.phase2_amount, Numeric(78, 0))
)


class WalletRepository(BaseRepository[AirdropWallet]):
    """Repository for wallet aggregates."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository."""
        super().__init__(AirdropWallet, session)

    async def get_by_address(
        self, address: str, for_update: bool = False
    ) -> AirdropWallet | None:
        """
        Get wallet by address.

        Args:
            address: Wallet address (any case)
            for_update: Lock the row for an additive update

        Returns:
            Wallet or None
        """
        return await self.get_by(for_update=for_update, address=address.lower())

    def _search_filter(self, search: str | None):
        if not search:
            return None
        return AirdropWallet.address.contains(search.lower(), autoescape=True)

    async def list_ranked(
        self,
        limit: int = 100,
        offset: int = 0,
        search: str | None = None,
    ) -> list[AirdropWallet]:
        """
        List wallets ordered by total received, then transaction count.

        Args:
            limit: Page size
            offset: Rows to skip
            search: Optional address substring

        Returns:
            List of wallets
        """
        query = select(AirdropWallet)
        condition = self._search_filter(search)
        if condition is not None:
            query = query.where(condition)

        query = (
            query.order_by(
                _TOTAL_AMOUNT.desc(),
                AirdropWallet.transaction_count.desc(),
                AirdropWallet.address.asc(),
            )
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_matching(self, search: str | None = None) -> int:
        """Count wallets, optionally filtered by address substring."""
        if not search:
            return await self.count()

        query = (
            select(func.count())
            .select_from(AirdropWallet)
            .where(self._search_filter(search))
        )
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def search(self, query: str, limit: int = 20) -> list[AirdropWallet]:
        """Find wallets whose address contains the query."""
        stmt = (
            select(AirdropWallet)
            .where(self._search_filter(query))
            .order_by(AirdropWallet.address.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_amounts(self) -> list[tuple[str, str]]:
        """Get (phase1_amount, phase2_amount) of every wallet."""
        result = await self.session.execute(
            select(AirdropWallet.phase1_amount, AirdropWallet.phase2_amount)
        )
        return [(row[0], row[1]) for row in result.all()]
