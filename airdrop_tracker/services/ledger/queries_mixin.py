"""
Ledger Store Queries Mixin.

Read-only access for the API, the notification hub and the export.
All methods are pure reads.
"""

from collections.abc import AsyncIterator

from airdrop_tracker.models.airdrop_transaction import AirdropTransaction
from airdrop_tracker.models.airdrop_wallet import AirdropWallet
from airdrop_tracker.models.scan_checkpoint import ScanCheckpoint
from airdrop_tracker.repositories.checkpoint_repository import (
    CheckpointRepository,
)
from airdrop_tracker.repositories.transaction_repository import (
    TransactionRepository,
)
from airdrop_tracker.repositories.wallet_repository import WalletRepository
from airdrop_tracker.utils.amounts import parse_raw
from airdrop_tracker.utils.datetime_utils import ensure_utc

from .models import AggregateStats

# Page size used when streaming all wallets for the export
EXPORT_PAGE_SIZE = 1000


class QueriesMixin:
    """Mixin providing query methods."""

    async def read_aggregate_stats(self) -> AggregateStats:
        """
        Compute global statistics.

        Sums are exact: they are computed from the stored integer
        strings, never from database floats.
        """
        stats = AggregateStats()
        async with self.session_maker() as session:
            amounts = await WalletRepository(session).get_amounts()
            checkpoints = await CheckpointRepository(session).get_all()

        for phase1_raw, phase2_raw in amounts:
            phase1 = parse_raw(phase1_raw)
            phase2 = parse_raw(phase2_raw)
            stats.total_wallets += 1
            stats.total_w0g_distributed += phase1
            stats.total_0g_distributed += phase2
            if phase1 > 0:
                stats.phase1_wallets += 1
            if phase2 > 0:
                stats.phase2_wallets += 1
            if phase1 > 0 and phase2 > 0:
                stats.overlapping_wallets += 1

        for checkpoint in checkpoints:
            stats.last_block_scanned = max(
                stats.last_block_scanned, checkpoint.last_block_scanned
            )
            updated = ensure_utc(checkpoint.last_update)
            if updated and (
                stats.last_update is None or updated > stats.last_update
            ):
                stats.last_update = updated

        return stats

    async def list_wallets(
        self,
        search: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AirdropWallet]:
        """
        List wallets ordered by total received desc, then count desc.

        Args:
            search: Optional case-insensitive address substring
            limit: Page size
            offset: Rows to skip
        """
        async with self.session_maker() as session:
            return await WalletRepository(session).list_ranked(
                limit=limit, offset=offset, search=search
            )

    async def count_wallets(self, search: str | None = None) -> int:
        """Count wallets matching the optional search."""
        async with self.session_maker() as session:
            return await WalletRepository(session).count_matching(search)

    async def get_wallet(self, address: str) -> AirdropWallet | None:
        """Get wallet aggregate by address (case-insensitive)."""
        async with self.session_maker() as session:
            return await WalletRepository(session).get_by_address(address)

    async def list_transactions_for_wallet(
        self, address: str, limit: int = 50
    ) -> list[AirdropTransaction]:
        """Transactions involving the address, newest block first."""
        async with self.session_maker() as session:
            return await TransactionRepository(session).get_for_address(
                address, limit=limit
            )

    async def list_recent_transactions(
        self, limit: int = 100
    ) -> list[AirdropTransaction]:
        """Latest transactions by block."""
        async with self.session_maker() as session:
            return await TransactionRepository(session).get_recent(limit)

    async def top_wallets(self, limit: int = 100) -> list[AirdropWallet]:
        """Wallets with the highest combined total."""
        return await self.list_wallets(limit=limit)

    async def search_wallets(
        self, query: str, limit: int = 20
    ) -> list[AirdropWallet]:
        """Wallets whose address contains query."""
        async with self.session_maker() as session:
            return await WalletRepository(session).search(query, limit=limit)

    async def iter_all_wallets(self) -> AsyncIterator[AirdropWallet]:
        """Yield every wallet in ranked order, page by page."""
        offset = 0
        while True:
            page = await self.list_wallets(
                limit=EXPORT_PAGE_SIZE, offset=offset
            )
            for wallet in page:
                yield wallet
            if len(page) < EXPORT_PAGE_SIZE:
                break
            offset += EXPORT_PAGE_SIZE

    async def get_checkpoint(
        self, entity_address: str
    ) -> ScanCheckpoint | None:
        """Get checkpoint of a watched entity."""
        async with self.session_maker() as session:
            return await CheckpointRepository(session).get_for_entity(
                entity_address
            )

    async def list_checkpoints(self) -> list[ScanCheckpoint]:
        """All checkpoints."""
        async with self.session_maker() as session:
            return await CheckpointRepository(session).get_all()
