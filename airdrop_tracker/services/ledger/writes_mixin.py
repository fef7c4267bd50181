"""
Ledger Store Writes Mixin.

Insert-or-ignore of transaction records, additive wallet updates and
checkpoint bookkeeping.
"""

from collections.abc import Iterable

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from airdrop_tracker.models.airdrop_wallet import AirdropWallet
from airdrop_tracker.models.enums import TokenKind
from airdrop_tracker.models.scan_checkpoint import ScanCheckpoint
from airdrop_tracker.repositories.checkpoint_repository import (
    CheckpointRepository,
)
from airdrop_tracker.repositories.transaction_repository import (
    TransactionRepository,
)
from airdrop_tracker.repositories.wallet_repository import WalletRepository
from airdrop_tracker.utils.amounts import add_raw
from airdrop_tracker.utils.datetime_utils import ensure_utc, utc_now
from airdrop_tracker.utils.exceptions import AirdropTrackerError
from airdrop_tracker.utils.security import mask_address, mask_tx_hash

from .models import DistributionEvent

# Error text stored on the checkpoint row is truncated
MAX_ERROR_LENGTH = 1000


class WritesMixin:
    """Mixin providing write operations."""

    async def _insert_transaction(
        self, session: AsyncSession, event: DistributionEvent
    ) -> bool:
        return await TransactionRepository(session).insert_if_absent(
            **event.to_record()
        )

    async def _apply_to_wallet(
        self, session: AsyncSession, event: DistributionEvent
    ) -> AirdropWallet:
        repo = WalletRepository(session)
        address = event.recipient.lower()

        wallet = await repo.get_by_address(address, for_update=True)
        if wallet is None:
            wallet = AirdropWallet(
                address=address,
                total_native_received="0",
                total_token_received="0",
                phase1_amount="0",
                phase2_amount="0",
                transaction_count=0,
                is_suspicious=False,
            )
            session.add(wallet)

        amount = event.token_amount
        if event.token_type == TokenKind.W0G:
            wallet.phase1_amount = add_raw(wallet.phase1_amount, amount)
            wallet.total_token_received = add_raw(
                wallet.total_token_received, amount
            )
        else:
            wallet.phase2_amount = add_raw(wallet.phase2_amount, amount)
            wallet.total_native_received = add_raw(
                wallet.total_native_received, amount
            )
        wallet.transaction_count = (wallet.transaction_count or 0) + 1

        ts = event.block_timestamp or utc_now()
        first = ensure_utc(wallet.first_transaction_at)
        last = ensure_utc(wallet.last_transaction_at)
        if first is None or ts < first:
            wallet.first_transaction_at = ts
        if last is None or ts > last:
            wallet.last_transaction_at = ts
        wallet.updated_at = utc_now()

        await session.flush()
        return wallet

    async def upsert_transaction(self, event: DistributionEvent) -> bool:
        """
        Record a transaction unless its key already exists.

        Returns:
            True if inserted, False if it was already recorded
        """
        async with self.session_maker() as session:
            async with session.begin():
                return await self._insert_transaction(session, event)

    async def apply_to_wallet(self, event: DistributionEvent) -> None:
        """
        Additively apply an event to the recipient's aggregate.

        Creates the wallet on first sight. Callers must only apply
        events whose record was newly inserted.
        """
        async with self.session_maker() as session:
            async with session.begin():
                await self._apply_to_wallet(session, event)

    async def record_event(self, event: DistributionEvent) -> bool:
        """
        Insert the record and apply it to the wallet atomically.

        The wallet is only touched when the record is new, so
        re-processing an event never changes any aggregate.

        Returns:
            True if the event was new
        """
        async with self.session_maker() as session:
            async with session.begin():
                inserted = await self._insert_transaction(session, event)
                if not inserted:
                    logger.debug(
                        f"[Ledger] Duplicate {mask_tx_hash(event.tx_hash)}"
                        f"#{event.log_index} ignored"
                    )
                    return False
                await self._apply_to_wallet(session, event)

        logger.debug(
            f"[Ledger] Recorded {event.token_type.value} "
            f"{mask_tx_hash(event.tx_hash)} -> {mask_address(event.recipient)}"
        )
        return True

    async def _checkpoint_for_update(
        self, session: AsyncSession, entity_address: str
    ) -> ScanCheckpoint:
        checkpoint = await CheckpointRepository(session).get_for_entity(
            entity_address, for_update=True
        )
        if checkpoint is None:
            raise AirdropTrackerError(
                f"No checkpoint for entity {entity_address}"
            )
        return checkpoint

    async def ensure_checkpoints(self, entities: Iterable) -> int:
        """
        Seed checkpoint rows for watched entities if missing.

        Args:
            entities: Objects with address and kind attributes

        Returns:
            Number of rows created
        """
        created = 0
        async with self.session_maker() as session:
            async with session.begin():
                repo = CheckpointRepository(session)
                for entity in entities:
                    kind = getattr(entity.kind, "value", entity.kind)
                    if await repo.seed(entity.address, kind):
                        created += 1
                        logger.info(
                            f"[Ledger] Seeded checkpoint for {kind} "
                            f"{mask_address(entity.address)}"
                        )
        return created

    async def advance_checkpoint(
        self, entity_address: str, block_number: int
    ) -> ScanCheckpoint:
        """
        Move the checkpoint forward.

        The stored block never decreases. total_transactions is
        recounted from the stored records, so records committed before
        a crash are still counted when their batch is replayed.

        Args:
            entity_address: Watched entity
            block_number: Last block fully processed (inclusive)
        """
        async with self.session_maker() as session:
            async with session.begin():
                checkpoint = await self._checkpoint_for_update(
                    session, entity_address
                )
                if block_number > checkpoint.last_block_scanned:
                    checkpoint.last_block_scanned = block_number
                checkpoint.total_transactions = await TransactionRepository(
                    session
                ).count_for_entity(entity_address)
                checkpoint.last_update = utc_now()
            return checkpoint

    async def set_scanning(self, entity_address: str, flag: bool) -> None:
        """Persist the scanning flag of an entity."""
        async with self.session_maker() as session:
            async with session.begin():
                checkpoint = await self._checkpoint_for_update(
                    session, entity_address
                )
                checkpoint.is_scanning = flag
                checkpoint.last_update = utc_now()

    async def record_checkpoint_error(
        self, entity_address: str, error: str
    ) -> None:
        """Store the last chain error seen for an entity."""
        async with self.session_maker() as session:
            async with session.begin():
                checkpoint = await self._checkpoint_for_update(
                    session, entity_address
                )
                checkpoint.last_error = error[:MAX_ERROR_LENGTH]
                checkpoint.error_count += 1
                checkpoint.last_update = utc_now()

    async def clear_stale_scanning(self) -> int:
        """
        Reset scanning flags left behind by a killed process.

        Only safe while no scan can be running, i.e. at startup.

        Returns:
            Number of flags cleared
        """
        async with self.session_maker() as session:
            async with session.begin():
                cleared = await CheckpointRepository(
                    session
                ).clear_scanning_flags()
        if cleared:
            logger.warning(
                f"[Ledger] Cleared {cleared} stale scanning flag(s)"
            )
        return cleared
