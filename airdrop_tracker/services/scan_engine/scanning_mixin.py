"""
Scan Engine Scanning Mixin.

Batched range scans with checkpointing, rate-limit retry and
notifications.
"""

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from airdrop_tracker.services.ledger.models import DistributionEvent
from airdrop_tracker.services.ledger.serializers import serialize_stats
from airdrop_tracker.utils.amounts import format_tokens
from airdrop_tracker.utils.exceptions import (
    ChainReaderError,
    RateLimitError,
    ScanAbortedError,
)
from airdrop_tracker.utils.security import mask_address

from .entities import WatchedEntity, batch_ranges
from .models import EntityScanResult, ScanResult


class ScanningMixin:
    """Mixin providing the scan loop."""

    async def run_full_scan(self, start_block: int | None = None) -> ScanResult:
        """
        Scan every watched entity, claim contract first.

        Rejected without side effects while another scan is running.

        Args:
            start_block: Lower bound for the start block of each entity

        Returns:
            ScanResult; success is False when rejected, aborted after
            exhausting rate-limit retries, or on a storage failure
        """
        if self._lock.locked():
            logger.warning("[Scanner] Scan already in progress, rejected")
            return ScanResult.rejected()

        async with self._lock:
            logger.info(
                f"[Scanner] Full scan started"
                f"{f' from block {start_block}' if start_block else ''}"
            )
            results: list[EntityScanResult] = []
            try:
                await self.store.ensure_checkpoints(self.entities)
                for entity in self.entities:
                    result = await self._scan_entity(entity, start_block)
                    results.append(result)
                    if not result.success:
                        break
            except SQLAlchemyError as e:
                logger.error(f"[Scanner] Storage failure, scan aborted: {e}")
                return ScanResult.from_entities(results, error=str(e))

            scan_result = ScanResult.from_entities(results)
            if scan_result.success:
                await self._after_full_scan()

            log = logger.success if scan_result.success else logger.error
            log(
                f"[Scanner] Full scan finished: success={scan_result.success}, "
                f"events={scan_result.events_found}, "
                f"last_block={scan_result.last_block_reached}"
            )
            return scan_result

    async def scan_entity(
        self, entity: WatchedEntity, start_block: int | None = None
    ) -> EntityScanResult:
        """
        Scan a single watched entity up to the current chain height.

        Holds the same lock as run_full_scan.
        """
        if self._lock.locked():
            logger.warning("[Scanner] Scan already in progress, rejected")
            return EntityScanResult(
                entity_address=entity.address,
                entity_kind=entity.kind.value,
                success=False,
                error="Scan already in progress",
            )

        async with self._lock:
            await self.store.ensure_checkpoints([entity])
            return await self._scan_entity(entity, start_block)

    def resolve_start_block(
        self,
        entity: WatchedEntity,
        checkpoint_block: int,
        start_block: int | None = None,
    ) -> int:
        """max(start_block, checkpoint + 1, genesis)"""
        return max(
            start_block or 0,
            checkpoint_block + 1,
            entity.genesis_block,
        )

    async def _scan_entity(
        self, entity: WatchedEntity, start_block: int | None
    ) -> EntityScanResult:
        result = EntityScanResult(
            entity_address=entity.address, entity_kind=entity.kind.value
        )
        label = f"{entity.kind.value} {mask_address(entity.address)}"

        try:
            height = await self._with_rate_limit_retry(
                self.reader.current_height, "current height"
            )
        except ScanAbortedError as e:
            result.success = False
            result.error = str(e)
            return result
        except ChainReaderError as e:
            logger.error(f"[Scanner] Cannot read chain height: {e}")
            result.success = False
            result.error = str(e)
            return result

        checkpoint = await self.store.get_checkpoint(entity.address)
        last_scanned = checkpoint.last_block_scanned if checkpoint else 0
        start = self.resolve_start_block(entity, last_scanned, start_block)

        result.from_block = start
        result.to_block = height
        result.last_block_reached = last_scanned

        if start >= height:
            logger.info(f"[Scanner] {label} up to date at block {last_scanned}")
            result.up_to_date = True
            return result

        logger.info(
            f"[Scanner] Scanning {label}: {height - start + 1} blocks "
            f"({start} -> {height})"
        )

        await self.store.set_scanning(entity.address, True)
        try:
            for batch_start, batch_end in batch_ranges(
                start, height, entity.batch_size
            ):
                self._publish_progress(entity, start, batch_start, height)

                try:
                    events = await self._with_rate_limit_retry(
                        lambda s=batch_start, e=batch_end: self.collect_events(
                            entity, s, e
                        ),
                        f"blocks {batch_start}-{batch_end}",
                    )
                except ScanAbortedError as e:
                    logger.error(f"[Scanner] {label} aborted: {e}")
                    result.success = False
                    result.error = str(e)
                    return result
                except ChainReaderError as e:
                    logger.error(
                        f"[Scanner] {label} blocks {batch_start}-{batch_end} "
                        f"skipped: {e}"
                    )
                    await self.store.record_checkpoint_error(
                        entity.address, str(e)
                    )
                    result.batches_failed += 1
                    events = []

                recorded = 0
                for event in events:
                    if await self._record(event):
                        recorded += 1
                        result.total_value += event.token_amount

                await self.store.advance_checkpoint(entity.address, batch_end)
                result.events_found += recorded
                result.batches_processed += 1
                result.last_block_reached = batch_end

                if recorded:
                    logger.info(
                        f"[Scanner] {label} blocks {batch_start}-{batch_end}: "
                        f"{recorded} new events"
                    )

                await self._sleep(self.inter_batch_delay)
        finally:
            await self._clear_scanning(entity)

        logger.success(
            f"[Scanner] {label} complete: {result.events_found} events, "
            f"{format_tokens(result.total_value)} {result.token}"
        )
        return result

    async def _with_rate_limit_retry(self, call, operation: str):
        """
        Await call(), retrying after a cooldown on rate limits.

        Raises:
            ScanAbortedError: After max_rate_limit_retries retries
            ChainReaderError: On any other chain failure
        """
        retries = 0
        while True:
            try:
                return await call()
            except RateLimitError as e:
                if retries >= self.max_rate_limit_retries:
                    raise ScanAbortedError(
                        f"Rate limited on {operation} after {retries} retries"
                    ) from e
                retries += 1
                logger.warning(
                    f"[Scanner] Rate limited on {operation}, waiting "
                    f"{self.rate_limit_cooldown}s "
                    f"(retry {retries}/{self.max_rate_limit_retries})"
                )
                await self._sleep(self.rate_limit_cooldown)

    async def _record(self, event: DistributionEvent) -> bool:
        inserted = await self.store.record_event(event)
        if inserted:
            self._publish(event.notification_name, event.to_payload())
        return inserted

    async def _clear_scanning(self, entity: WatchedEntity) -> None:
        try:
            await self.store.set_scanning(entity.address, False)
        except SQLAlchemyError as e:
            logger.error(f"[Scanner] Failed to clear scanning flag: {e}")

    def _publish_progress(
        self,
        entity: WatchedEntity,
        start: int,
        current: int,
        height: int,
    ) -> None:
        span = height - start
        percentage = (current - start) / span * 100 if span > 0 else 100.0
        self._publish(
            "scan-progress",
            {
                "entity": entity.address,
                "kind": entity.kind.value,
                "current": current,
                "total": height,
                "percentage": f"{percentage:.2f}",
            },
        )

    async def _after_full_scan(self) -> None:
        if self.analytics is not None:
            try:
                await self.analytics.run()
            except SQLAlchemyError as e:
                logger.warning(f"[Scanner] Analytics failed: {e}")

        try:
            stats = await self.store.read_aggregate_stats()
        except SQLAlchemyError as e:
            logger.warning(f"[Scanner] Could not read stats: {e}")
            return
        self._publish("stats-update", serialize_stats(stats))
