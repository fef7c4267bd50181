"""
Scan Engine Core.

Main service class that combines scanning, decoding and status.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from loguru import logger

from airdrop_tracker.services.chain_reader.types import ChainReader
from airdrop_tracker.services.ledger import LedgerStore
from airdrop_tracker.services.notifications.sink import (
    NotificationSink,
    NullNotificationSink,
)

from .constants import (
    DEFAULT_INTER_BATCH_DELAY,
    DEFAULT_MAX_RATE_LIMIT_RETRIES,
    DEFAULT_RATE_LIMIT_COOLDOWN,
)
from .decoding_mixin import DecodingMixin
from .entities import WatchedEntity
from .scanning_mixin import ScanningMixin
from .status_mixin import StatusMixin


class ScanEngine(ScanningMixin, DecodingMixin, StatusMixin):
    """
    Incremental chain scanner for the two airdrop phases.

    Walks each watched entity's block range in batches, records every
    new distribution event once, keeps wallet aggregates current and
    advances a per-entity checkpoint after each batch.

    Key properties:
    - At most one scan runs at a time; concurrent calls are rejected
    - Re-scanning a range never changes any aggregate
    - A crash loses at most the batch in progress
    """

    def __init__(
        self,
        reader: ChainReader,
        store: LedgerStore,
        entities: Sequence[WatchedEntity],
        sink: NotificationSink | None = None,
        analytics: Any = None,
        rate_limit_cooldown: float = DEFAULT_RATE_LIMIT_COOLDOWN,
        max_rate_limit_retries: int = DEFAULT_MAX_RATE_LIMIT_RETRIES,
        inter_batch_delay: float = DEFAULT_INTER_BATCH_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize engine.

        Args:
            reader: Chain reader
            store: Ledger store
            entities: Watched entities in scan order
            sink: Notification sink (default: drops everything)
            analytics: Object with async run(), called after full scans
            rate_limit_cooldown: Seconds to wait after a rate limit
            max_rate_limit_retries: Retries of one batch before aborting
            inter_batch_delay: Pause between batches in seconds
            sleep: Awaitable sleep (tests replace it)
        """
        if not entities:
            raise ValueError("At least one watched entity is required")

        self.reader = reader
        self.store = store
        self.entities = tuple(entities)
        self.sink = sink or NullNotificationSink()
        self.analytics = analytics

        self.rate_limit_cooldown = rate_limit_cooldown
        self.max_rate_limit_retries = max_rate_limit_retries
        self.inter_batch_delay = inter_batch_delay
        self._sleep = sleep

        self._lock = asyncio.Lock()

    def _publish(self, event_name: str, payload: Any) -> None:
        """Forward to the sink; delivery failures never reach the scan."""
        try:
            self.sink.publish(event_name, payload)
        except Exception as e:
            logger.warning(f"[Scanner] Failed to publish {event_name}: {e}")
