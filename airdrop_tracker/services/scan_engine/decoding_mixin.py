"""
Scan Engine Decoding Mixin.

Turns raw chain data of one batch into distribution events.
"""

from loguru import logger

from airdrop_tracker.config.constants import (
    NATIVE_TRANSFER_LOG_INDEX,
    TRANSFER_EVENT_SIGNATURE,
)
from airdrop_tracker.models.enums import Phase, TokenKind
from airdrop_tracker.services.chain_reader.types import RawBlock, RawLog
from airdrop_tracker.services.ledger.models import DistributionEvent
from airdrop_tracker.utils.datetime_utils import from_unix
from airdrop_tracker.utils.exceptions import EventDecodeError
from airdrop_tracker.utils.security import mask_address, mask_tx_hash

from .constants import TRANSFER_TOPIC, TRANSFER_TOPIC_COUNT
from .entities import WatchedEntity


def decode_transfer_log(log: RawLog) -> tuple[str, str, int]:
    """
    Decode a Transfer(address,address,uint256) log.

    Returns:
        (from, to, value) with lower-case addresses

    Raises:
        EventDecodeError: If the log does not match the signature
    """
    if len(log.topics) != TRANSFER_TOPIC_COUNT:
        raise EventDecodeError(
            f"Expected {TRANSFER_TOPIC_COUNT} topics, got {len(log.topics)}"
        )
    if log.topics[0].lower() != TRANSFER_TOPIC:
        raise EventDecodeError(f"Unexpected topic0 {log.topics[0]}")

    try:
        sender = "0x" + log.topics[1][-40:].lower()
        recipient = "0x" + log.topics[2][-40:].lower()
        data = log.data.removeprefix("0x")
        value = int(data, 16) if data else None
    except (AttributeError, ValueError) as e:
        raise EventDecodeError(f"Malformed Transfer log: {e}") from e

    if value is None:
        raise EventDecodeError("Transfer log has no data")
    return sender, recipient, value


class DecodingMixin:
    """Mixin providing per-entity event extraction."""

    async def collect_events(
        self, entity: WatchedEntity, from_block: int, to_block: int
    ) -> list[DistributionEvent]:
        """
        Extract the events of one batch.

        Raises:
            RateLimitError: Provider throttled a read
            ChainReaderError: Any other read failure
        """
        if entity.is_claim_contract:
            return await self._collect_claim_events(
                entity, from_block, to_block
            )
        return await self._collect_wallet_events(entity, from_block, to_block)

    async def _collect_claim_events(
        self, entity: WatchedEntity, from_block: int, to_block: int
    ) -> list[DistributionEvent]:
        logs = await self.reader.logs_in_range(
            entity.token_address,
            TRANSFER_EVENT_SIGNATURE,
            from_block,
            to_block,
            {"to": entity.address},
        )

        events = []
        timestamps: dict[int, int | None] = {}
        relay_senders: set[str] = set()

        for log in logs:
            try:
                sender, recipient, value = decode_transfer_log(log)
            except EventDecodeError as e:
                logger.debug(
                    f"[Scanner] Skipping log {mask_tx_hash(log.tx_hash)}"
                    f"#{log.log_index}: {e}"
                )
                continue

            if value <= 0 or recipient != entity.address.lower():
                continue
            if sender not in entity.allowed_senders:
                relay_senders.add(sender)
                continue

            tx = await self.reader.transaction(log.tx_hash)
            if tx is None:
                logger.debug(
                    f"[Scanner] Transaction {mask_tx_hash(log.tx_hash)} "
                    f"not found, skipping"
                )
                continue

            if log.block_number not in timestamps:
                block = await self.reader.block(log.block_number)
                timestamps[log.block_number] = block.timestamp if block else None

            claimant = tx.from_address.lower()
            events.append(
                DistributionEvent(
                    tx_hash=log.tx_hash.lower(),
                    log_index=log.log_index,
                    block_number=log.block_number,
                    block_timestamp=from_unix(timestamps[log.block_number]),
                    from_address=claimant,
                    to_address=entity.address.lower(),
                    recipient=claimant,
                    value=0,
                    token_amount=value,
                    token_type=TokenKind.W0G,
                    phase=Phase.CLAIM,
                    gas_used=tx.gas,
                )
            )

        if relay_senders:
            logger.debug(
                f"[Scanner] Ignored transfers from "
                f"{', '.join(mask_address(s) for s in sorted(relay_senders))}"
            )
        return events

    async def _collect_wallet_events(
        self, entity: WatchedEntity, from_block: int, to_block: int
    ) -> list[DistributionEvent]:
        events = []
        for number in range(from_block, to_block + 1):
            block = await self.reader.block(number)
            if block is None:
                logger.debug(f"[Scanner] Block {number} not found, skipping")
                continue
            events.extend(self._wallet_events_in_block(entity, block))
        return events

    def _wallet_events_in_block(
        self, entity: WatchedEntity, block: RawBlock
    ) -> list[DistributionEvent]:
        wallet = entity.address.lower()
        timestamp = from_unix(block.timestamp)
        events = []

        for tx in block.transactions:
            if tx.from_address.lower() != wallet:
                continue
            if not tx.to_address or tx.value <= 0:
                continue
            events.append(
                DistributionEvent(
                    tx_hash=tx.hash.lower(),
                    log_index=NATIVE_TRANSFER_LOG_INDEX,
                    block_number=block.number,
                    block_timestamp=timestamp,
                    from_address=wallet,
                    to_address=tx.to_address.lower(),
                    recipient=tx.to_address.lower(),
                    value=tx.value,
                    token_amount=tx.value,
                    token_type=TokenKind.NATIVE,
                    phase=Phase.TRANSFER,
                    gas_used=tx.gas,
                )
            )
        return events
