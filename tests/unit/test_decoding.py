"""
Tests for event decoding.

Claim events are credited to the transaction sender and only counted
when the token moves from the claim contract or the admin wallet.
"""

from dataclasses import replace
from datetime import UTC, datetime

import pytest

from airdrop_tracker.models.enums import Phase, TokenKind
from airdrop_tracker.services.scan_engine.decoding_mixin import (
    decode_transfer_log,
)
from airdrop_tracker.utils.exceptions import EventDecodeError
from tests.fakes import (
    ADMIN,
    CLAIM_CONTRACT,
    DISTRIBUTION_WALLET,
    ONE_TOKEN,
    RELAY,
    USER_A,
    USER_B,
    transfer_log,
    tx_hash,
)


class TestDecodeTransferLog:
    """Tests for decode_transfer_log."""

    def test_decodes_addresses_and_value(self):
        log = transfer_log(1, 120, ADMIN, CLAIM_CONTRACT, 5 * ONE_TOKEN)

        sender, recipient, value = decode_transfer_log(log)

        assert sender == ADMIN
        assert recipient == CLAIM_CONTRACT
        assert value == 5 * ONE_TOKEN

    def test_wrong_topic_count(self):
        log = transfer_log(1, 120, ADMIN, CLAIM_CONTRACT, 1)
        bad = replace(log, topics=log.topics[:2])

        with pytest.raises(EventDecodeError):
            decode_transfer_log(bad)

    def test_wrong_signature(self):
        log = transfer_log(1, 120, ADMIN, CLAIM_CONTRACT, 1)
        bad = replace(log, topics=["0x" + "00" * 32] + log.topics[1:])

        with pytest.raises(EventDecodeError):
            decode_transfer_log(bad)

    def test_empty_data(self):
        log = transfer_log(1, 120, ADMIN, CLAIM_CONTRACT, 1)
        bad = replace(log, data="0x")

        with pytest.raises(EventDecodeError):
            decode_transfer_log(bad)


class TestClaimDecoding:
    """Tests for claim-contract event extraction."""

    async def test_relay_sender_excluded_and_claimant_credited(
        self, scan_engine, chain, claim_entity
    ):
        # Same block: a relayed transfer and a genuine claim by USER_A
        chain.add_claim(1, 150, claimant=USER_B, value=ONE_TOKEN, sender=RELAY)
        chain.add_claim(2, 150, claimant=USER_A, value=5 * ONE_TOKEN, sender=ADMIN)

        events = await scan_engine.collect_events(claim_entity, 101, 200)

        assert len(events) == 1
        event = events[0]
        assert event.recipient == USER_A
        assert event.from_address == USER_A
        assert event.to_address == CLAIM_CONTRACT
        assert event.token_amount == 5 * ONE_TOKEN
        assert event.value == 0
        assert event.token_type == TokenKind.W0G
        assert event.phase == Phase.CLAIM
        assert event.tx_hash == tx_hash(2)
        assert event.block_timestamp == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)

    async def test_zero_value_dropped(self, scan_engine, chain, claim_entity):
        chain.add_claim(1, 150, claimant=USER_A, value=0)

        assert await scan_engine.collect_events(claim_entity, 101, 200) == []

    async def test_two_logs_in_one_transaction_kept(
        self, scan_engine, chain, claim_entity
    ):
        chain.add_claim(1, 150, claimant=USER_A, value=ONE_TOKEN, log_index=3)
        chain.logs.append(
            transfer_log(1, 150, CLAIM_CONTRACT, CLAIM_CONTRACT, ONE_TOKEN, log_index=4)
        )

        events = await scan_engine.collect_events(claim_entity, 101, 200)

        assert [e.log_index for e in events] == [3, 4]

    async def test_missing_transaction_skipped(
        self, scan_engine, chain, claim_entity
    ):
        chain.add_claim(1, 150, claimant=USER_A, value=ONE_TOKEN)
        del chain.transactions[tx_hash(1)]

        assert await scan_engine.collect_events(claim_entity, 101, 200) == []


class TestWalletDecoding:
    """Tests for distribution-wallet event extraction."""

    async def test_outgoing_native_transfers(
        self, scan_engine, chain, wallet_entity
    ):
        chain.add_native_transfer(1, 105, USER_A, 12 * ONE_TOKEN)
        # Not from the wallet
        chain.add_native_transfer(2, 105, USER_B, ONE_TOKEN, sender=USER_A)
        # Contract creation
        chain.add_native_transfer(3, 106, None, ONE_TOKEN)
        # Zero value
        chain.add_native_transfer(4, 106, USER_B, 0)

        events = await scan_engine.collect_events(wallet_entity, 100, 109)

        assert len(events) == 1
        event = events[0]
        assert event.recipient == USER_A
        assert event.from_address == DISTRIBUTION_WALLET
        assert event.value == event.token_amount == 12 * ONE_TOKEN
        assert event.log_index == -1
        assert event.token_type == TokenKind.NATIVE
        assert event.phase == Phase.TRANSFER
        assert chain.block_calls == list(range(100, 110))
