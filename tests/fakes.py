"""Scripted chain reader and raw-data builders for tests."""

from typing import Any

from airdrop_tracker.services.chain_reader.types import (
    RawBlock,
    RawLog,
    RawTransaction,
)
from airdrop_tracker.services.scan_engine.constants import TRANSFER_TOPIC

CLAIM_CONTRACT = "0x6a9c6b5507e322aa00eb9c45e80c07ab63acabb6"
TOKEN = "0x1cd0690ff9a693f5ef2dd976660a8dafc81a109c"
DISTRIBUTION_WALLET = "0xb03e8e11730228c2d03270bcd1ab57818d7b6d8c"
ADMIN = "0xccd7af961ceda6bd383fea1ecc2ffaa410d991e9"

USER_A = "0x" + "a1" * 20
USER_B = "0x" + "b2" * 20
USER_C = "0x" + "c3" * 20
RELAY = "0x" + "dd" * 20

ONE_TOKEN = 10**18


def tx_hash(n: int) -> str:
    return "0x" + f"{n:064x}"


def address_topic(address: str) -> str:
    return "0x" + address.lower().removeprefix("0x").rjust(64, "0")


def transfer_log(
    n: int,
    block: int,
    sender: str,
    recipient: str,
    value: int,
    log_index: int = 0,
    token: str = TOKEN,
) -> RawLog:
    """Transfer log of transaction tx_hash(n)."""
    return RawLog(
        tx_hash=tx_hash(n),
        log_index=log_index,
        block_number=block,
        address=token,
        topics=[TRANSFER_TOPIC, address_topic(sender), address_topic(recipient)],
        data="0x" + f"{value:064x}",
    )


def native_tx(
    n: int, block: int, sender: str, recipient: str | None, value: int
) -> RawTransaction:
    return RawTransaction(
        hash=tx_hash(n),
        block_number=block,
        from_address=sender,
        to_address=recipient,
        value=value,
        gas=21000,
    )


class FakeChainReader:
    """
    In-memory chain.

    Failures are scripted per call: each list entry is raised by the
    next call of that method, None entries let the call through.
    """

    def __init__(self, height: int = 0):
        self.height = height
        self.logs: list[RawLog] = []
        self.transactions: dict[str, RawTransaction] = {}
        self.blocks: dict[int, RawBlock] = {}
        self.claimed: set[str] = set()

        self.height_failures: list[Exception | None] = []
        self.log_failures: list[Exception | None] = []
        self.block_failures: dict[int, list[Exception]] = {}

        self.log_calls: list[tuple[int, int]] = []
        self.block_calls: list[int] = []
        self.height_calls = 0

    # Scripting helpers

    def add_claim(
        self,
        n: int,
        block: int,
        claimant: str,
        value: int,
        sender: str = CLAIM_CONTRACT,
        log_index: int = 0,
        timestamp: int = 1_700_000_000,
    ) -> None:
        """Claim tx n by claimant whose W0G log moves value from sender."""
        self.logs.append(
            transfer_log(n, block, sender, CLAIM_CONTRACT, value, log_index)
        )
        self.transactions[tx_hash(n)] = RawTransaction(
            hash=tx_hash(n),
            block_number=block,
            from_address=claimant,
            to_address=CLAIM_CONTRACT,
            value=0,
            gas=120000,
        )
        self.blocks.setdefault(block, RawBlock(number=block, timestamp=timestamp))

    def add_native_transfer(
        self,
        n: int,
        block: int,
        recipient: str | None,
        value: int,
        sender: str = DISTRIBUTION_WALLET,
        timestamp: int = 1_700_000_000,
    ) -> None:
        existing = self.blocks.get(block)
        transactions = list(existing.transactions) if existing else []
        transactions.append(native_tx(n, block, sender, recipient, value))
        self.blocks[block] = RawBlock(
            number=block,
            timestamp=existing.timestamp if existing else timestamp,
            transactions=transactions,
        )

    @staticmethod
    def _maybe_fail(failures: list) -> None:
        if failures:
            error = failures.pop(0)
            if error is not None:
                raise error

    # ChainReader protocol

    async def current_height(self) -> int:
        self.height_calls += 1
        self._maybe_fail(self.height_failures)
        return self.height

    async def logs_in_range(
        self,
        address: str,
        event_signature: str,
        from_block: int,
        to_block: int,
        arg_filter: dict[str, Any] | None = None,
    ) -> list[RawLog]:
        self.log_calls.append((from_block, to_block))
        self._maybe_fail(self.log_failures)

        wanted_to = (arg_filter or {}).get("to")
        result = []
        for log in self.logs:
            if not from_block <= log.block_number <= to_block:
                continue
            if log.address != address.lower():
                continue
            if wanted_to and log.topics[2] != address_topic(wanted_to):
                continue
            result.append(log)
        return result

    async def transaction(self, tx_hash: str) -> RawTransaction | None:
        return self.transactions.get(tx_hash)

    async def block(self, number: int) -> RawBlock | None:
        self.block_calls.append(number)
        self._maybe_fail(self.block_failures.get(number, []))
        return self.blocks.get(number, RawBlock(number=number, timestamp=0))

    async def has_claimed(self, address: str) -> bool:
        return address.lower() in self.claimed
