"""
Chain Reader types.

Plain values returned by a chain reader, already normalized:
hex strings for hashes/topics/data and lower-case addresses.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class RawLog:
    """Event log as returned by eth_getLogs."""

    tx_hash: str
    log_index: int
    block_number: int
    address: str
    topics: list[str]
    data: str


@dataclass(frozen=True)
class RawTransaction:
    """Transaction fields the scanner needs."""

    hash: str
    block_number: int | None
    from_address: str
    to_address: str | None  # None for contract creation
    value: int
    gas: int | None = None


@dataclass(frozen=True)
class RawBlock:
    """Block with full transaction objects."""

    number: int
    timestamp: int
    transactions: list[RawTransaction] = field(default_factory=list)


@runtime_checkable
class ChainReader(Protocol):
    """
    Read-only access to the chain.

    Implementations raise RateLimitError when the provider throttles
    and ChainReaderError for any other failure.
    """

    async def current_height(self) -> int: ...

    async def logs_in_range(
        self,
        address: str,
        event_signature: str,
        from_block: int,
        to_block: int,
        arg_filter: dict[str, Any] | None = None,
    ) -> list[RawLog]: ...

    async def transaction(self, tx_hash: str) -> RawTransaction | None: ...

    async def block(self, number: int) -> RawBlock | None: ...

    async def has_claimed(self, address: str) -> bool: ...
