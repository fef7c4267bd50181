"""
Watched entities.

The two fixed on-chain addresses whose activity is tracked.
"""

from dataclasses import dataclass

from airdrop_tracker.config.settings import Settings
from airdrop_tracker.models.enums import EntityKind


@dataclass(frozen=True)
class WatchedEntity:
    """
    Immutable scan target.

    A claim contract matches token Transfer events whose destination
    is the contract; a distribution wallet matches outgoing native
    transfers sent by the wallet.
    """

    kind: EntityKind
    address: str
    genesis_block: int
    batch_size: int
    token_address: str | None = None
    admin_address: str | None = None

    def __post_init__(self):
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if self.kind == EntityKind.CLAIM_CONTRACT and not self.token_address:
            raise ValueError("Claim contract entity requires token_address")

    @property
    def is_claim_contract(self) -> bool:
        return self.kind == EntityKind.CLAIM_CONTRACT

    @property
    def allowed_senders(self) -> frozenset[str]:
        """Log-level senders accepted for claim events."""
        senders = {self.address.lower()}
        if self.admin_address:
            senders.add(self.admin_address.lower())
        return frozenset(senders)


def build_watched_entities(settings: Settings) -> tuple[WatchedEntity, ...]:
    """Claim contract first, then distribution wallet."""
    return (
        WatchedEntity(
            kind=EntityKind.CLAIM_CONTRACT,
            address=settings.claim_contract_address,
            genesis_block=settings.claim_genesis_block,
            batch_size=settings.claim_batch_size,
            token_address=settings.token_address,
            admin_address=settings.admin_wallet_address,
        ),
        WatchedEntity(
            kind=EntityKind.DISTRIBUTION_WALLET,
            address=settings.distribution_wallet_address,
            genesis_block=settings.wallet_genesis_block,
            batch_size=settings.wallet_batch_size,
        ),
    )


def batch_ranges(
    start_block: int, end_block: int, batch_size: int
) -> list[tuple[int, int]]:
    """
    Split [start_block, end_block] into inclusive batches.

    Examples:
        >>> batch_ranges(101, 250, 100)
        [(101, 200), (201, 250)]
    """
    ranges = []
    current = start_block
    while current <= end_block:
        batch_end = min(current + batch_size - 1, end_block)
        ranges.append((current, batch_end))
        current = batch_end + 1
    return ranges
