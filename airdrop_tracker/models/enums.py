"""
Enumerations shared by models and services.
"""

from enum import Enum, IntEnum


class EntityKind(str, Enum):
    """Kind of watched on-chain entity."""

    CLAIM_CONTRACT = "claim_contract"
    DISTRIBUTION_WALLET = "distribution_wallet"


class TokenKind(str, Enum):
    """Token distributed in a phase."""

    W0G = "W0G"
    NATIVE = "0G"


class Phase(IntEnum):
    """Distribution phase."""

    CLAIM = 1
    TRANSFER = 2


class TransactionStatus(str, Enum):
    """On-chain status of a recorded transaction."""

    SUCCESS = "success"
    FAILED = "failed"
    PENDING = "pending"
