"""
Ledger Store.

Persistence of transaction records, wallet aggregates and checkpoints.
"""

from .core import LedgerStore
from .models import AggregateStats, DistributionEvent

__all__ = [
    "AggregateStats",
    "DistributionEvent",
    "LedgerStore",
]
