"""
Scan Engine.

Incremental chain scanning and aggregation.
"""

from .core import ScanEngine
from .entities import WatchedEntity, batch_ranges, build_watched_entities
from .models import EntityScanResult, EntityStatus, ScanResult, ScanStatus

__all__ = [
    "EntityScanResult",
    "EntityStatus",
    "ScanEngine",
    "ScanResult",
    "ScanStatus",
    "WatchedEntity",
    "batch_ranges",
    "build_watched_entities",
]
