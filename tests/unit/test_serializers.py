"""Unit tests for the ledger JSON shapes."""

from datetime import UTC, datetime

from airdrop_tracker.services.ledger.models import AggregateStats
from airdrop_tracker.services.ledger.serializers import serialize_stats
from airdrop_tracker.services.notifications import websocket_hub
from airdrop_tracker.services.scan_engine import scanning_mixin

ONE_TOKEN = 10**18


class TestSerializeStats:
    """Tests for serialize_stats."""

    def test_phase_amount_formats(self):
        stats = AggregateStats(
            total_wallets=3,
            phase1_wallets=2,
            phase2_wallets=2,
            overlapping_wallets=1,
            total_w0g_distributed=105 * ONE_TOKEN,
            total_0g_distributed=25 * ONE_TOKEN + ONE_TOKEN // 4,
            last_block_scanned=300,
            last_update=datetime(2025, 1, 1, tzinfo=UTC),
        )

        data = serialize_stats(stats)

        assert data["total_w0g_distributed"] == "105000000000000000000"
        assert data["total_0g_distributed"] == "25.25"
        assert data["last_update"] == "2025-01-01T00:00:00+00:00"

    def test_engine_and_hub_share_the_ledger_shape(self):
        """Push frames use the same serializer as the HTTP API."""
        assert scanning_mixin.serialize_stats is serialize_stats
        assert websocket_hub.serialize_stats is serialize_stats
