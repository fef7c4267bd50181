"""Tests for the CSV export."""

from decimal import Decimal
from unittest.mock import MagicMock

from airdrop_tracker.models.airdrop_wallet import AirdropWallet
from airdrop_tracker.services.export_service import (
    CSV_BOM,
    build_distribution_csv,
    percent_of_supply,
)
from tests.fakes import ONE_TOKEN, USER_A, USER_B


def store_with(wallets):
    async def iter_all_wallets():
        for w in wallets:
            yield w

    store = MagicMock()
    store.iter_all_wallets = iter_all_wallets
    return store


class TestPercentOfSupply:
    """Tests for percent_of_supply."""

    def test_six_decimals(self):
        assert percent_of_supply(Decimal("17.5")) == "0.000002%"

    def test_whole_supply(self):
        assert percent_of_supply(Decimal(1_000_000_000)) == "100.000000%"


class TestBuildDistributionCsv:
    """Tests for build_distribution_csv."""

    async def test_rows_and_summary(self):
        wallets = [
            AirdropWallet(
                address=USER_A,
                phase1_amount=str(1234 * ONE_TOKEN + ONE_TOKEN // 2),
                phase2_amount="0",
                transaction_count=1,
            ),
            AirdropWallet(
                address=USER_B,
                phase1_amount=str(5 * ONE_TOKEN),
                phase2_amount=str(12 * ONE_TOKEN + ONE_TOKEN // 2),
                transaction_count=2,
            ),
        ]

        body = await build_distribution_csv(store_with(wallets))

        assert body.startswith(CSV_BOM)
        lines = body[len(CSV_BOM):].split("\n")
        assert lines[0] == (
            "Wallet Address,Phase 1 (0G),Phase 2 (0G),Total (0G),"
            "% of Total Supply,Transaction Count"
        )
        assert lines[1] == (
            f'{USER_A},"1,234.50",0.00,"1,234.50",0.000123%,1'
        )
        assert lines[2] == f"{USER_B},5.00,12.50,17.50,0.000002%,2"
        assert lines[3] == ""
        assert lines[4] == 'TOTAL,"1,239.50",12.50,"1,252.00",0.000125%,2'

    async def test_empty_export_has_summary(self):
        body = await build_distribution_csv(store_with([]))

        lines = body[len(CSV_BOM):].split("\n")
        assert lines[1] == ""
        assert lines[2] == "TOTAL,0.00,0.00,0.00,0.000000%,0"
