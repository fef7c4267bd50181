"""
CSV export of the distribution.

One row per wallet (ranked like the wallet list), a blank line and a
TOTAL row. Percentages refer to the fixed total supply.
"""

import csv
import io
from decimal import Decimal

from airdrop_tracker.config.constants import TOTAL_SUPPLY
from airdrop_tracker.services.ledger import LedgerStore
from airdrop_tracker.utils.amounts import format_number

CSV_FILENAME = "0g_airdrop_distribution.csv"
CSV_BOM = "\ufeff"
CSV_HEADERS = [
    "Wallet Address",
    "Phase 1 (0G)",
    "Phase 2 (0G)",
    "Total (0G)",
    "% of Total Supply",
    "Transaction Count",
]


def percent_of_supply(amount: Decimal) -> str:
    """Share of TOTAL_SUPPLY with six decimals: 0.000012%"""
    return f"{amount * 100 / Decimal(TOTAL_SUPPLY):.6f}%"


async def build_distribution_csv(store: LedgerStore) -> str:
    """
    Render the distribution as CSV text prefixed with a UTF-8 BOM.

    Args:
        store: Ledger store

    Returns:
        CSV document
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)

    total_phase1 = Decimal(0)
    total_phase2 = Decimal(0)
    wallet_count = 0

    async for wallet in store.iter_all_wallets():
        phase1 = wallet.phase1_tokens
        phase2 = wallet.phase2_tokens
        total = phase1 + phase2
        writer.writerow(
            [
                wallet.address,
                format_number(phase1),
                format_number(phase2),
                format_number(total),
                percent_of_supply(total),
                wallet.transaction_count,
            ]
        )
        total_phase1 += phase1
        total_phase2 += phase2
        wallet_count += 1

    grand_total = total_phase1 + total_phase2
    writer.writerow([])
    writer.writerow(
        [
            "TOTAL",
            format_number(total_phase1),
            format_number(total_phase2),
            format_number(grand_total),
            percent_of_supply(grand_total),
            wallet_count,
        ]
    )
    return CSV_BOM + buffer.getvalue()
