"""
Distribution analytics.

Summary logged after every full scan: top recipients, per-phase wallet
counts, overlap and how concentrated phase 1 is among the top ten.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from loguru import logger

from airdrop_tracker.models.airdrop_wallet import AirdropWallet
from airdrop_tracker.services.ledger import LedgerStore
from airdrop_tracker.utils.amounts import from_smallest_unit, parse_raw

TOP_RECIPIENTS = 10
CONCENTRATION_WARNING_PERCENT = Decimal("30")


@dataclass
class AnalyticsReport:
    """Result of one analytics pass. Amounts in whole tokens."""

    total_wallets: int = 0
    phase1_wallets: int = 0
    phase2_wallets: int = 0
    overlapping_wallets: int = 0
    average_w0g_per_wallet: Decimal | None = None
    top10_concentration_percent: Decimal | None = None
    top_recipients: list[tuple[str, Decimal, int]] = field(default_factory=list)

    @property
    def high_concentration(self) -> bool:
        return (
            self.top10_concentration_percent is not None
            and self.top10_concentration_percent > CONCENTRATION_WARNING_PERCENT
        )


class DistributionAnalytics:
    """Computes and logs the distribution summary."""

    def __init__(self, store: LedgerStore):
        self.store = store

    async def summarize(self) -> AnalyticsReport:
        """Build the report from current aggregates."""
        stats = await self.store.read_aggregate_stats()
        top: list[AirdropWallet] = await self.store.top_wallets(TOP_RECIPIENTS)

        report = AnalyticsReport(
            total_wallets=stats.total_wallets,
            phase1_wallets=stats.phase1_wallets,
            phase2_wallets=stats.phase2_wallets,
            overlapping_wallets=stats.overlapping_wallets,
            top_recipients=[
                (w.address, w.total_tokens, w.transaction_count) for w in top
            ],
        )

        total_w0g = from_smallest_unit(stats.total_w0g_distributed)
        if stats.phase1_wallets > 0:
            report.average_w0g_per_wallet = total_w0g / stats.phase1_wallets

        if stats.total_w0g_distributed > 0:
            top_phase1 = sum(parse_raw(w.phase1_amount) for w in top)
            report.top10_concentration_percent = (
                Decimal(top_phase1) * 100 / Decimal(stats.total_w0g_distributed)
            )
        return report

    def log_report(self, report: AnalyticsReport) -> None:
        logger.info(f"[Analytics] Top {TOP_RECIPIENTS} recipients:")
        for i, (address, total, count) in enumerate(report.top_recipients, 1):
            logger.info(f"[Analytics] {i}. {address}: {total:.2f} ({count} txs)")

        logger.info(
            f"[Analytics] Wallets: total={report.total_wallets}, "
            f"phase1={report.phase1_wallets}, "
            f"phase2={report.phase2_wallets}, "
            f"overlapping={report.overlapping_wallets}"
        )
        if report.average_w0g_per_wallet is not None:
            logger.info(
                f"[Analytics] Average W0G per wallet: "
                f"{report.average_w0g_per_wallet:.2f}"
            )
        if report.top10_concentration_percent is not None:
            logger.info(
                f"[Analytics] Top {TOP_RECIPIENTS} wallets hold "
                f"{report.top10_concentration_percent:.2f}% of all W0G"
            )
            if report.high_concentration:
                logger.warning(
                    "[Analytics] High concentration detected, "
                    "possible unfair distribution"
                )

    async def run(self) -> AnalyticsReport:
        """Summarize and log."""
        report = await self.summarize()
        self.log_report(report)
        return report
