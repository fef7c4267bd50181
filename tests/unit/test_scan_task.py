"""Unit tests for the scheduled scan task and scheduler wiring."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from airdrop_tracker.services.scan_engine import ScanResult
from jobs.scheduler import SCAN_JOB_ID, create_scheduler
from jobs.tasks.scan_task import run_scheduled_scan


@pytest.fixture
def mock_scanner():
    scanner = MagicMock()
    scanner.is_scanning = False
    scanner.run_full_scan = AsyncMock(
        return_value=ScanResult(
            success=True, events_found=3, last_block_reached=500
        )
    )
    return scanner


class TestRunScheduledScan:
    """Tests for run_scheduled_scan."""

    async def test_reports_result(self, mock_scanner):
        results = await run_scheduled_scan(mock_scanner)

        assert results == {
            "success": True,
            "events": 3,
            "last_block": 500,
            "errors": [],
        }
        mock_scanner.run_full_scan.assert_awaited_once_with()

    async def test_skips_tick_while_scanning(self, mock_scanner):
        mock_scanner.is_scanning = True

        results = await run_scheduled_scan(mock_scanner)

        assert results["success"] is False
        assert results["errors"] == ["Scan already in progress"]
        mock_scanner.run_full_scan.assert_not_awaited()

    async def test_failed_scan_error_reported(self, mock_scanner):
        mock_scanner.run_full_scan.return_value = ScanResult(
            success=False, error="Rate limited on blocks 1-10 after 10 retries"
        )

        results = await run_scheduled_scan(mock_scanner)

        assert results["success"] is False
        assert results["errors"] == [
            "Rate limited on blocks 1-10 after 10 retries"
        ]

    async def test_unexpected_exception_caught(self, mock_scanner):
        mock_scanner.run_full_scan.side_effect = RuntimeError("db gone")

        results = await run_scheduled_scan(mock_scanner)

        assert results["success"] is False
        assert results["errors"] == ["db gone"]


class TestCreateScheduler:
    """Tests for create_scheduler."""

    def test_registers_interval_job(self, mock_scanner):
        scheduler = create_scheduler(mock_scanner, 300)

        job = scheduler.get_job(SCAN_JOB_ID)
        assert job is not None
        assert job.trigger.interval == timedelta(seconds=300)
        assert job.max_instances == 1
        assert job.coalesce is True
        assert job.args == (mock_scanner,)
        assert scheduler.running is False

    def test_single_job(self, mock_scanner):
        scheduler = create_scheduler(mock_scanner, 60, run_immediately=False)

        assert [job.id for job in scheduler.get_jobs()] == [SCAN_JOB_ID]
