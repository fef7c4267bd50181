"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RPC_URL", "http://localhost:8545")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from airdrop_tracker.config.database import create_session_maker
from airdrop_tracker.models import Base
from airdrop_tracker.models.enums import EntityKind
from airdrop_tracker.services.ledger import LedgerStore
from airdrop_tracker.services.notifications import RecordingNotificationSink
from airdrop_tracker.services.scan_engine import ScanEngine, WatchedEntity
from tests.fakes import (
    ADMIN,
    CLAIM_CONTRACT,
    DISTRIBUTION_WALLET,
    TOKEN,
    FakeChainReader,
)


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return create_session_maker(db_engine)


@pytest.fixture
def store(session_maker):
    """Ledger store on the in-memory database."""
    return LedgerStore(session_maker)


@pytest.fixture
def claim_entity():
    return WatchedEntity(
        kind=EntityKind.CLAIM_CONTRACT,
        address=CLAIM_CONTRACT,
        genesis_block=100,
        batch_size=100,
        token_address=TOKEN,
        admin_address=ADMIN,
    )


@pytest.fixture
def wallet_entity():
    return WatchedEntity(
        kind=EntityKind.DISTRIBUTION_WALLET,
        address=DISTRIBUTION_WALLET,
        genesis_block=100,
        batch_size=10,
    )


@pytest.fixture
def chain():
    """Scripted chain reader."""
    return FakeChainReader(height=100)


@pytest.fixture
def sink():
    return RecordingNotificationSink()


@pytest.fixture
def mock_sleep():
    return AsyncMock()


@pytest.fixture
def scan_engine(chain, store, claim_entity, wallet_entity, sink, mock_sleep):
    """Engine over the fake chain and the in-memory ledger."""
    return ScanEngine(
        reader=chain,
        store=store,
        entities=[claim_entity, wallet_entity],
        sink=sink,
        rate_limit_cooldown=5.0,
        max_rate_limit_retries=3,
        inter_batch_delay=0.1,
        sleep=mock_sleep,
    )
