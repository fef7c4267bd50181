"""
Initialization - Services Module.

Builds every long-lived service once and wires them together.
Nothing else in the process constructs a store, reader or engine.
"""

from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from airdrop_tracker.config.database import create_engine, create_session_maker
from airdrop_tracker.config.settings import Settings, settings
from airdrop_tracker.models.base import Base
from airdrop_tracker.services.analytics_service import DistributionAnalytics
from airdrop_tracker.services.chain_reader import ChainReader, Web3ChainReader
from airdrop_tracker.services.ledger import LedgerStore
from airdrop_tracker.services.notifications import (
    NotificationSink,
    WebSocketHub,
)
from airdrop_tracker.services.scan_engine import (
    ScanEngine,
    build_watched_entities,
)


@dataclass
class ServiceContainer:
    """Process-wide services."""

    settings: Settings
    db_engine: AsyncEngine
    session_maker: async_sessionmaker[AsyncSession]
    store: LedgerStore
    reader: ChainReader
    hub: WebSocketHub
    scanner: ScanEngine


def build_services(
    app_settings: Settings | None = None,
    reader: ChainReader | None = None,
    sink: NotificationSink | None = None,
    db_engine: AsyncEngine | None = None,
) -> ServiceContainer:
    """
    Build the service graph.

    Args:
        app_settings: Settings (default: module settings)
        reader: Chain reader (default: Web3ChainReader on settings.rpc_url)
        sink: Notification sink for the engine (default: the WebSocket hub)
        db_engine: Database engine (default: from settings.database_url)
    """
    cfg = app_settings or settings

    db_engine = db_engine or create_engine(cfg.database_url, cfg.database_echo)
    session_maker = create_session_maker(db_engine)
    store = LedgerStore(session_maker)

    if reader is None:
        reader = Web3ChainReader(
            rpc_url=cfg.rpc_url,
            claim_contract_address=cfg.claim_contract_address,
            timeout=cfg.rpc_timeout,
        )

    hub = WebSocketHub(store)
    scanner = ScanEngine(
        reader=reader,
        store=store,
        entities=build_watched_entities(cfg),
        sink=sink or hub,
        analytics=DistributionAnalytics(store),
        rate_limit_cooldown=cfg.rate_limit_cooldown,
        max_rate_limit_retries=cfg.max_rate_limit_retries,
        inter_batch_delay=cfg.inter_batch_delay,
    )

    logger.info("Services initialized successfully")
    return ServiceContainer(
        settings=cfg,
        db_engine=db_engine,
        session_maker=session_maker,
        store=store,
        reader=reader,
        hub=hub,
        scanner=scanner,
    )


async def initialize_storage(container: ServiceContainer) -> None:
    """
    Create missing tables, seed the checkpoint rows and clear scanning
    flags left by a process that was killed mid-scan.
    """
    url = container.db_engine.url
    if url.get_backend_name() == "sqlite" and url.database not in (
        None,
        "",
        ":memory:",
    ):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    async with container.db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    created = await container.store.ensure_checkpoints(
        container.scanner.entities
    )
    await container.store.clear_stale_scanning()
    logger.info(f"Storage ready ({created} checkpoints seeded)")
