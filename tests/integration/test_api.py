"""
Integration tests for the HTTP API.

Runs the aiohttp application against the in-memory ledger and the
scripted chain reader.
"""

import asyncio

import pytest
from aiohttp.test_utils import TestClient, TestServer

from airdrop_tracker.api.app import create_app
from airdrop_tracker.api.keys import BACKGROUND_TASKS_KEY
from airdrop_tracker.config.settings import Settings
from airdrop_tracker.initialization.services import (
    build_services,
    initialize_storage,
)
from airdrop_tracker.models.enums import Phase, TokenKind
from airdrop_tracker.services.ledger import DistributionEvent
from airdrop_tracker.utils.exceptions import ChainReaderError
from tests.fakes import (
    CLAIM_CONTRACT,
    DISTRIBUTION_WALLET,
    ONE_TOKEN,
    USER_A,
    USER_B,
    FakeChainReader,
    tx_hash,
)


@pytest.fixture
def api_chain():
    return FakeChainReader(height=100)


@pytest.fixture
async def container(db_engine, api_chain):
    app_settings = Settings(
        claim_genesis_block=100,
        wallet_genesis_block=100,
        wallet_batch_size=10,
        inter_batch_delay=0,
    )
    services = build_services(app_settings, reader=api_chain, db_engine=db_engine)
    await initialize_storage(services)
    return services


@pytest.fixture
async def client(container):
    app = create_app(container)
    async with TestClient(TestServer(app)) as test_client:
        yield test_client


async def seed_ledger(store):
    await store.record_event(
        DistributionEvent(
            tx_hash=tx_hash(1),
            log_index=3,
            block_number=150,
            from_address=USER_A,
            to_address=CLAIM_CONTRACT,
            recipient=USER_A,
            token_amount=5 * ONE_TOKEN,
            token_type=TokenKind.W0G,
            phase=Phase.CLAIM,
        )
    )
    await store.record_event(
        DistributionEvent(
            tx_hash=tx_hash(2),
            block_number=160,
            from_address=DISTRIBUTION_WALLET,
            to_address=USER_B,
            recipient=USER_B,
            value=12 * ONE_TOKEN + ONE_TOKEN // 2,
            token_amount=12 * ONE_TOKEN + ONE_TOKEN // 2,
            token_type=TokenKind.NATIVE,
            phase=Phase.TRANSFER,
        )
    )


class TestStatsAndWallets:
    """Tests for the read endpoints."""

    async def test_stats(self, client, container):
        await seed_ledger(container.store)

        resp = await client.get("/api/stats")

        assert resp.status == 200
        data = await resp.json()
        assert data["total_wallets"] == 2
        assert data["phase1_wallets"] == 1
        assert data["phase2_wallets"] == 1
        assert data["overlapping_wallets"] == 0
        assert data["total_w0g_distributed"] == str(5 * ONE_TOKEN)
        assert data["total_0g_distributed"] == "12.5"

    async def test_empty_stats(self, client):
        resp = await client.get("/api/stats")

        data = await resp.json()
        assert data["total_wallets"] == 0
        assert data["total_w0g_distributed"] == "0"
        assert data["total_0g_distributed"] == "0"

    async def test_wallet_list(self, client, container):
        await seed_ledger(container.store)

        resp = await client.get("/api/wallets", params={"limit": "1"})

        data = await resp.json()
        assert data["total"] == 2
        assert data["limit"] == 1
        assert data["offset"] == 0
        assert [w["address"] for w in data["wallets"]] == [USER_B]
        assert data["wallets"][0]["phase2_amount"] == "12.5"
        assert data["wallets"][0]["total_amount"] == "12.5"

    async def test_wallet_list_search(self, client, container):
        await seed_ledger(container.store)

        resp = await client.get("/api/wallets", params={"search": "A1A1"})

        data = await resp.json()
        assert data["total"] == 1
        assert data["wallets"][0]["address"] == USER_A
        assert data["wallets"][0]["phase1_amount"] == str(5 * ONE_TOKEN)

    async def test_invalid_limit(self, client):
        resp = await client.get("/api/wallets", params={"limit": "many"})

        assert resp.status == 400
        assert "error" in await resp.json()

    async def test_wallet_details(self, client, container, api_chain):
        await seed_ledger(container.store)
        api_chain.claimed.add(USER_A)

        resp = await client.get(f"/api/wallet/{USER_A.upper().replace('0X', '0x')}")

        assert resp.status == 200
        data = await resp.json()
        assert data["address"] == USER_A
        assert data["hasClaimed"] is True
        assert data["explorerUrl"].endswith(f"/address/{USER_A.upper().replace('0X', '0x')}")
        assert len(data["transactions"]) == 1
        assert data["transactions"][0]["log_index"] == 3
        assert data["transactions"][0]["token_type"] == "W0G"

    async def test_wallet_has_claimed_unavailable(
        self, client, container, api_chain
    ):
        await seed_ledger(container.store)

        async def failing_has_claimed(address):
            raise ChainReaderError("node down")

        api_chain.has_claimed = failing_has_claimed

        resp = await client.get(f"/api/wallet/{USER_B}")

        assert resp.status == 200
        assert (await resp.json())["hasClaimed"] is None

    async def test_wallet_not_found(self, client):
        resp = await client.get("/api/wallet/0x" + "ef" * 20)

        assert resp.status == 404
        assert await resp.json() == {"error": "Wallet not found"}

    async def test_wallet_invalid_address(self, client):
        resp = await client.get("/api/wallet/not-an-address")

        assert resp.status == 400

    async def test_recent_transactions(self, client, container):
        await seed_ledger(container.store)

        resp = await client.get("/api/transactions", params={"limit": "10"})

        data = await resp.json()
        assert [t["block_number"] for t in data] == [160, 150]
        assert data[0]["token_amount"] == str(12 * ONE_TOKEN + ONE_TOKEN // 2)

    async def test_top_wallets(self, client, container):
        await seed_ledger(container.store)

        resp = await client.get("/api/top-wallets", params={"limit": "5"})

        data = await resp.json()
        assert [w["address"] for w in data] == [USER_B, USER_A]

    async def test_search(self, client, container):
        await seed_ledger(container.store)

        resp = await client.get("/api/search", params={"q": "b2b2"})

        data = await resp.json()
        assert [w["address"] for w in data] == [USER_B]

    async def test_search_requires_query(self, client):
        resp = await client.get("/api/search", params={"q": "  "})

        assert resp.status == 400
        assert await resp.json() == {"error": "Search query required"}


class TestExport:
    """Tests for the CSV download."""

    async def test_csv_download(self, client, container):
        await seed_ledger(container.store)

        resp = await client.get("/api/export/csv")

        assert resp.status == 200
        assert resp.headers["Content-Type"].startswith("text/csv")
        assert "0g_airdrop_distribution.csv" in resp.headers["Content-Disposition"]
        body = await resp.read()
        assert body.startswith(b"\xef\xbb\xbf")
        lines = body.decode("utf-8-sig").splitlines()
        assert lines[0].startswith("Wallet Address,")
        assert lines[1].startswith(USER_B)
        assert lines[-1].startswith("TOTAL")


class TestScanner:
    """Tests for the scanner endpoints."""

    async def test_status(self, client):
        resp = await client.get("/api/scanner/status")

        assert resp.status == 200
        data = await resp.json()
        assert data["isScanning"] is False
        assert data["currentBlock"] == 100
        assert len(data["entities"]) == 2

    async def test_run_in_background(self, client, api_chain):
        api_chain.height = 200
        api_chain.add_claim(1, 150, claimant=USER_A, value=ONE_TOKEN)

        resp = await client.post("/api/scanner/run")

        assert resp.status == 200
        data = await resp.json()
        assert data["success"] is True
        assert data["message"] == "Scanner started in background"

        tasks = list(client.app[BACKGROUND_TASKS_KEY])
        await asyncio.gather(*tasks)

        resp = await client.get("/api/scanner/last-run")
        data = await resp.json()
        assert data["lastBlockScanned"] == 200
        assert data["totalTransactions"] == 1
        assert data["isScanning"] is False
        assert data["lastUpdate"] is not None

    async def test_run_from_block(self, client, api_chain):
        api_chain.height = 200

        resp = await client.post("/api/scanner/run", json={"fromBlock": 180})

        assert (await resp.json())["success"] is True
        await asyncio.gather(*client.app[BACKGROUND_TASKS_KEY])
        assert api_chain.log_calls == [(180, 200)]

    async def test_run_invalid_from_block(self, client):
        resp = await client.post("/api/scanner/run", json={"fromBlock": "abc"})

        assert resp.status == 400

    async def test_run_while_scanning(self, client, container, api_chain):
        gate = asyncio.Event()
        entered = asyncio.Event()

        async def blocking_height():
            entered.set()
            await gate.wait()
            return 100

        api_chain.current_height = blocking_height
        running = asyncio.create_task(container.scanner.run_full_scan())
        await entered.wait()

        resp = await client.post("/api/scanner/run")

        data = await resp.json()
        assert data["success"] is False
        assert data["message"] == "Scan already in progress"

        gate.set()
        await running


class TestMisc:
    """Methodology, CORS and health endpoints."""

    async def test_methodology(self, client):
        resp = await client.get("/api/methodology")

        data = await resp.json()
        assert data["phase1"]["airdropContract"] == CLAIM_CONTRACT
        assert data["phase2"]["wallet"] == DISTRIBUTION_WALLET
        assert "Chain ID: 16661" in data["verification"]["network"]

    async def test_cors_headers(self, client):
        resp = await client.get("/api/stats")

        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    async def test_health_without_scheduler(self, client):
        resp = await client.get("/health")

        assert resp.status == 200
        data = await resp.json()
        assert data["status"] == "healthy"
        assert data["scheduler_running"] is False

    async def test_readiness_and_liveness(self, client):
        ready = await client.get("/readiness")
        alive = await client.get("/liveness")

        assert ready.status == 200
        assert (await ready.json())["ready"] is True
        assert (await alive.json())["alive"] is True


class TestWebSocket:
    """Tests for the /ws push channel."""

    async def test_get_stats_request(self, client, container):
        await seed_ledger(container.store)

        async with client.ws_connect("/ws") as ws:
            await ws.send_str("get-stats")
            frame = await ws.receive_json(timeout=5)

        assert frame["event"] == "stats-update"
        assert frame["data"]["total_wallets"] == 2

    async def test_recent_transactions_request(self, client, container):
        await seed_ledger(container.store)

        async with client.ws_connect("/ws") as ws:
            await ws.send_json({"event": "get-recent-transactions"})
            frame = await ws.receive_json(timeout=5)

        assert frame["event"] == "transactions-update"
        assert [t["block_number"] for t in frame["data"]] == [160, 150]

    async def test_broadcast(self, client, container):
        async with client.ws_connect("/ws") as ws:
            # Reply proves the client is registered
            await ws.send_str("get-stats")
            await ws.receive_json(timeout=5)

            container.hub.publish("scan-progress", {"current": 10})
            frame = await ws.receive_json(timeout=5)

        assert frame == {"event": "scan-progress", "data": {"current": 10}}


class TestStartup:
    """Tests for storage initialization."""

    async def test_stale_scanning_flag_cleared(self, container, client):
        # Flag left behind by a process killed mid-scan
        await container.store.set_scanning(CLAIM_CONTRACT, True)

        await initialize_storage(container)

        resp = await client.get("/api/scanner/last-run")
        assert (await resp.json())["isScanning"] is False
        checkpoint = await container.store.get_checkpoint(CLAIM_CONTRACT)
        assert checkpoint.is_scanning is False
