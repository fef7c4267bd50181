"""
API routes.

Read-only views over the ledger plus the scanner trigger/status.
Every handler logs failures and answers {"error": ...}.
"""

import asyncio

from aiohttp import web
from loguru import logger

from airdrop_tracker.config.constants import (
    CHAIN_ID,
    CHAIN_NAME,
    EXPLORER_URL,
)
from airdrop_tracker.services.export_service import (
    CSV_FILENAME,
    build_distribution_csv,
)
from airdrop_tracker.services.ledger.serializers import (
    serialize_stats,
    serialize_transaction,
)
from airdrop_tracker.utils.datetime_utils import isoformat_or_none
from airdrop_tracker.utils.exceptions import ChainReaderError
from airdrop_tracker.utils.validation import is_valid_address

from .keys import BACKGROUND_TASKS_KEY, CONTAINER_KEY
from .serializers import explorer_address_url, serialize_wallet

MAX_PAGE_SIZE = 1000
WALLET_TRANSACTIONS_LIMIT = 50

routes = web.RouteTableDef()


class BadRequest(Exception):
    pass


def _int_param(
    request: web.Request,
    name: str,
    default: int,
    minimum: int = 0,
    maximum: int = MAX_PAGE_SIZE,
) -> int:
    """Parse a query integer and clamp it to [minimum, maximum]."""
    raw = request.query.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise BadRequest(f"Invalid integer for '{name}': {raw}") from e
    return max(minimum, min(maximum, value))


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


@web.middleware
async def error_middleware(request: web.Request, handler):
    """Map BadRequest to 400 and unexpected errors to 500."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except BadRequest as e:
        return _error(str(e), 400)
    except Exception as e:
        logger.exception(f"[API] {request.method} {request.path} failed: {e}")
        return _error("Internal server error", 500)


@routes.get("/api/stats")
async def get_stats(request: web.Request) -> web.Response:
    store = request.app[CONTAINER_KEY].store
    stats = await store.read_aggregate_stats()
    return web.json_response(serialize_stats(stats))


@routes.get("/api/wallets")
async def list_wallets(request: web.Request) -> web.Response:
    limit = _int_param(request, "limit", 100, minimum=1)
    offset = _int_param(request, "offset", 0, maximum=10**9)
    search = request.query.get("search") or None

    store = request.app[CONTAINER_KEY].store
    wallets = await store.list_wallets(search=search, limit=limit, offset=offset)
    total = await store.count_wallets(search)

    return web.json_response(
        {
            "wallets": [serialize_wallet(w) for w in wallets],
            "total": total,
            "limit": limit,
            "offset": offset,
        }
    )


@routes.get("/api/wallet/{address}")
async def get_wallet(request: web.Request) -> web.Response:
    address = request.match_info["address"]
    if not is_valid_address(address):
        return _error("Invalid wallet address", 400)

    container = request.app[CONTAINER_KEY]
    wallet = await container.store.get_wallet(address)
    if wallet is None:
        return _error("Wallet not found", 404)

    transactions = await container.store.list_transactions_for_wallet(
        address, limit=WALLET_TRANSACTIONS_LIMIT
    )
    try:
        has_claimed = await container.reader.has_claimed(address)
    except ChainReaderError as e:
        logger.warning(f"[API] hasClaimed unavailable: {e}")
        has_claimed = None

    data = serialize_wallet(wallet)
    data["transactions"] = [serialize_transaction(t) for t in transactions]
    data["hasClaimed"] = has_claimed
    data["explorerUrl"] = explorer_address_url(address)
    return web.json_response(data)


@routes.get("/api/transactions")
async def recent_transactions(request: web.Request) -> web.Response:
    limit = _int_param(request, "limit", 100, minimum=1)
    store = request.app[CONTAINER_KEY].store
    transactions = await store.list_recent_transactions(limit)
    return web.json_response([serialize_transaction(t) for t in transactions])


@routes.get("/api/top-wallets")
async def top_wallets(request: web.Request) -> web.Response:
    limit = _int_param(request, "limit", 100, minimum=1)
    store = request.app[CONTAINER_KEY].store
    wallets = await store.top_wallets(limit)
    return web.json_response([serialize_wallet(w) for w in wallets])


@routes.get("/api/search")
async def search_wallets(request: web.Request) -> web.Response:
    query = request.query.get("q", "").strip()
    if not query:
        return _error("Search query required", 400)

    limit = _int_param(request, "limit", 20, minimum=1, maximum=100)
    store = request.app[CONTAINER_KEY].store
    wallets = await store.search_wallets(query, limit=limit)
    return web.json_response([serialize_wallet(w) for w in wallets])


@routes.get("/api/export/csv")
async def export_csv(request: web.Request) -> web.Response:
    store = request.app[CONTAINER_KEY].store
    body = await build_distribution_csv(store)
    return web.Response(
        text=body,
        content_type="text/csv",
        charset="utf-8",
        headers={
            "Content-Disposition": f"attachment; filename={CSV_FILENAME}"
        },
    )


@routes.get("/api/scanner/status")
async def scanner_status(request: web.Request) -> web.Response:
    scanner = request.app[CONTAINER_KEY].scanner
    status = await scanner.get_status()
    return web.json_response(status.to_dict())


async def _run_scan_in_background(scanner, start_block: int | None) -> None:
    try:
        result = await scanner.run_full_scan(start_block)
        logger.info(
            f"[API] Background scan finished: success={result.success}, "
            f"events={result.events_found}"
        )
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.exception(f"[API] Background scan failed: {e}")


@routes.post("/api/scanner/run")
async def run_scanner(request: web.Request) -> web.Response:
    start_block = None
    if request.can_read_body:
        try:
            body = await request.json()
        except ValueError:
            return _error("Invalid JSON body", 400)
        raw = body.get("fromBlock") if isinstance(body, dict) else None
        if raw is not None:
            try:
                start_block = int(raw)
            except (TypeError, ValueError):
                return _error("Invalid fromBlock", 400)
            if start_block < 0:
                return _error("Invalid fromBlock", 400)

    container = request.app[CONTAINER_KEY]
    if container.scanner.is_scanning:
        return web.json_response(
            {
                "message": "Scan already in progress",
                "success": False,
                "info": "Check /api/scanner/status for progress",
            }
        )

    tasks = request.app[BACKGROUND_TASKS_KEY]
    task = asyncio.create_task(
        _run_scan_in_background(container.scanner, start_block)
    )
    tasks.add(task)
    task.add_done_callback(tasks.discard)

    return web.json_response(
        {
            "message": "Scanner started in background",
            "success": True,
            "info": "Check /api/scanner/status for progress",
        }
    )


@routes.get("/api/scanner/last-run")
async def scanner_last_run(request: web.Request) -> web.Response:
    scanner = request.app[CONTAINER_KEY].scanner
    last_run = await scanner.get_last_run()
    return web.json_response(
        {
            "lastBlockScanned": last_run["last_block_scanned"],
            "lastUpdate": isoformat_or_none(last_run["last_update"]),
            "totalTransactions": last_run["total_transactions"],
            "isScanning": last_run["is_scanning"],
        }
    )


@routes.get("/api/methodology")
async def methodology(request: web.Request) -> web.Response:
    cfg = request.app[CONTAINER_KEY].settings
    return web.json_response(
        {
            "phase1": {
                "method": "W0G Token Transfer Event Analysis",
                "token": cfg.token_address,
                "airdropContract": cfg.claim_contract_address,
                "description": (
                    "Tracking W0G transfers into the airdrop contract, "
                    "attributed to the claiming transaction's sender"
                ),
            },
            "phase2": {
                "method": "Direct Wallet Transaction Scan",
                "wallet": cfg.distribution_wallet_address,
                "description": (
                    "Scanning all outgoing native transfers from the "
                    "official airdrop wallet"
                ),
            },
            "verification": {
                "explorer": EXPLORER_URL,
                "network": f"{CHAIN_NAME} (Chain ID: {CHAIN_ID})",
                "rpc": cfg.rpc_url,
            },
        }
    )
