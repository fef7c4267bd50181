"""
WebSocket notification hub.

Broadcasts scanner events to every connected dashboard client and
answers the two request messages clients may send:

- get-stats -> stats-update
- get-recent-transactions -> transactions-update
"""

import asyncio
import json
from typing import Any

from aiohttp import WSMsgType, web
from loguru import logger

from airdrop_tracker.services.ledger import LedgerStore
from airdrop_tracker.services.ledger.serializers import (
    serialize_stats,
    serialize_transaction,
)

RECENT_TRANSACTIONS_LIMIT = 50


class WebSocketHub:
    """Fan-out of JSON frames {"event": ..., "data": ...} to clients."""

    def __init__(
        self,
        store: LedgerStore,
        recent_limit: int = RECENT_TRANSACTIONS_LIMIT,
    ):
        """
        Initialize hub.

        Args:
            store: Ledger store for request messages
            recent_limit: Transactions returned for get-recent-transactions
        """
        self.store = store
        self.recent_limit = recent_limit
        self.clients: set[web.WebSocketResponse] = set()
        self._pending: set[asyncio.Task] = set()

    @property
    def client_count(self) -> int:
        return len(self.clients)

    def publish(self, event_name: str, payload: Any) -> None:
        """
        Queue a frame for every connected client without waiting.

        Must be called from within the running event loop.
        """
        if not self.clients:
            return
        frame = {"event": event_name, "data": payload}
        for ws in list(self.clients):
            self._schedule(self._send(ws, frame))

    def _schedule(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, ws: web.WebSocketResponse, frame: dict) -> None:
        if ws.closed:
            self.clients.discard(ws)
            return
        try:
            await ws.send_json(frame)
        except (ConnectionError, RuntimeError) as e:
            logger.debug(f"[WebSocket] Dropping client: {e}")
            self.clients.discard(ws)

    async def handle(self, request: web.Request) -> web.WebSocketResponse:
        """aiohttp handler for the /ws endpoint."""
        ws = web.WebSocketResponse(heartbeat=30.0)
        await ws.prepare(request)

        self.clients.add(ws)
        logger.info(
            f"[WebSocket] Client connected ({self.client_count} total)"
        )

        try:
            async for msg in ws:
                if msg.type == WSMsgType.TEXT:
                    await self._handle_message(ws, msg.data)
                elif msg.type == WSMsgType.ERROR:
                    logger.warning(
                        f"[WebSocket] Connection error: {ws.exception()}"
                    )
        finally:
            self.clients.discard(ws)
            logger.info(
                f"[WebSocket] Client disconnected "
                f"({self.client_count} total)"
            )

        return ws

    async def _handle_message(
        self, ws: web.WebSocketResponse, raw: str
    ) -> None:
        request_name = parse_request(raw)

        if request_name == "get-stats":
            stats = await self.store.read_aggregate_stats()
            await ws.send_json(
                {"event": "stats-update", "data": serialize_stats(stats)}
            )
        elif request_name == "get-recent-transactions":
            transactions = await self.store.list_recent_transactions(
                self.recent_limit
            )
            await ws.send_json(
                {
                    "event": "transactions-update",
                    "data": [serialize_transaction(t) for t in transactions],
                }
            )
        else:
            logger.debug(f"[WebSocket] Unknown request: {raw[:100]}")

    async def close_all(self) -> None:
        """Close every client connection."""
        for ws in list(self.clients):
            await ws.close()
        self.clients.clear()


def parse_request(raw: str) -> str | None:
    """
    Extract the request name of a client frame.

    Accepts a bare name ("get-stats") or {"event": "get-stats"}.
    """
    text = raw.strip()
    if not text.startswith("{"):
        return text or None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    return data.get("event") or data.get("type")
