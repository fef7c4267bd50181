"""Tests for chain error classification and the RPC wrapper."""

import asyncio

import pytest

from airdrop_tracker.services.chain_reader.rpc_wrapper import (
    call_rpc,
    classify_chain_error,
    with_timeout,
)
from airdrop_tracker.utils.exceptions import (
    BlockchainTimeoutError,
    ChainReaderError,
    RateLimitError,
    is_rate_limit_error,
)


class HTTPError(Exception):
    def __init__(self, status):
        super().__init__(f"HTTP {status}")
        self.status = status


class TestIsRateLimitError:
    """Tests for is_rate_limit_error."""

    def test_message_marker(self):
        assert is_rate_limit_error(Exception("RPC rate limit exceeded"))

    @pytest.mark.parametrize(
        "message",
        [
            "HTTP 429",
            "status code 429 from provider",
            "429 Client Error: for url: https://evmrpc.0g.ai",
            "error code: 429",
        ],
    )
    def test_429_status_phrase(self, message):
        assert is_rate_limit_error(Exception(message))

    @pytest.mark.parametrize(
        "message",
        [
            "block 8429517 not found",
            "unknown transaction 0xab429c",
            "header not found for 429",
        ],
    )
    def test_429_digits_elsewhere_ignored(self, message):
        """A block number or hash containing 429 is not a rate limit."""
        assert not is_rate_limit_error(Exception(message))

    def test_too_many_requests(self):
        assert is_rate_limit_error(Exception("Too Many Requests"))

    def test_http_status(self):
        assert is_rate_limit_error(HTTPError(429))

    def test_other_status(self):
        assert not is_rate_limit_error(HTTPError(500))

    def test_plain_error(self):
        assert not is_rate_limit_error(ValueError("execution reverted"))


class TestClassifyChainError:
    """Tests for classify_chain_error."""

    def test_rate_limit(self):
        error = classify_chain_error(HTTPError(429), "eth_getLogs")
        assert isinstance(error, RateLimitError)
        assert "eth_getLogs" in str(error)

    def test_other(self):
        error = classify_chain_error(ValueError("boom"))
        assert type(error) is ChainReaderError

    def test_already_classified_passthrough(self):
        original = RateLimitError("slow down")
        assert classify_chain_error(original) is original


class TestCallRpc:
    """Tests for call_rpc and with_timeout."""

    async def test_returns_result(self):
        async def ok():
            return 42

        assert await call_rpc(ok()) == 42

    async def test_timeout(self):
        with pytest.raises(BlockchainTimeoutError):
            await with_timeout(asyncio.sleep(1), timeout=0.01)

    async def test_timeout_is_chain_error(self):
        with pytest.raises(ChainReaderError):
            await call_rpc(asyncio.sleep(1), timeout=0.01)

    async def test_rate_limit_classified(self):
        async def throttled():
            raise HTTPError(429)

        with pytest.raises(RateLimitError):
            await call_rpc(throttled())
