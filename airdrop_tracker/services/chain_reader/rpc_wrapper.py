"""
RPC Wrapper with Timeout and Error Classification.

Every RPC call of the chain reader goes through call_rpc so that
callers only ever see ChainReaderError subclasses.
"""

import asyncio
from typing import Any

from loguru import logger

from airdrop_tracker.utils.exceptions import (
    BlockchainTimeoutError,
    ChainReaderError,
    RateLimitError,
    is_rate_limit_error,
)

DEFAULT_RPC_TIMEOUT = 30.0


async def with_timeout(
    coro: Any,
    timeout: float = DEFAULT_RPC_TIMEOUT,
    operation_name: str = "RPC call",
) -> Any:
    """
    Execute async coroutine with timeout.

    Args:
        coro: Coroutine to execute
        timeout: Timeout in seconds
        operation_name: Operation name for logging

    Returns:
        Result of the coroutine

    Raises:
        BlockchainTimeoutError: If operation times out
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except TimeoutError as e:
        error_msg = f"{operation_name} timed out after {timeout}s"
        logger.error(f"[ChainReader] {error_msg}")
        raise BlockchainTimeoutError(error_msg) from e


def classify_chain_error(
    exc: Exception, operation_name: str = "RPC call"
) -> ChainReaderError:
    """
    Map a provider exception to the reader's error taxonomy.

    Args:
        exc: Exception raised by the provider
        operation_name: Operation name for the message

    Returns:
        RateLimitError for throttling, ChainReaderError otherwise
    """
    if isinstance(exc, ChainReaderError):
        return exc
    message = f"{operation_name} failed: {exc}"
    if is_rate_limit_error(exc):
        return RateLimitError(message)
    return ChainReaderError(message)


async def call_rpc(
    coro: Any,
    timeout: float = DEFAULT_RPC_TIMEOUT,
    operation_name: str = "RPC call",
) -> Any:
    """
    Execute an RPC coroutine with timeout and error classification.

    Raises:
        RateLimitError: Provider throttled the request
        ChainReaderError: Any other failure, including timeouts
    """
    try:
        return await with_timeout(
            coro, timeout=timeout, operation_name=operation_name
        )
    except asyncio.CancelledError:
        raise
    except Exception as e:
        raise classify_chain_error(e, operation_name) from e
