"""
Exception types.

Chain errors are classified at the reader boundary so the scanner can
tell a rate limit (retry the batch) from any other failure (skip it).
"""

import re


class AirdropTrackerError(Exception):
    """Base exception for the tracker."""
    pass


class ChainReaderError(AirdropTrackerError):
    """Raised when a chain read fails."""
    pass


class RateLimitError(ChainReaderError):
    """Raised when the RPC provider throttles requests."""
    pass


class BlockchainTimeoutError(ChainReaderError):
    """Raised when blockchain RPC call times out."""
    pass


class EventDecodeError(AirdropTrackerError):
    """Raised when a raw log or transaction has an unexpected shape."""
    pass


class ScanAbortedError(AirdropTrackerError):
    """Raised when a scan cannot make progress and must stop."""
    pass


RATE_LIMIT_MARKERS = (
    "rate limit",
    "ratelimit",
    "too many requests",
    "request limit",
)

# 429 only counts inside a status phrase, never as part of a block or hash
RATE_LIMIT_STATUS_PATTERN = re.compile(
    r"\b(?:http|status|code|error)(?: code)?[\s:=]*429\b|\b429 client error\b"
)


def is_rate_limit_error(exc: BaseException) -> bool:
    """
    Check if exception signals provider throttling.

    Args:
        exc: Exception to check

    Returns:
        True for HTTP 429 responses and rate-limit RPC errors
    """
    if isinstance(exc, RateLimitError):
        return True
    status = getattr(exc, "status", None) or getattr(exc, "status_code", None)
    if status == 429:
        return True
    message = str(exc).lower()
    if any(marker in message for marker in RATE_LIMIT_MARKERS):
        return True
    return RATE_LIMIT_STATUS_PATTERN.search(message) is not None
