"""
Chain Reader.

Read-only chain access used by the scan engine and the API.
"""

from .types import ChainReader, RawBlock, RawLog, RawTransaction
from .web3_reader import Web3ChainReader

__all__ = [
    "ChainReader",
    "RawBlock",
    "RawLog",
    "RawTransaction",
    "Web3ChainReader",
]
