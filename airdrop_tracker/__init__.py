"""
Airdrop distribution tracker.

Scans the two 0G airdrop phases on chain and serves the results.
"""

__version__ = "1.0.0"
