"""
Scan Engine Constants.
"""

from web3 import Web3

from airdrop_tracker.config.constants import TRANSFER_EVENT_SIGNATURE

# keccak256("Transfer(address,address,uint256)")
TRANSFER_TOPIC = Web3.to_hex(Web3.keccak(text=TRANSFER_EVENT_SIGNATURE))

# Transfer has two indexed arguments
TRANSFER_TOPIC_COUNT = 3

# Defaults mirrored by settings
DEFAULT_RATE_LIMIT_COOLDOWN = 5.0
DEFAULT_MAX_RATE_LIMIT_RETRIES = 10
DEFAULT_INTER_BATCH_DELAY = 0.1
