"""
Chain and protocol constants.

Fixed addresses of the two watched entities, token metadata and the ABI
fragments the chain reader needs.
"""

# ========================================================================
# CHAIN
# ========================================================================

CHAIN_ID = 16661
CHAIN_NAME = "0G Mainnet"
DEFAULT_RPC_URL = "https://evmrpc.0g.ai"
EXPLORER_URL = "https://chainscan.0g.ai"

# ========================================================================
# WATCHED ADDRESSES
# ========================================================================

CLAIM_CONTRACT_ADDRESS = "0x6a9c6b5507e322aa00eb9c45e80c07ab63acabb6"
W0G_TOKEN_ADDRESS = "0x1cd0690ff9a693f5ef2dd976660a8dafc81a109c"
DISTRIBUTION_WALLET_ADDRESS = "0xb03e8e11730228c2d03270bcd1ab57818d7b6d8c"
ADMIN_WALLET_ADDRESS = "0xccd7af961ceda6bd383fea1ecc2ffaa410d991e9"

# Last phase-1 block already covered by the legacy import
DEFAULT_GENESIS_BLOCK = 7207951

# ========================================================================
# TOKENS
# ========================================================================

TOKEN_DECIMALS = 18
PHASE1_TOKEN = "W0G"
PHASE2_TOKEN = "0G"

TOTAL_SUPPLY = 1_000_000_000

# ========================================================================
# ABI
# ========================================================================

TRANSFER_EVENT_SIGNATURE = "Transfer(address,address,uint256)"

AIRDROP_ABI = [
    {
        "inputs": [{"name": "user", "type": "address"}],
        "name": "hasClaimed",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    }
]

# Log index stored for native-value transfers, which emit no log
NATIVE_TRANSFER_LOG_INDEX = -1
