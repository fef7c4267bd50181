"""
Web3 Chain Reader.

AsyncWeb3 implementation of the ChainReader protocol.
"""

from typing import Any

from eth_utils import to_checksum_address
from loguru import logger
from web3 import AsyncWeb3, Web3
from web3.exceptions import BlockNotFound, TransactionNotFound

from airdrop_tracker.config.constants import AIRDROP_ABI
from airdrop_tracker.utils.exceptions import ChainReaderError

from .rpc_wrapper import DEFAULT_RPC_TIMEOUT, call_rpc
from .types import RawBlock, RawLog, RawTransaction

# Indexed argument positions of Transfer(address,address,uint256)
TRANSFER_INDEXED_ARGS = ("from", "to")


def _to_hex(value: Any) -> str:
    """Normalize HexBytes/bytes/str to a lower-case 0x string."""
    if isinstance(value, (bytes, bytearray)):
        return Web3.to_hex(value).lower()
    text = str(value).lower()
    return text if text.startswith("0x") else f"0x{text}"


def _address_topic(address: str) -> str:
    """Left-pad an address to a 32-byte topic."""
    return "0x" + address.lower().removeprefix("0x").rjust(64, "0")


def _parse_transaction(tx: Any) -> RawTransaction:
    to_address = tx.get("to")
    return RawTransaction(
        hash=_to_hex(tx["hash"]),
        block_number=tx.get("blockNumber"),
        from_address=str(tx["from"]).lower(),
        to_address=str(to_address).lower() if to_address else None,
        value=int(tx.get("value", 0)),
        gas=tx.get("gas"),
    )


class Web3ChainReader:
    """
    Chain reader backed by an AsyncWeb3 HTTP provider.

    Holds no state besides the provider; safe to share between the
    scanner and the API.
    """

    def __init__(
        self,
        rpc_url: str,
        claim_contract_address: str,
        timeout: float = DEFAULT_RPC_TIMEOUT,
        w3: AsyncWeb3 | None = None,
    ):
        """
        Initialize reader.

        Args:
            rpc_url: HTTP RPC endpoint
            claim_contract_address: Contract exposing hasClaimed(address)
            timeout: Timeout per RPC call in seconds
            w3: Pre-built AsyncWeb3 instance (tests)
        """
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.w3 = w3 or AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(
                rpc_url, request_kwargs={"timeout": timeout}
            )
        )
        self.claim_contract_address = claim_contract_address.lower()
        self._claim_contract = self.w3.eth.contract(
            address=to_checksum_address(self.claim_contract_address),
            abi=AIRDROP_ABI,
        )

    async def current_height(self) -> int:
        """Get latest block number."""
        return int(
            await call_rpc(
                self.w3.eth.block_number,
                timeout=self.timeout,
                operation_name="eth_blockNumber",
            )
        )

    async def logs_in_range(
        self,
        address: str,
        event_signature: str,
        from_block: int,
        to_block: int,
        arg_filter: dict[str, Any] | None = None,
    ) -> list[RawLog]:
        """
        Get logs emitted by address for an event over [from_block, to_block].

        Args:
            address: Emitting contract
            event_signature: e.g. "Transfer(address,address,uint256)"
            from_block: First block (inclusive)
            to_block: Last block (inclusive)
            arg_filter: Indexed Transfer arguments ("from", "to")

        Returns:
            Normalized logs
        """
        topics: list[str | None] = [
            Web3.to_hex(Web3.keccak(text=event_signature))
        ]
        for arg_name in TRANSFER_INDEXED_ARGS:
            value = (arg_filter or {}).get(arg_name)
            topics.append(_address_topic(value) if value else None)
        while topics and topics[-1] is None:
            topics.pop()

        filter_params = {
            "fromBlock": from_block,
            "toBlock": to_block,
            "address": to_checksum_address(address),
            "topics": topics,
        }
        logs = await call_rpc(
            self.w3.eth.get_logs(filter_params),
            timeout=self.timeout,
            operation_name=f"eth_getLogs {from_block}-{to_block}",
        )

        result = []
        for log in logs:
            result.append(
                RawLog(
                    tx_hash=_to_hex(log["transactionHash"]),
                    log_index=int(log["logIndex"]),
                    block_number=int(log["blockNumber"]),
                    address=str(log["address"]).lower(),
                    topics=[_to_hex(t) for t in log["topics"]],
                    data=_to_hex(log["data"]),
                )
            )
        return result

    async def transaction(self, tx_hash: str) -> RawTransaction | None:
        """Get transaction by hash, None if unknown."""
        try:
            tx = await call_rpc(
                self.w3.eth.get_transaction(tx_hash),
                timeout=self.timeout,
                operation_name="eth_getTransactionByHash",
            )
        except ChainReaderError as e:
            if isinstance(e.__cause__, TransactionNotFound):
                return None
            raise
        if tx is None:
            return None
        return _parse_transaction(tx)

    async def block(self, number: int) -> RawBlock | None:
        """Get block with full transactions, None if unknown."""
        try:
            block = await call_rpc(
                self.w3.eth.get_block(number, full_transactions=True),
                timeout=self.timeout,
                operation_name=f"eth_getBlockByNumber {number}",
            )
        except ChainReaderError as e:
            if isinstance(e.__cause__, BlockNotFound):
                return None
            raise
        if block is None:
            return None

        transactions = [
            _parse_transaction(tx)
            for tx in block.get("transactions", [])
            if not isinstance(tx, (bytes, str))
        ]
        return RawBlock(
            number=int(block["number"]),
            timestamp=int(block["timestamp"]),
            transactions=transactions,
        )

    async def has_claimed(self, address: str) -> bool:
        """Call hasClaimed(address) on the claim contract."""
        result = await call_rpc(
            self._claim_contract.functions.hasClaimed(
                to_checksum_address(address)
            ).call(),
            timeout=self.timeout,
            operation_name="hasClaimed",
        )
        logger.debug(f"[ChainReader] hasClaimed -> {result}")
        return bool(result)
