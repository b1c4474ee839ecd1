"""Blockchain RPC access used by the decoder adapter and stats aggregator."""

import logging
from typing import Any, Protocol

from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import TransactionNotFound

from .abi import load_abi, to_plain

logger = logging.getLogger(__name__)


class ChainClient(Protocol):
    """Narrow view of an EVM node needed by squid-stats."""

    async def get_block_number(self) -> int:
        ...

    async def get_transaction(self, tx_hash: str) -> dict | None:
        ...

    async def get_transaction_receipt(self, tx_hash: str) -> dict | None:
        ...

    async def call_view(self, contract: str, method: str, args: list) -> Any:
        ...


class Web3ChainClient:
    """ChainClient backed by web3's async HTTP provider."""

    def __init__(self, rpc_url: str, abis: dict[str, str] | None = None):
        """
        Args:
            rpc_url: JSON-RPC endpoint
            abis: Contract address -> ABI file path, for view calls
        """
        self.rpc_url = rpc_url
        self._w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self._contracts: dict[str, Any] = {}
        for address, abi_path in (abis or {}).items():
            self._contracts[address.lower()] = self._w3.eth.contract(
                address=Web3.to_checksum_address(address),
                abi=load_abi(abi_path),
            )

    async def close(self):
        """Close the provider session if the web3 version exposes one."""
        disconnect = getattr(self._w3.provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()

    async def get_block_number(self) -> int:
        return int(await self._w3.eth.get_block_number())

    async def get_transaction(self, tx_hash: str) -> dict | None:
        try:
            tx = await self._w3.eth.get_transaction(tx_hash)
        except TransactionNotFound:
            logger.error(f"Can not get transaction by hash {tx_hash}")
            return None
        return to_plain(tx)

    async def get_transaction_receipt(self, tx_hash: str) -> dict | None:
        try:
            receipt = await self._w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            logger.error(f"Can not get receipt by hash {tx_hash}")
            return None
        return to_plain(receipt)

    async def call_view(self, contract: str, method: str, args: list) -> Any:
        instance = self._contracts.get(contract.lower())
        if instance is None:
            raise KeyError(f"No ABI registered for contract {contract}")

        call_args = [
            Web3.to_checksum_address(a) if isinstance(a, str) and Web3.is_address(a) else a
            for a in args
        ]
        result = await getattr(instance.functions, method)(*call_args).call()
        return to_plain(result)
