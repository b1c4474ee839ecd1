"""Decoded transaction lookup backed by the transaction record cache."""

import logging

from ..cache import TransactionRecordCache
from ..chain import ChainClient, DecodedTransaction, TxDecoder
from ..errors import DecodeFailed

logger = logging.getLogger(__name__)


class TransactionService:
    """Produces DecodedTransactions, hitting the node only for unseen hashes."""

    def __init__(
        self,
        chain: ChainClient,
        decoder: TxDecoder,
        cache: TransactionRecordCache,
    ):
        self.chain = chain
        self.decoder = decoder
        self.cache = cache

    async def get(self, tx_hash: str) -> DecodedTransaction:
        """
        Get the decoded transaction for a hash.

        Raises:
            DecodeFailed: if the transaction or its receipt is missing, or the
                call input matches no known method
        """
        return await self.cache.get_or_compute(tx_hash, self._fetch_and_decode)

    async def _fetch_and_decode(self, tx_hash: str) -> DecodedTransaction:
        logger.debug(f"Fetching transaction {tx_hash}")

        transaction = await self.chain.get_transaction(tx_hash)
        if not transaction:
            raise DecodeFailed(tx_hash, "transaction not found")

        decoded = self.decoder.decode_method(transaction.get("input", "0x"))
        if decoded is None:
            raise DecodeFailed(tx_hash, "call input matches no known method")
        method, params = decoded

        receipt = await self.chain.get_transaction_receipt(tx_hash)
        if not receipt:
            raise DecodeFailed(tx_hash, "receipt not found")

        return DecodedTransaction(
            tx_hash=tx_hash,
            transaction=transaction,
            method=method,
            params=params,
            receipt=receipt,
            events=self.decoder.decode_logs(receipt.get("logs", [])),
        )
