"""Permanent disk cache of decoded transaction records."""

import json
import logging
from pathlib import Path
from typing import Awaitable, Callable

from ..chain.types import DecodedTransaction
from .files import atomic_write_text

logger = logging.getLogger(__name__)

ComputeFn = Callable[[str], Awaitable[DecodedTransaction]]


class TransactionRecordCache:
    """
    Stores one JSON document per transaction hash, never expiring.

    Files live at `<root>/<hash[2:4]>/<hash>.json`. Confirmed transactions
    are immutable, so a record once written is always served as-is.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path_for(self, tx_hash: str) -> Path:
        tx_hash = tx_hash.lower()
        return self.root / tx_hash[2:4] / f"{tx_hash}.json"

    def get(self, tx_hash: str) -> DecodedTransaction | None:
        """Return the cached record, or None if the hash was never stored."""
        path = self.path_for(tx_hash)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            return DecodedTransaction.from_record(tx_hash, json.load(f))

    async def get_or_compute(self, tx_hash: str, compute_fn: ComputeFn) -> DecodedTransaction:
        """
        Return the cached record or compute, persist and return it.

        Errors raised by `compute_fn` propagate and leave the cache untouched.
        """
        cached = self.get(tx_hash)
        if cached is not None:
            return cached

        decoded = await compute_fn(tx_hash)
        atomic_write_text(
            self.path_for(tx_hash),
            json.dumps(decoded.to_record(), indent=2),
        )
        logger.debug(f"Cached decoded transaction {tx_hash}")
        return decoded
