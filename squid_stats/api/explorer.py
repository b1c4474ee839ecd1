"""Block explorer txlist client - walks a contract's history in block windows."""

import json
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx

from ..cache import ResponseCache

logger = logging.getLogger(__name__)

# Effectively forever; finalized txlist windows never change
DEFAULT_TTL_SECONDS = 30 * 24 * 60 * 60

NO_TRANSACTIONS = "No transactions found"


def is_final_answer(body: str) -> bool:
    """
    True for a txlist result list or an empty window.

    Rate-limit and other NOTOK answers also arrive with HTTP 200.
    """
    try:
        envelope = json.loads(body)
    except json.JSONDecodeError:
        return False
    if not isinstance(envelope, dict):
        return False
    if str(envelope.get("status")) == "1":
        return True
    return envelope.get("message") == NO_TRANSACTIONS


@dataclass
class ExplorerTx:
    """A single row of the explorer's txlist result."""

    hash: str
    block_number: int
    timestamp: int
    from_address: str
    to_address: str
    input: str
    is_error: bool

    @classmethod
    def from_row(cls, row: dict) -> "ExplorerTx":
        return cls(
            hash=row.get("hash", ""),
            block_number=int(row.get("blockNumber", 0)),
            timestamp=int(row.get("timeStamp", 0)),
            from_address=row.get("from", ""),
            to_address=row.get("to", ""),
            input=row.get("input", "0x"),
            is_error=str(row.get("isError", "0")) == "1",
        )


class HistoryFetcher:
    """Fetches transactions sent to a contract, one block window at a time."""

    def __init__(
        self,
        cache: ResponseCache,
        api_base: str,
        api_key: str,
        window_size: int = 10_000,
        page_size: int = 10_000,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
    ):
        if window_size <= 0:
            raise ValueError("window_size must be positive")
        self.cache = cache
        self.api_base = api_base
        self.api_key = api_key
        self.window_size = window_size
        self.page_size = page_size
        self.ttl_seconds = ttl_seconds
        self.windows_fetched = 0

    def build_url(self, address: str, start_block: int, end_block: int) -> str:
        """Build the txlist query for the inclusive block range [start, end]."""
        params = {
            "module": "account",
            "action": "txlist",
            "address": address,
            "startblock": start_block,
            "endblock": end_block,
            "page": 1,
            "offset": self.page_size,
            "sort": "asc",
            "apikey": self.api_key,
        }
        return str(httpx.URL(self.api_base, params=params))

    async def fetch_range(
        self,
        address: str,
        from_block: int,
        to_block: int,
    ) -> AsyncIterator[ExplorerTx]:
        """
        Yield successful transactions to `address` in blocks [from_block, to_block).

        Rows come out in block-ascending order. Windows are served from the
        response cache, so walking the same range twice downloads nothing new.
        """
        block = from_block
        while block < to_block:
            window_end = min(block + self.window_size, to_block)
            url = self.build_url(address, block, window_end - 1)
            logger.info(f"Downloading blocks {block}-{window_end - 1}")

            body = await self.cache.get(url, self.ttl_seconds, cacheable=is_final_answer)
            self.windows_fetched += 1

            for row in self._parse_window(body, block, window_end):
                if row.is_error:
                    logger.debug(f"Skipping reverted transaction {row.hash}")
                    continue
                yield row

            block = window_end

    def _parse_window(self, body: str, start: int, end: int) -> list[ExplorerTx]:
        try:
            envelope = json.loads(body)
        except json.JSONDecodeError:
            logger.warning(f"Window {start}-{end - 1}: response is not JSON, skipping")
            return []

        if not isinstance(envelope, dict) or str(envelope.get("status")) != "1":
            message = envelope.get("message") if isinstance(envelope, dict) else None
            logger.debug(f"Window {start}-{end - 1}: no data ({message or 'non-success status'})")
            return []

        result = envelope.get("result")
        if not isinstance(result, list):
            return []
        return [ExplorerTx.from_row(row) for row in result]
