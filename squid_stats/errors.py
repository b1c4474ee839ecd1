"""Error taxonomy shared by the caches, ingestion and stats layers."""


class SquidStatsError(Exception):
    """Base class for all squid-stats errors."""


class FetchFailed(SquidStatsError):
    """Explorer or RPC endpoint unreachable and no cached copy to fall back on."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class DecodeFailed(SquidStatsError):
    """A transaction could not be fetched or its call input could not be decoded."""

    def __init__(self, tx_hash: str, reason: str):
        super().__init__(f"Cannot decode {tx_hash}: {reason}")
        self.tx_hash = tx_hash
        self.reason = reason


class MalformedEvent(SquidStatsError):
    """Decoded play data is missing fields or has misaligned reward arrays."""


class StorageUnavailable(SquidStatsError):
    """The relational store could not be opened or a statement failed."""
