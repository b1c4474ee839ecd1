"""Block explorer API client."""

from .explorer import ExplorerTx, HistoryFetcher

__all__ = ["ExplorerTx", "HistoryFetcher"]
