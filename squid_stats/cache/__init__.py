"""Content-addressed disk caches."""

from .response_cache import ResponseCache
from .transaction_cache import TransactionRecordCache

__all__ = ["ResponseCache", "TransactionRecordCache"]
