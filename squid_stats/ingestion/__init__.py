"""Ingestion pipeline: selector filter, decoding, idempotent writes, backfill."""

from .backfill import Backfill, BackfillReport
from .ingestor import IngestOutcome, IngestStatus, PlayIngestor
from .selector import is_play_candidate
from .transactions import TransactionService

__all__ = [
    "Backfill",
    "BackfillReport",
    "IngestOutcome",
    "IngestStatus",
    "PlayIngestor",
    "TransactionService",
    "is_play_candidate",
]
