"""squid-stats: backfill on-chain game plays and serve per-player statistics."""

__version__ = "0.1.0"
