"""Player statistics and console output."""

from .dashboard import print_backfill_report, print_summary
from .stats import PlayerSummary, StatsAggregator, TokenWinnings, TotalStats

__all__ = [
    "StatsAggregator",
    "PlayerSummary",
    "TotalStats",
    "TokenWinnings",
    "print_summary",
    "print_backfill_report",
]
