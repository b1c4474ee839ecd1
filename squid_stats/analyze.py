"""CLI tool to run a backfill or inspect a player's stats."""

import argparse
import asyncio
import json
import logging
import sys

from .analysis import print_backfill_report, print_summary
from .config import load_config
from .errors import FetchFailed, StorageUnavailable
from .logger import setup_app_logging
from .service import SquidStatsService

logger = logging.getLogger(__name__)


async def main_async(args):
    """Async main function."""
    config = load_config(args.config)
    if args.debug:
        config.logging.level = "DEBUG"
    setup_app_logging(config.logging.level)

    service = SquidStatsService(config)
    await service.start()
    try:
        if args.command == "backfill":
            report = await service.run_backfill(args.from_block, args.to_block)
            print_backfill_report(report)
        else:
            summary = await service.player_summary(args.player)
            if args.json:
                print(json.dumps(summary.to_dict(), indent=2))
            else:
                print_summary(summary)
    finally:
        await service.stop()


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Backfill squid game plays and inspect player statistics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Replay everything from the configured start block to the chain head
  python -m squid_stats.analyze backfill

  # Replay a fixed block range
  python -m squid_stats.analyze backfill --from-block 14000000 --to-block 14100000

  # Show a player's dashboard, or the raw JSON summary
  python -m squid_stats.analyze stats 0xabc...
  python -m squid_stats.analyze stats 0xabc... --json
        """,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    backfill = subparsers.add_parser("backfill", help="Ingest play transactions")
    backfill.add_argument("--from-block", type=int, default=None)
    backfill.add_argument("--to-block", type=int, default=None)

    stats = subparsers.add_parser("stats", help="Show a player's statistics")
    stats.add_argument("player", help="Player wallet address")
    stats.add_argument("--json", action="store_true", help="Print the JSON summary")

    args = parser.parse_args()

    try:
        asyncio.run(main_async(args))
    except (FetchFailed, StorageUnavailable, FileNotFoundError) as e:
        logging.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(0)


if __name__ == "__main__":
    main()
