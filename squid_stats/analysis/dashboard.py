"""Console dashboard for player summaries and backfill runs."""

from ..ingestion import BackfillReport
from .stats import PlayerSummary


def format_tokens(value: float) -> str:
    """Format a token amount with K/M suffixes."""
    if value >= 1_000_000:
        return f"{value / 1_000_000:.2f}M"
    elif value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return f"{value:.2f}"


def create_bar(value: float, max_value: float, width: int = 20) -> str:
    """Create a simple ASCII progress bar."""
    if max_value <= 0:
        return " " * width
    filled = int((value / max_value) * width)
    filled = min(filled, width)
    return "█" * filled + "░" * (width - filled)


def print_header(title: str, width: int = 80):
    """Print a section header."""
    print()
    print("═" * width)
    print(f"  {title}")
    print("═" * width)


def print_subheader(title: str, width: int = 80):
    """Print a subsection header."""
    print()
    print(f"─── {title} " + "─" * (width - len(title) - 5))


def print_summary(summary: PlayerSummary):
    """Print the full player dashboard."""
    print()
    print("╔" + "═" * 78 + "╗")
    print("║" + " SQUID GAME PLAYER STATS ".center(78) + "║")
    print("╚" + "═" * 78 + "╝")

    print_header("PLAYER")
    print(f"  Wallet:       {summary.player}")
    print(f"  NFTs held:    {len(summary.current_nft)}")
    print(f"  Balance:      {summary.balance}")
    print(f"  NFTs played:  {len(summary.nfts)}")

    if summary.total is None:
        print_header("TOTALS")
        print("  No games recorded for this wallet.")
        return

    win_color = "\033[92m" if summary.total.ratio >= 0.5 else "\033[91m"
    reset = "\033[0m"

    print_header("TOTALS")
    print(f"  Plays:        {summary.total.plays:,}")
    print(f"  Wins:         {summary.total.wins:,}")
    print(f"  Win ratio:    {win_color}{summary.total.ratio * 100:.0f}%{reset}")

    print_subheader("PER GAME")
    print(f"  {'Game':>6}  {'Wins':>7}  {'Plays':>7}  {'Ratio':>6}  ")
    for stat in summary.stats:
        bar = create_bar(stat.ratio, 1.0)
        print(f"  {stat.game_id:>6}  {stat.win:>7,}  {stat.total:>7,}  {stat.ratio:>6.2f}  {bar}")

    if summary.won:
        print_subheader("REWARDS")
        for winnings in summary.won:
            print(f"  {winnings.token}  {format_tokens(winnings.sum):>12}")

    print()


def print_backfill_report(report: BackfillReport):
    """Print the counters of a backfill run."""
    print_header(f"BACKFILL {report.from_block} → {report.to_block}")
    print(f"  Windows:          {report.windows:,}")
    print(f"  Rows seen:        {report.rows_seen:,}")
    print(f"  Play candidates:  {report.candidates:,}")
    print(f"  Inserted:         {report.inserted:,}")
    print(f"  Already present:  {report.already_present:,}")
    print(f"  Rejected:         {report.rejected:,}")
    print()
