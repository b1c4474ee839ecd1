"""Player statistics - recomputed from the games table on every request."""

import asyncio
import logging
import weakref
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from ..chain import ChainClient
from ..db import PlayerStat, Repository

logger = logging.getLogger(__name__)

# Reward tokens use 18 decimals
TOKEN_UNIT = 10**18

HOLDINGS_METHOD = "arrayUserPlayers"


def round_half_up(numerator: int, denominator: int, digits: int = 0) -> Decimal:
    """Round numerator/denominator to `digits` places, halves away from zero."""
    exponent = Decimal(1).scaleb(-digits)
    return (Decimal(numerator) / Decimal(denominator)).quantize(exponent, rounding=ROUND_HALF_UP)


@dataclass
class TotalStats:
    plays: int
    wins: int
    ratio: float


@dataclass
class TokenWinnings:
    token: str
    sum: float


@dataclass
class PlayerSummary:
    """Everything the stats endpoint reports for one wallet."""

    player: str
    stats: list[PlayerStat]
    total: TotalStats | None
    nfts: list[str]
    current_nft: list[Any]
    balance: int
    won: list[TokenWinnings] = field(default_factory=list)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {
            "player": self.player,
            "stats": [s.to_dict() for s in self.stats],
        }
        if self.total is not None:
            out["total"] = {
                "plays": self.total.plays,
                "wins": self.total.wins,
                "ratio": self.total.ratio,
            }
        out["nfts"] = self.nfts
        out["currentNFT"] = self.current_nft
        out["balance"] = self.balance
        out["won"] = [{"token": w.token, "sum": w.sum} for w in self.won]
        return out


class StatsAggregator:
    """
    Builds player summaries from the games table and the player NFT contract.

    Summaries of the same wallet are serialized, since rebuilding
    player_stats deletes and re-inserts that wallet's rows.
    """

    def __init__(self, repository: Repository, chain: ChainClient, player_contract: str):
        self.repository = repository
        self.chain = chain
        self.player_contract = player_contract
        # Entries disappear once no summary of that wallet holds the lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    async def rebuild_player_stats(self, player: str) -> list[PlayerStat]:
        """Replace the wallet's player_stats rows with fresh per-game aggregates."""
        stats = [
            PlayerStat(
                id=player,
                game_id=game_id,
                win=wins,
                total=total,
                ratio=float(round_half_up(wins, total, 2)),
            )
            for game_id, wins, total in await self.repository.aggregate_games(player)
        ]
        await self.repository.replace_player_stats(player, stats)
        return stats

    async def compute_summary(self, player: str) -> PlayerSummary:
        """
        Recompute and summarize a wallet's play history.

        Raises:
            StorageUnavailable: if the database cannot be read or written
        """
        player = player.lower()
        lock = self._locks.get(player)
        if lock is None:
            lock = self._locks[player] = asyncio.Lock()
        async with lock:
            await self.rebuild_player_stats(player)
            stats = await self.repository.get_player_stats(player)

        plays = sum(s.total for s in stats)
        wins = sum(s.win for s in stats)
        total = None
        if plays > 0:
            total = TotalStats(plays=plays, wins=wins, ratio=float(round_half_up(wins, plays, 2)))

        holdings = await self.get_holdings(player)

        return PlayerSummary(
            player=player,
            stats=stats,
            total=total,
            nfts=await self.repository.get_associates(player),
            current_nft=holdings,
            balance=self.average_balance(holdings),
            won=await self.get_won_amounts(player),
        )

    async def get_holdings(self, player: str) -> list[Any]:
        """NFT players currently owned by the wallet, as returned by the contract."""
        holdings = await self.chain.call_view(self.player_contract, HOLDINGS_METHOD, [player])
        return list(holdings or [])

    @staticmethod
    def average_balance(holdings: list[Any]) -> int:
        """Average of (value + 1) over held entries; zero when nothing is held."""
        if not holdings:
            return 0
        total = sum(int(entry[1]) + 1 for entry in holdings)
        return int(round_half_up(total, len(holdings)))

    async def get_won_amounts(self, player: str) -> list[TokenWinnings]:
        """Reward totals per token, in whole-token units."""
        sums: dict[str, int] = defaultdict(int)
        for token, amount in await self.repository.get_reward_amounts(player):
            sums[token] += amount
        return [TokenWinnings(token=token, sum=amount / TOKEN_UNIT) for token, amount in sums.items()]
