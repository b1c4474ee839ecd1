"""Database repository for games, rewards and player stats."""

import asyncio
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

import aiosqlite

from ..errors import StorageUnavailable
from .models import SCHEMA, Game, GameReward, PlayerStat

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(action: str):
    try:
        yield
    except sqlite3.Error as e:
        raise StorageUnavailable(f"{action}: {e}") from e


class Repository:
    """Database repository for all persistence operations."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None
        # Every request shares one connection, so a commit or rollback ends
        # whatever transaction is open on it. Write transactions take turns.
        self._write_lock = asyncio.Lock()

    async def initialize(self):
        """Initialize the database and create tables."""
        # Ensure directory exists
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with _storage_errors(f"opening {self.db_path}"):
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row

            # Create tables
            await self._connection.executescript(SCHEMA)
            await self._connection.commit()

        logger.info(f"Database initialized at {self.db_path}")

    async def close(self):
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    @property
    def conn(self) -> aiosqlite.Connection:
        """Get the database connection."""
        if not self._connection:
            raise StorageUnavailable("Database not initialized. Call initialize() first.")
        return self._connection

    # Game Operations

    async def insert_game(
        self,
        game: Game,
        players: list[str],
        rewards: list[tuple[str, int]],
    ) -> bool:
        """
        Insert a game with its players and rewards in one transaction.

        Returns:
            True if the game was inserted, False if a game with the same id
            already exists (in which case nothing is written)
        """
        conn = self.conn
        async with self._write_lock:
            with _storage_errors(f"inserting game {game.id}"):
                try:
                    cursor = await conn.execute(
                        """
                        INSERT INTO games (id, player, game_id, date, win)
                        VALUES (?, ?, ?, ?, ?)
                        ON CONFLICT(id) DO NOTHING
                        """,
                        (game.id, game.player.lower(), game.game_id, game.date, game.win),
                    )
                    if cursor.rowcount == 0:
                        # Nothing was written; close the implicit transaction
                        await conn.commit()
                        return False

                    await conn.executemany(
                        "INSERT INTO games_players (games_id, player_id) VALUES (?, ?)",
                        [(game.id, player_id) for player_id in players],
                    )
                    await conn.executemany(
                        "INSERT INTO games_rewards (games_id, token, amount) VALUES (?, ?, ?)",
                        [(game.id, token, str(amount)) for token, amount in rewards],
                    )
                    await conn.commit()
                except sqlite3.Error:
                    await conn.rollback()
                    raise
        return True

    async def get_game(self, game_id: str) -> Game | None:
        """Get a game by transaction hash."""
        with _storage_errors(f"reading game {game_id}"):
            async with self.conn.execute(
                "SELECT * FROM games WHERE id = ?", (game_id,)
            ) as cursor:
                row = await cursor.fetchone()
        if not row:
            return None
        return Game(
            id=row["id"],
            player=row["player"],
            game_id=row["game_id"],
            date=row["date"],
            win=row["win"],
        )

    async def get_game_players(self, game_id: str) -> list[str]:
        with _storage_errors(f"reading players of {game_id}"):
            async with self.conn.execute(
                "SELECT player_id FROM games_players WHERE games_id = ? ORDER BY rowid",
                (game_id,),
            ) as cursor:
                rows = await cursor.fetchall()
        return [row["player_id"] for row in rows]

    async def get_game_rewards(self, game_id: str) -> list[GameReward]:
        with _storage_errors(f"reading rewards of {game_id}"):
            async with self.conn.execute(
                "SELECT * FROM games_rewards WHERE games_id = ? ORDER BY rowid",
                (game_id,),
            ) as cursor:
                rows = await cursor.fetchall()
        return [
            GameReward(games_id=row["games_id"], token=row["token"], amount=int(row["amount"]))
            for row in rows
        ]

    async def count_games(self, player: str) -> int:
        """Count games played by a wallet."""
        with _storage_errors(f"counting games of {player}"):
            async with self.conn.execute(
                "SELECT COUNT(*) AS count FROM games WHERE player = ?",
                (player.lower(),),
            ) as cursor:
                row = await cursor.fetchone()
        return row["count"] if row else 0

    # Player Stats Operations

    async def aggregate_games(self, player: str) -> list[tuple[int, int, int]]:
        """Group a wallet's games by game index as (game_id, wins, total) tuples."""
        with _storage_errors(f"aggregating games of {player}"):
            async with self.conn.execute(
                """
                SELECT game_id, SUM(win) AS wins, COUNT(*) AS total
                FROM games
                WHERE player = ?
                GROUP BY game_id
                ORDER BY game_id
                """,
                (player.lower(),),
            ) as cursor:
                rows = await cursor.fetchall()
        return [(row["game_id"], row["wins"], row["total"]) for row in rows]

    async def replace_player_stats(self, player: str, stats: list[PlayerStat]):
        """Delete every stats row of a wallet and insert `stats` in one transaction."""
        conn = self.conn
        async with self._write_lock:
            with _storage_errors(f"rebuilding stats of {player}"):
                try:
                    await conn.execute("DELETE FROM player_stats WHERE id = ?", (player.lower(),))
                    await conn.executemany(
                        """
                        INSERT INTO player_stats (id, game_id, win, total, ratio)
                        VALUES (?, ?, ?, ?, ?)
                        """,
                        [(s.id.lower(), s.game_id, s.win, s.total, s.ratio) for s in stats],
                    )
                    await conn.commit()
                except sqlite3.Error:
                    await conn.rollback()
                    raise

    async def get_player_stats(self, player: str) -> list[PlayerStat]:
        with _storage_errors(f"reading stats of {player}"):
            async with self.conn.execute(
                "SELECT * FROM player_stats WHERE id = ? ORDER BY game_id",
                (player.lower(),),
            ) as cursor:
                rows = await cursor.fetchall()
        return [
            PlayerStat(
                id=row["id"],
                game_id=row["game_id"],
                win=row["win"],
                total=row["total"],
                ratio=row["ratio"],
            )
            for row in rows
        ]

    async def get_associates(self, player: str) -> list[str]:
        """Distinct NFT player ids used in any game of a wallet."""
        with _storage_errors(f"reading associates of {player}"):
            async with self.conn.execute(
                """
                SELECT DISTINCT p.player_id
                FROM games_players p
                JOIN games g ON g.id = p.games_id
                WHERE g.player = ?
                ORDER BY p.player_id
                """,
                (player.lower(),),
            ) as cursor:
                rows = await cursor.fetchall()
        return [row["player_id"] for row in rows]

    async def get_reward_amounts(self, player: str) -> list[tuple[str, int]]:
        """All (token, amount) rewards across a wallet's games, ordered by token."""
        with _storage_errors(f"reading rewards of {player}"):
            async with self.conn.execute(
                """
                SELECT r.token, r.amount
                FROM games_rewards r
                JOIN games g ON g.id = r.games_id
                WHERE g.player = ?
                ORDER BY r.token
                """,
                (player.lower(),),
            ) as cursor:
                rows = await cursor.fetchall()
        return [(row["token"], int(row["amount"])) for row in rows]
