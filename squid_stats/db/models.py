"""SQLite database schema and row models."""

from dataclasses import dataclass

SCHEMA = """
-- One row per ingested play transaction; id is the transaction hash
CREATE TABLE IF NOT EXISTS games (
    id TEXT PRIMARY KEY,
    player TEXT NOT NULL,
    game_id INTEGER NOT NULL,
    date INTEGER,
    win INTEGER NOT NULL
);

-- NFT player ids taking part in each game
CREATE TABLE IF NOT EXISTS games_players (
    games_id TEXT NOT NULL REFERENCES games(id),
    player_id TEXT NOT NULL
);

-- Reward amounts are uint256, stored as decimal strings
CREATE TABLE IF NOT EXISTS games_rewards (
    games_id TEXT NOT NULL REFERENCES games(id),
    token TEXT NOT NULL,
    amount TEXT NOT NULL
);

-- Derived per (player, game) aggregates, rebuilt from games on every read
CREATE TABLE IF NOT EXISTS player_stats (
    id TEXT NOT NULL,
    game_id INTEGER NOT NULL,
    win INTEGER NOT NULL,
    total INTEGER NOT NULL,
    ratio REAL NOT NULL
);

-- Indexes for common queries
CREATE INDEX IF NOT EXISTS idx_games_player ON games(player);
CREATE INDEX IF NOT EXISTS idx_games_players_games_id ON games_players(games_id);
CREATE INDEX IF NOT EXISTS idx_games_rewards_games_id ON games_rewards(games_id);
CREATE INDEX IF NOT EXISTS idx_player_stats_id ON player_stats(id);
"""


@dataclass
class Game:
    """A row of the games table."""

    id: str
    player: str
    game_id: int
    date: int | None
    win: int


@dataclass
class GameReward:
    """A row of the games_rewards table."""

    games_id: str
    token: str
    amount: int


@dataclass
class PlayerStat:
    """A row of the player_stats table."""

    id: str
    game_id: int
    win: int
    total: int
    ratio: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "game_id": self.game_id,
            "win": self.win,
            "total": self.total,
            "ratio": self.ratio,
        }
