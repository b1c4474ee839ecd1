"""Database layer."""

from .models import SCHEMA, Game, GameReward, PlayerStat
from .repository import Repository

__all__ = ["SCHEMA", "Repository", "Game", "GameReward", "PlayerStat"]
