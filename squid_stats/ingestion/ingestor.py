"""Play ingestor - writes decoded play transactions to the database at most once."""

import enum
import logging
from dataclasses import dataclass

from ..chain import PlayEvent
from ..db import Game, Repository
from ..errors import DecodeFailed, MalformedEvent
from .transactions import TransactionService

logger = logging.getLogger(__name__)


class IngestStatus(enum.Enum):
    INSERTED = "inserted"
    ALREADY_PRESENT = "already_present"
    REJECTED = "rejected"


@dataclass(frozen=True)
class IngestOutcome:
    """Result of ingesting a single transaction."""

    tx_hash: str
    status: IngestStatus
    reason: str | None = None

    @classmethod
    def inserted(cls, tx_hash: str) -> "IngestOutcome":
        return cls(tx_hash, IngestStatus.INSERTED)

    @classmethod
    def already_present(cls, tx_hash: str) -> "IngestOutcome":
        return cls(tx_hash, IngestStatus.ALREADY_PRESENT)

    @classmethod
    def rejected(cls, tx_hash: str, reason: str) -> "IngestOutcome":
        return cls(tx_hash, IngestStatus.REJECTED, reason)


class PlayIngestor:
    """
    Turns play transactions into games, games_players and games_rewards rows.

    The transaction hash is the game id, so re-ingesting a hash is a no-op
    reported as ALREADY_PRESENT. A transaction is either written completely
    or not at all.
    """

    def __init__(self, transactions: TransactionService, repository: Repository):
        self.transactions = transactions
        self.repository = repository

    async def ingest(self, tx_hash: str, timestamp: int | None = None) -> IngestOutcome:
        """
        Ingest one play transaction.

        Args:
            tx_hash: Transaction hash
            timestamp: Block timestamp reported by the explorer, if known

        Returns:
            IngestOutcome; decode and event-shape problems are reported as
            REJECTED rather than raised
        """
        tx_hash = tx_hash.lower()
        try:
            tx = await self.transactions.get(tx_hash)
        except DecodeFailed as e:
            return IngestOutcome.rejected(tx_hash, f"undecodable: {e.reason}")

        try:
            play = PlayEvent.from_transaction(tx)
        except MalformedEvent as e:
            return IngestOutcome.rejected(tx_hash, f"malformed: {e}")

        game = Game(
            id=tx_hash,
            player=tx.sender,
            game_id=play.game_index,
            date=timestamp,
            win=1 if play.user_win else 0,
        )
        inserted = await self.repository.insert_game(
            game,
            players=play.players,
            rewards=list(zip(play.reward_tokens, play.reward_amounts)),
        )
        if not inserted:
            logger.debug(f"Game {tx_hash} already ingested")
            return IngestOutcome.already_present(tx_hash)

        logger.debug(
            f"Ingested game {tx_hash}: index={play.game_index} win={play.user_win} "
            f"players={len(play.players)} rewards={len(play.reward_tokens)}"
        )
        return IngestOutcome.inserted(tx_hash)
