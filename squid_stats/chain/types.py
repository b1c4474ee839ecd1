"""Typed views of decoded transactions and play events."""

from dataclasses import dataclass, field
from typing import Any

from ..errors import MalformedEvent

# Call parameter carrying the NFT player ids taking part in a game
PLAYERS_PARAM = "_playersId"

# Fields the game contract emits for every finished play
PLAY_EVENT_FIELDS = ("gameIndex", "userWin", "rewardTokens", "rewardAmount")

_MISSING = object()


@dataclass(frozen=True)
class DecodedParam:
    """A single ABI-decoded value (call parameter or event field)."""

    name: str
    type: str
    value: Any

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict) -> "DecodedParam":
        return cls(name=data["name"], type=data.get("type", ""), value=data.get("value"))


@dataclass(frozen=True)
class DecodedEvent:
    """An ABI-decoded receipt log."""

    name: str
    address: str
    params: list[DecodedParam] = field(default_factory=list)

    def get(self, name: str, default: Any = None) -> Any:
        for param in self.params:
            if param.name == name:
                return param.value
        return default

    def has(self, *names: str) -> bool:
        return all(self.get(name, _MISSING) is not _MISSING for name in names)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "address": self.address,
            "events": [p.to_dict() for p in self.params],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DecodedEvent":
        return cls(
            name=data.get("name", ""),
            address=data.get("address", ""),
            params=[DecodedParam.from_dict(p) for p in data.get("events", [])],
        )


@dataclass(frozen=True)
class DecodedTransaction:
    """
    A transaction enriched with its decoded call and decoded receipt logs.

    `transaction` and `receipt` hold the raw RPC objects as plain JSON values.
    On-chain content never changes once confirmed, so instances are immutable.
    """

    tx_hash: str
    transaction: dict
    method: str
    params: list[DecodedParam]
    receipt: dict
    events: list[DecodedEvent]

    @property
    def sender(self) -> str:
        return self.transaction.get("from", "")

    @property
    def input(self) -> str:
        return self.transaction.get("input", "0x")

    @property
    def receipt_logs(self) -> list[dict]:
        return self.receipt.get("logs", [])

    def param(self, name: str, default: Any = None) -> Any:
        for param in self.params:
            if param.name == name:
                return param.value
        return default

    def to_record(self) -> dict:
        """Serialize to the on-disk transaction cache document."""
        return {
            "transaction": self.transaction,
            "data": {
                "method": self.method,
                "params": [p.to_dict() for p in self.params],
            },
            "receipt": self.receipt,
            "logs": [e.to_dict() for e in self.events],
        }

    @classmethod
    def from_record(cls, tx_hash: str, record: dict) -> "DecodedTransaction":
        data = record.get("data") or {}
        return cls(
            tx_hash=tx_hash,
            transaction=record.get("transaction") or {},
            method=data.get("method", ""),
            params=[DecodedParam.from_dict(p) for p in data.get("params", [])],
            receipt=record.get("receipt") or {},
            events=[DecodedEvent.from_dict(e) for e in record.get("logs", [])],
        )


@dataclass(frozen=True)
class PlayEvent:
    """The play-relevant fields of a decoded game transaction."""

    game_index: int
    user_win: bool
    players: list[str]
    reward_tokens: list[str]
    reward_amounts: list[int]

    @classmethod
    def from_transaction(cls, tx: DecodedTransaction) -> "PlayEvent":
        """
        Extract the play event from a decoded transaction.

        Raises:
            MalformedEvent: if any required field is missing, no players took
                part, or the reward arrays differ in length
        """
        players = tx.param(PLAYERS_PARAM)
        if players is None:
            raise MalformedEvent(f"{tx.tx_hash}: call parameter {PLAYERS_PARAM} missing")
        if not players:
            raise MalformedEvent(f"{tx.tx_hash}: no players in game")

        event = next((e for e in tx.events if e.has(*PLAY_EVENT_FIELDS)), None)
        if event is None:
            raise MalformedEvent(f"{tx.tx_hash}: no play event in receipt logs")

        reward_tokens = list(event.get("rewardTokens") or [])
        reward_amounts = [int(a) for a in event.get("rewardAmount") or []]
        if len(reward_tokens) != len(reward_amounts):
            raise MalformedEvent(
                f"{tx.tx_hash}: {len(reward_tokens)} reward tokens "
                f"but {len(reward_amounts)} reward amounts"
            )

        try:
            game_index = int(event.get("gameIndex"))
        except (TypeError, ValueError) as e:
            raise MalformedEvent(f"{tx.tx_hash}: bad gameIndex: {e}") from e

        return cls(
            game_index=game_index,
            user_win=_as_bool(event.get("userWin")),
            players=[str(p) for p in players],
            reward_tokens=[str(t) for t in reward_tokens],
            reward_amounts=reward_amounts,
        )


def _as_bool(value: Any) -> bool:
    # Older cache records may hold the flag as a string
    if isinstance(value, str):
        return value.lower() == "true"
    return bool(value)
