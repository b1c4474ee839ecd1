"""Shared fakes and fixtures for the squid-stats tests."""

import json
from typing import Any

import httpx
import pytest
import pytest_asyncio

from squid_stats.chain import DecodedEvent, DecodedParam
from squid_stats.config import (
    CacheConfig,
    ChainConfig,
    Config,
    DatabaseConfig,
    ExplorerConfig,
    LoggingConfig,
    ServerConfig,
)
from squid_stats.db import Repository

GAME_CONTRACT = "0x1111111111111111111111111111111111111111"
PLAYER_CONTRACT = "0x2222222222222222222222222222222222222222"
PLAYER = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
TOKEN = "0x3333333333333333333333333333333333333333"
ONE_TOKEN = 10**18
PLAY_SELECTOR = "0x102f211"
PLAY_INPUT = "0x102f2110" + "00" * 32


def play_input(tx_hash: str) -> str:
    return "0x102f2110" + tx_hash[2:]


def play_event(
    game_index: int = 5,
    user_win: bool = True,
    reward_tokens: list[str] | None = None,
    reward_amounts: list[int] | None = None,
) -> dict:
    """A decoded play log in the on-disk record format."""
    return DecodedEvent(
        name="GamePlayed",
        address=GAME_CONTRACT,
        params=[
            DecodedParam("gameIndex", "uint256", game_index),
            DecodedParam("userWin", "bool", user_win),
            DecodedParam("rewardTokens", "address[]", reward_tokens if reward_tokens is not None else [TOKEN]),
            DecodedParam("rewardAmount", "uint256[]", reward_amounts if reward_amounts is not None else [ONE_TOKEN]),
        ],
    ).to_dict()


class FakeChain:
    """In-memory ChainClient with call counters."""

    def __init__(self, head: int = 30_000):
        self.head = head
        self.transactions: dict[str, dict] = {}
        self.receipts: dict[str, dict] = {}
        self.holdings: dict[str, list] = {}
        self.transaction_calls = 0
        self.view_calls: list[tuple[str, str, list]] = []

    def add_play(
        self,
        tx_hash: str,
        sender: str = PLAYER,
        players: list[Any] | None = None,
        events: list[dict] | None = None,
    ):
        self.transactions[tx_hash] = {
            "hash": tx_hash,
            "from": sender,
            "input": play_input(tx_hash),
            "players": players if players is not None else [7],
        }
        self.receipts[tx_hash] = {
            "transactionHash": tx_hash,
            "logs": events if events is not None else [play_event()],
        }

    async def get_block_number(self) -> int:
        return self.head

    async def get_transaction(self, tx_hash: str) -> dict | None:
        self.transaction_calls += 1
        return self.transactions.get(tx_hash)

    async def get_transaction_receipt(self, tx_hash: str) -> dict | None:
        return self.receipts.get(tx_hash)

    async def call_view(self, contract: str, method: str, args: list) -> Any:
        self.view_calls.append((contract, method, args))
        return self.holdings.get(args[0], [])


class FakeDecoder:
    """
    TxDecoder over FakeChain data.

    The call parameters are read from the transaction's `players` field and
    receipt logs are already in decoded form.
    """

    def __init__(self, chain: FakeChain):
        self.chain = chain

    def decode_method(self, call_input: str):
        if not call_input.startswith(PLAY_SELECTOR):
            return None
        for tx in self.chain.transactions.values():
            if tx["input"] == call_input:
                return "play", [DecodedParam("_playersId", "uint256[]", tx["players"])]
        return None

    def decode_logs(self, logs: list[dict]) -> list[DecodedEvent]:
        return [DecodedEvent.from_dict(log) for log in logs]


def explorer_body(rows: list[dict], status: str = "1") -> str:
    return json.dumps(
        {
            "status": status,
            "message": "OK" if status == "1" else "No transactions found",
            "result": rows,
        }
    )


def explorer_row(tx_hash: str, block: int, input: str = PLAY_INPUT, **extra) -> dict:
    row = {
        "hash": tx_hash,
        "blockNumber": str(block),
        "timeStamp": str(1_640_000_000 + block),
        "from": PLAYER,
        "to": GAME_CONTRACT,
        "input": input,
        "isError": "0",
    }
    row.update(extra)
    return row


class ExplorerStub:
    """httpx transport answering txlist queries from a block -> rows map."""

    def __init__(self, rows_by_block: dict[int, list[dict]] | None = None):
        self.rows_by_block = rows_by_block or {}
        self.requests: list[httpx.Request] = []
        self.fail = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            raise httpx.ConnectError("explorer unreachable", request=request)
        start = int(request.url.params["startblock"])
        end = int(request.url.params["endblock"])
        rows = [
            row
            for block, block_rows in sorted(self.rows_by_block.items())
            if start <= block <= end
            for row in block_rows
        ]
        if not rows:
            return httpx.Response(200, text=explorer_body([], status="0"))
        return httpx.Response(200, text=explorer_body(rows))

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def make_config(tmp_path) -> Config:
    return Config(
        chain=ChainConfig(
            rpc_url="http://localhost:8545",
            game_contract=GAME_CONTRACT,
            player_contract=PLAYER_CONTRACT,
            start_block=0,
            game_abi=str(tmp_path / "game.json"),
            player_abi=str(tmp_path / "player.json"),
        ),
        explorer=ExplorerConfig(
            api_base="https://explorer.test/api",
            api_key="test-key",
            window_size=10_000,
        ),
        cache=CacheConfig(
            response_dir=str(tmp_path / "cache"),
            transaction_dir=str(tmp_path / "cache" / "transactions"),
        ),
        database=DatabaseConfig(path=str(tmp_path / "db" / "rating.sqlite")),
        logging=LoggingConfig(
            level="DEBUG",
            file=str(tmp_path / "logs" / "test.log"),
            max_file_size_mb=1,
            backup_count=1,
        ),
        server=ServerConfig(),
    )


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def decoder(chain) -> FakeDecoder:
    return FakeDecoder(chain)


@pytest_asyncio.fixture
async def repository(tmp_path):
    repo = Repository(tmp_path / "rating.sqlite")
    await repo.initialize()
    yield repo
    await repo.close()
