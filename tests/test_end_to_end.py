"""Backfill and stats endpoints wired through SquidStatsService."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from squid_stats.ingestion import BackfillReport
from squid_stats.server import create_app
from squid_stats.service import SquidStatsService

from conftest import (
    ONE_TOKEN,
    PLAYER,
    TOKEN,
    ExplorerStub,
    FakeChain,
    FakeDecoder,
    explorer_row,
    make_config,
    play_event,
    play_input,
)

PLAY_HASH = "0x" + "cd" * 32
OTHER_HASH = "0x" + "ef" * 32
BROKEN_HASH = "0x" + "12" * 32


@pytest_asyncio.fixture
async def service(tmp_path):
    chain = FakeChain(head=10_000)
    stub = ExplorerStub()
    service = SquidStatsService(
        make_config(tmp_path),
        chain=chain,
        decoder=FakeDecoder(chain),
        http_client=stub.client(),
    )
    service.test_chain = chain
    service.test_explorer = stub
    await service.start()
    yield service
    await service.stop()


@pytest_asyncio.fixture
async def client(service):
    app = create_app(service, manage_lifecycle=False)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_single_play_flows_from_explorer_to_stats(service, client):
    service.test_chain.add_play(
        PLAY_HASH,
        players=[7],
        events=[play_event(game_index=5, user_win=True, reward_tokens=[TOKEN], reward_amounts=[ONE_TOKEN])],
    )
    service.test_explorer.rows_by_block = {
        42: [explorer_row(PLAY_HASH, 42, input=play_input(PLAY_HASH))],
    }

    r = await client.get("/parser")
    assert r.status_code == 200
    assert r.json()["status"] == "OK"
    assert r.json()["inserted"] == 1

    repository = service.repository
    assert (await repository.get_game(PLAY_HASH)).win == 1
    assert await repository.get_game_players(PLAY_HASH) == ["7"]
    [reward] = await repository.get_game_rewards(PLAY_HASH)
    assert reward.amount == 1_000_000_000_000_000_000

    r = await client.get(f"/stats/{PLAYER}")
    assert r.status_code == 200
    data = r.json()
    assert data["player"] == PLAYER
    assert data["total"] == {"plays": 1, "wins": 1, "ratio": 1.0}
    assert data["won"] == [{"token": TOKEN, "sum": 1}]
    assert data["nfts"] == ["7"]
    assert data["stats"] == [{"id": PLAYER, "game_id": 5, "win": 1, "total": 1, "ratio": 1.0}]
    assert "regulars" not in data
    assert "unusedNFT" not in data


@pytest.mark.asyncio
async def test_backfill_skips_bad_rows_and_is_repeatable(service):
    chain = service.test_chain
    chain.add_play(PLAY_HASH)
    chain.add_play(BROKEN_HASH, events=[play_event(reward_tokens=[TOKEN], reward_amounts=[])])
    service.test_explorer.rows_by_block = {
        1: [explorer_row(PLAY_HASH, 1, input=play_input(PLAY_HASH))],
        2: [explorer_row(OTHER_HASH, 2, input="0xa9059cbb" + "00" * 32)],
        3: [explorer_row(BROKEN_HASH, 3, input=play_input(BROKEN_HASH))],
    }

    first = await service.run_backfill()
    second = await service.run_backfill()

    assert first == BackfillReport(
        from_block=0,
        to_block=10_000,
        windows=1,
        rows_seen=3,
        candidates=2,
        inserted=1,
        already_present=0,
        rejected=1,
    )
    assert (second.inserted, second.already_present, second.rejected) == (0, 1, 1)
    # Second run is served from the response cache
    assert len(service.test_explorer.requests) == 1
    assert await service.repository.count_games(chain.transactions[PLAY_HASH]["from"]) == 1


@pytest.mark.asyncio
async def test_unreachable_explorer_fails_the_backfill_request(service, client):
    service.test_explorer.fail = True

    r = await client.get("/parser")

    assert r.status_code == 502
    assert r.json()["code"] == 502


@pytest.mark.asyncio
async def test_stats_report_storage_errors(service, client):
    await service.repository.close()

    r = await client.get(f"/stats/{PLAYER}")

    assert r.status_code == 503
    assert "Database not initialized" in r.json()["message"]
