"""PlayEvent extraction from decoded transactions."""

import pytest

from squid_stats.chain import DecodedParam, DecodedTransaction, PlayEvent
from squid_stats.errors import MalformedEvent

from conftest import ONE_TOKEN, PLAYER, TOKEN, play_event


def decoded(params=None, logs=None) -> DecodedTransaction:
    return DecodedTransaction.from_record(
        "0x01",
        {
            "transaction": {"hash": "0x01", "from": PLAYER, "input": "0x102f2110"},
            "data": {
                "method": "play",
                "params": [p.to_dict() for p in (params if params is not None else [
                    DecodedParam("_playersId", "uint256[]", [3, 4])
                ])],
            },
            "receipt": {"logs": [{"topics": []}]},
            "logs": logs if logs is not None else [play_event()],
        },
    )


def test_extracts_play_fields():
    play = PlayEvent.from_transaction(decoded())

    assert play.game_index == 5
    assert play.user_win is True
    assert play.players == ["3", "4"]
    assert play.reward_tokens == [TOKEN]
    assert play.reward_amounts == [ONE_TOKEN]


def test_skips_unrelated_events_before_the_play_event():
    transfer = {"name": "Transfer", "address": TOKEN, "events": [{"name": "value", "type": "uint256", "value": 1}]}
    play = PlayEvent.from_transaction(decoded(logs=[transfer, play_event(game_index=2)]))

    assert play.game_index == 2


def test_missing_players_param_is_malformed():
    with pytest.raises(MalformedEvent):
        PlayEvent.from_transaction(decoded(params=[]))


def test_empty_players_is_malformed():
    with pytest.raises(MalformedEvent):
        PlayEvent.from_transaction(decoded(params=[DecodedParam("_playersId", "uint256[]", [])]))


def test_string_win_flag_from_old_records():
    event = play_event()
    event["events"][1]["value"] = "false"

    assert PlayEvent.from_transaction(decoded(logs=[event])).user_win is False


def test_decoded_transaction_exposes_raw_fields():
    tx = decoded()

    assert tx.sender == PLAYER
    assert tx.input == "0x102f2110"
    assert tx.receipt_logs == [{"topics": []}]
