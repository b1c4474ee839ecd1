"""Selector filter."""

from squid_stats.ingestion import is_play_candidate


def test_matching_prefix_is_a_candidate():
    assert is_play_candidate("0x102f2110000abc", "0x102f211")


def test_match_ignores_case():
    assert is_play_candidate("0X102F2110000ABC", "0x102f211")


def test_other_methods_are_dropped():
    assert not is_play_candidate("0xa9059cbb0000", "0x102f211")


def test_empty_input_is_dropped():
    assert not is_play_candidate("0x", "0x102f211")
    assert not is_play_candidate(None, "0x102f211")
