"""Admission filter for candidate play transactions."""


def is_play_candidate(call_input: str | None, selector: str) -> bool:
    """Whether a transaction's call input starts with the play method selector."""
    if not call_input or not selector:
        return False
    return call_input.lower().startswith(selector.lower())
