"""ABI file loading and conversion of web3 values to plain JSON."""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any


def load_abi(path: str | Path) -> list[dict]:
    """Load an ABI from a raw JSON array or a build artifact with an `abi` field."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict) and "abi" in data:
        data = data["abi"]
    if not isinstance(data, list):
        raise ValueError(f"No ABI array found in {path}")
    return data


def to_plain(value: Any) -> Any:
    """Convert web3 return values (AttributeDict, HexBytes, tuples) to JSON values."""
    if isinstance(value, Mapping):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value
