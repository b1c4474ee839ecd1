"""Chain access, ABI decoding and decoded transaction types."""

from .abi import load_abi, to_plain
from .client import ChainClient, Web3ChainClient
from .decoder import AbiTxDecoder, TxDecoder
from .types import DecodedEvent, DecodedParam, DecodedTransaction, PlayEvent

__all__ = [
    "ChainClient",
    "Web3ChainClient",
    "TxDecoder",
    "AbiTxDecoder",
    "DecodedTransaction",
    "DecodedEvent",
    "DecodedParam",
    "PlayEvent",
    "load_abi",
    "to_plain",
]
