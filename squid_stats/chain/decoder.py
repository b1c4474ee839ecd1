"""ABI decoding of call input and receipt logs."""

import logging
from typing import Any, Protocol

from eth_abi.exceptions import DecodingError
from eth_utils import event_abi_to_log_topic
from hexbytes import HexBytes
from web3 import Web3
from web3._utils.events import get_event_data
from web3.exceptions import MismatchedABI, Web3Exception

from .abi import to_plain
from .types import DecodedEvent, DecodedParam

logger = logging.getLogger(__name__)


class TxDecoder(Protocol):
    """Decodes raw call input and receipt logs against known ABIs."""

    def decode_method(self, call_input: str) -> tuple[str, list[DecodedParam]] | None:
        """Return (method name, params), or None if the input is undecodable."""
        ...

    def decode_logs(self, logs: list[dict]) -> list[DecodedEvent]:
        """Decode every log with a known topic; unknown logs are left out."""
        ...


def _topic_hex(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value).lower()


def _normalize_log(log: dict) -> dict:
    out = dict(log)
    if isinstance(out.get("data"), str):
        out["data"] = HexBytes(out["data"])
    if isinstance(out.get("topics"), list):
        out["topics"] = [HexBytes(t) if isinstance(t, str) else t for t in out["topics"]]
    for key in ("blockNumber", "transactionIndex", "logIndex"):
        if isinstance(out.get(key), str):
            out[key] = int(out[key], 0)
    if isinstance(out.get("address"), str):
        out["address"] = Web3.to_checksum_address(out["address"])
    return out


class AbiTxDecoder:
    """TxDecoder built from a single contract ABI."""

    def __init__(self, abi: list[dict]):
        self._w3 = Web3()
        self._contract = self._w3.eth.contract(abi=abi)
        self._topic_to_abi: dict[str, dict] = {}
        for item in abi:
            if item.get("type") != "event" or item.get("anonymous"):
                continue
            topic = _topic_hex(event_abi_to_log_topic(item))
            self._topic_to_abi[topic] = {**item, "anonymous": False}

    def decode_method(self, call_input: str) -> tuple[str, list[DecodedParam]] | None:
        if call_input in ("", "0x"):
            return "0x", []

        try:
            func, args = self._contract.decode_function_input(call_input)
        except (ValueError, DecodingError, Web3Exception) as e:
            logger.error(f"Could not parse TX input: {e}")
            return None

        types = {i.get("name"): i.get("type", "") for i in func.abi.get("inputs", [])}
        params = [
            DecodedParam(name=name, type=types.get(name, ""), value=to_plain(value))
            for name, value in args.items()
        ]
        return func.fn_name, params

    def decode_logs(self, logs: list[dict]) -> list[DecodedEvent]:
        events = []
        for log in logs:
            topics = log.get("topics") or []
            if not topics:
                continue
            event_abi = self._topic_to_abi.get(_topic_hex(topics[0]))
            if event_abi is None:
                continue

            try:
                event_data = get_event_data(self._w3.codec, event_abi, _normalize_log(log))
            except (MismatchedABI, DecodingError) as e:
                logger.debug(f"Skipping undecodable {event_abi['name']} log: {e}")
                continue

            types = {i.get("name"): i.get("type", "") for i in event_abi.get("inputs", [])}
            events.append(
                DecodedEvent(
                    name=event_abi["name"],
                    address=str(log.get("address", "")),
                    params=[
                        DecodedParam(name=name, type=types.get(name, ""), value=to_plain(value))
                        for name, value in event_data["args"].items()
                    ],
                )
            )
        return events
