"""Registry contract ABI: built-in definition and derived selectors/topics.

The registry exposes one payable write method and one event:

    function store(string cid) payable
    event CIDStored(address indexed owner, string indexed cid)

`RegistryAbi` validates an ABI JSON (built-in or caller supplied) with pydantic
and derives what the read and write paths need: the 4-byte `store` selector and
the `CIDStored` topic0.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Literal

from eth_utils import function_signature_to_4byte_selector
from eth_utils.abi import event_signature_to_log_topic
from pydantic import BaseModel, ValidationError

from ipfsreg.core.constants import CID_STORED_EVENT, STORE_FUNCTION

REGISTRY_ABI: tuple[dict[str, Any], ...] = (
    {
        "type": "function",
        "name": STORE_FUNCTION,
        "stateMutability": "payable",
        "inputs": [{"internalType": "string", "name": "cid", "type": "string"}],
        "outputs": [],
    },
    {
        "type": "event",
        "name": CID_STORED_EVENT,
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "address", "name": "owner", "type": "address"},
            {"indexed": True, "internalType": "string", "name": "cid", "type": "string"},
        ],
    },
)


class AbiInput(BaseModel):
    name: str
    type: str
    internalType: str | None = None
    indexed: bool = False


class AbiEntry(BaseModel):
    type: Literal["function", "event", "constructor", "fallback", "receive", "error"]
    name: str | None = None
    inputs: Sequence[AbiInput] = ()
    anonymous: bool = False
    stateMutability: str | None = None


def get_signature(entry: AbiEntry) -> str:
    return f"{entry.name}({','.join(abi_input.type for abi_input in entry.inputs)})"


AbiJson = Iterable[dict[str, Any]]
AbiSpec = AbiJson | Path


def load_abi_entries(abi: AbiSpec) -> list[AbiEntry]:
    """Parse ABI JSON (iterable of dicts, or a path to a JSON file)."""
    if isinstance(abi, Path):
        abi = json.loads(abi.read_text())
    try:
        return [AbiEntry.model_validate(raw) for raw in abi]
    except ValidationError as e:
        raise ValueError(f"invalid ABI: {e}") from e


class RegistryAbi:
    """Validated view over the registry ABI."""

    def __init__(self, entries: Sequence[AbiEntry]) -> None:
        store = self._find(entries, "function", STORE_FUNCTION)
        if [i.type for i in store.inputs] != ["string"]:
            raise ValueError(f"{STORE_FUNCTION} must take exactly one string argument")
        event = self._find(entries, "event", CID_STORED_EVENT)
        indexed = [i for i in event.inputs if i.indexed]
        if not indexed or indexed[0].type != "address":
            raise ValueError(f"{CID_STORED_EVENT} must index the owner address first")

        self.store_signature = get_signature(store)
        self.event_signature = get_signature(event)

    @classmethod
    def from_json(cls, abi: AbiSpec = REGISTRY_ABI) -> RegistryAbi:
        return cls(load_abi_entries(abi))

    @staticmethod
    def _find(entries: Sequence[AbiEntry], kind: str, name: str) -> AbiEntry:
        for entry in entries:
            if entry.type == kind and entry.name == name:
                return entry
        raise ValueError(f"ABI has no {kind} named {name!r}")

    @property
    def store_selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.store_signature)

    @property
    def event_topic0(self) -> str:
        return "0x" + event_signature_to_log_topic(self.event_signature).hex()
