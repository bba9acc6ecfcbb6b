"""Core data models for the registry read and write paths.

This module defines:
- `EventLog`: raw RPC log record, minimally normalized.
- `RegistryEvent`: one `CIDStored` log (owner + originating transaction).
- `Transaction` / `Receipt`: the subset of node responses the client needs.
- `AnchoredRecord` / `RegistrationResult`: what callers get back.
- `TxOptions`: payable call options forwarded verbatim to the node.
- `ChunkRecord` / `DecodeSkipped`: observability records emitted while scanning.

Design notes
------------
- Hashes, addresses and topics are stored lowercased and 0x-prefixed.
- Block ranges are inclusive on both ends: [from_block, to_block].
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

Status = Literal["started", "done", "failed"]
SkipReason = Literal["not_found", "selector_mismatch", "malformed_input"]


def _hex_or_none(value: int | None) -> str | None:
    return None if value is None else hex(value)


# === Block ranges ===


@dataclass(slots=True, frozen=True)
class BlockRange:
    """Inclusive block window [from_block, to_block]."""

    from_block: int
    to_block: int

    def __post_init__(self) -> None:
        if self.from_block < 0 or self.from_block > self.to_block:
            raise ValueError(f"invalid block range [{self.from_block}, {self.to_block}]")

    def __len__(self) -> int:
        return self.to_block - self.from_block + 1


# === RPC records ===


@dataclass(slots=True, frozen=True)
class EventLog:
    """Raw log as fetched from RPC, minimally normalized."""

    address: str  # lowercased 0x...
    topics: tuple[str, ...]  # lowercased 0x...
    data_hex: str  # "0x..."
    block_number: int
    tx_hash: str  # lowercased 0x..., "" when the node omits it
    log_index: int


@dataclass(slots=True, frozen=True)
class RegistryEvent:
    """One observed `CIDStored` log.

    The indexed `cid` topic is a keccak hash of the string, so the CID itself
    is not recoverable from the log; `transaction_hash` points at the call that
    carries it.
    """

    owner: str
    transaction_hash: str | None
    block_number: int
    log_index: int

    @classmethod
    def from_log(cls, log: EventLog) -> RegistryEvent:
        owner = "0x" + log.topics[1][-40:] if len(log.topics) > 1 else ""
        return cls(
            owner=owner,
            transaction_hash=log.tx_hash or None,
            block_number=log.block_number,
            log_index=log.log_index,
        )


@dataclass(slots=True, frozen=True)
class Transaction:
    hash: str
    input: str  # "0x..." calldata
    from_address: str
    to: str | None
    block_number: int | None


@dataclass(slots=True, frozen=True)
class Receipt:
    transaction_hash: str
    block_number: int
    status: int  # 1 success, 0 reverted
    gas_used: int


# === Results ===


@dataclass(slots=True, frozen=True)
class AnchoredRecord:
    """A CID recovered from the transaction behind a `RegistryEvent`."""

    cid: str
    transaction_hash: str
    block_number: int


@dataclass(slots=True, frozen=True)
class RegistrationResult:
    transaction_hash: str
    uploaded_cid: str


# === Write options ===


@dataclass(frozen=True, kw_only=True)
class TxOptions:
    """Payable call options. Values are forwarded, never interpreted."""

    from_address: str
    value: int = 0
    gas: int | None = None
    gas_price: int | None = None
    max_fee_per_gas: int | None = None
    max_priority_fee_per_gas: int | None = None
    nonce: int | None = None

    def to_rpc_params(self) -> dict[str, Any]:
        """Render as an `eth_sendTransaction` object (hex quantities, Nones dropped)."""
        params: dict[str, Any] = {
            "from": self.from_address,
            "value": hex(self.value),
            "gas": _hex_or_none(self.gas),
            "gasPrice": _hex_or_none(self.gas_price),
            "maxFeePerGas": _hex_or_none(self.max_fee_per_gas),
            "maxPriorityFeePerGas": _hex_or_none(self.max_priority_fee_per_gas),
            "nonce": _hex_or_none(self.nonce),
        }
        return {k: v for k, v in params.items() if v is not None}


# === Observability records ===


@dataclass(slots=True)
class ChunkRecord:
    """Status of one scanned block window."""

    from_block: int
    to_block: int
    status: Status
    logs: int
    error: str | None
    updated_at: float


@dataclass(slots=True, frozen=True)
class DecodeSkipped:
    """An event omitted from discovery results. Not an error."""

    transaction_hash: str
    block_number: int
    reason: SkipReason
