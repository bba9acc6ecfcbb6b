from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from ipfsreg.core.models import ChunkRecord, DecodeSkipped, EventLog, Receipt, Transaction


# ---------------------------------------------------------------------------
# IChainProvider
# ---------------------------------------------------------------------------

@runtime_checkable
class IChainProvider(Protocol):
    """
    Abstract connection to an Ethereum-compatible chain.

    Domain expectations:
    - Failures are raised as `ChainCallFailed`.
    - Signing is the provider's concern (a node-managed account, or a
      provider that signs locally before `eth_sendRawTransaction`).
    """

    async def latest_block(self) -> int:
        """Return the current chain head height."""
        ...

    async def get_logs(
        self,
        *,
        address: str,
        topics: Sequence[str | None],
        from_block: int,
        to_block: int,
    ) -> list[EventLog]:
        """Return all logs matching (address, topics) over the inclusive block range."""
        ...

    async def get_transaction(self, tx_hash: str) -> Transaction | None:
        """Return the transaction, or None when the node does not know it."""
        ...

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        """Submit a transaction object and return its hash."""
        ...

    async def get_transaction_receipt(self, tx_hash: str) -> Receipt | None:
        """Return the receipt, or None while the transaction is pending."""
        ...


# ---------------------------------------------------------------------------
# IContentStore
# ---------------------------------------------------------------------------

@runtime_checkable
class IContentStore(Protocol):
    """
    Handle to a running content-addressed storage node.

    Implementations:
    - KuboClient (IPFS HTTP RPC API)
    - In-memory store for testing
    """

    async def add(self, data: bytes) -> str:
        """Store bytes and return their CID. Identical bytes give identical CIDs."""
        ...

    async def cat(self, cid: str) -> bytes:
        """Return the bytes stored under `cid`."""
        ...


# ---------------------------------------------------------------------------
# IScanObserver
# ---------------------------------------------------------------------------

@runtime_checkable
class IScanObserver(Protocol):
    """
    Receives structured records while discovery runs.

    Implementations:
    - LoggingObserver (stdlib logging)
    - Collecting observers in tests
    """

    def on_chunk(self, record: ChunkRecord) -> None:
        ...

    def on_skip(self, record: DecodeSkipped) -> None:
        ...
