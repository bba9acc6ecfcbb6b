import hashlib
from typing import Any
from unittest.mock import AsyncMock

import pytest

from ipfsreg.core.errors import ChainCallFailed
from ipfsreg.core.models import ChunkRecord, DecodeSkipped, EventLog, Receipt, Transaction
from ipfsreg.decoding.abi import RegistryAbi
from ipfsreg.orchestration.anchor import encode_store_call
from ipfsreg.orchestration.utils import address_topic

REGISTRY = "0xa683bf985bc560c5dc99e8f33f3340d1e53736eb"
OWNER = "0x1234567890123456789012345678901234567890"
OTHER = "0x000000000000000000000000000000000000dead"


class FakeChain:
    """In-memory chain honoring eth_getLogs inclusive range semantics."""

    def __init__(self, latest: int = 0) -> None:
        self.latest = latest
        self.logs: list[EventLog] = []
        self.transactions: dict[str, Transaction] = {}
        self.receipts: dict[str, list[Receipt | None]] = {}
        self.sent: list[dict[str, Any]] = []
        self.calls: list[tuple[Any, ...]] = []
        self.fail_ranges: set[tuple[int, int]] = set()

    async def latest_block(self) -> int:
        self.calls.append(("eth_blockNumber",))
        return self.latest

    async def get_logs(self, *, address: str, topics: list[str | None], from_block: int, to_block: int) -> list[EventLog]:
        self.calls.append(("eth_getLogs", from_block, to_block))
        if (from_block, to_block) in self.fail_ranges:
            raise ChainCallFailed("eth_getLogs", "query returned more than 10000 results")
        out = []
        for log in self.logs:
            if log.address != address.lower() or not from_block <= log.block_number <= to_block:
                continue
            if all(t is None or t == log.topics[i] for i, t in enumerate(topics)):
                out.append(log)
        return out

    async def get_transaction(self, tx_hash: str) -> Transaction | None:
        self.calls.append(("eth_getTransactionByHash", tx_hash))
        return self.transactions.get(tx_hash)

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        self.calls.append(("eth_sendTransaction",))
        self.sent.append(tx)
        return "0x" + hashlib.sha256(tx["data"].encode()).hexdigest()

    async def get_transaction_receipt(self, tx_hash: str) -> Receipt | None:
        self.calls.append(("eth_getTransactionReceipt", tx_hash))
        queue = self.receipts.get(tx_hash)
        if queue:
            return queue.pop(0)
        return Receipt(transaction_hash=tx_hash, block_number=self.latest, status=1, gas_used=50_000)

    def add_registration(
        self,
        cid: str,
        block: int,
        *,
        owner: str = OWNER,
        log_index: int = 0,
        input_hex: str | None = None,
        with_tx: bool = True,
    ) -> str:
        """Record a `store(cid)` transaction and its `CIDStored` log; return the tx hash."""
        abi = RegistryAbi.from_json()
        tx_hash = "0x" + hashlib.sha256(f"{cid}:{block}:{log_index}".encode()).hexdigest()
        self.logs.append(
            EventLog(
                address=REGISTRY,
                topics=(abi.event_topic0, address_topic(owner), "0x" + "ab" * 32),
                data_hex="0x",
                block_number=block,
                tx_hash=tx_hash,
                log_index=log_index,
            )
        )
        if with_tx:
            self.transactions[tx_hash] = Transaction(
                hash=tx_hash,
                input=input_hex if input_hex is not None else encode_store_call(abi.store_selector, cid),
                from_address=owner,
                to=REGISTRY,
                block_number=block,
            )
        return tx_hash

    def network_calls(self, method: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == method]


class MemoryContentStore:
    """Content-addressed store keyed by a sha256 digest."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.adds = 0

    async def add(self, data: bytes) -> str:
        self.adds += 1
        cid = "bafk" + hashlib.sha256(data).hexdigest()[:52]
        self.blobs[cid] = data
        return cid

    async def cat(self, cid: str) -> bytes:
        return self.blobs[cid]


class CollectingObserver:
    def __init__(self) -> None:
        self.chunks: list[ChunkRecord] = []
        self.skips: list[DecodeSkipped] = []

    def on_chunk(self, record: ChunkRecord) -> None:
        self.chunks.append(record)

    def on_skip(self, record: DecodeSkipped) -> None:
        self.skips.append(record)


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain(latest=10_000)


@pytest.fixture
def store() -> MemoryContentStore:
    return MemoryContentStore()


@pytest.fixture
def observer() -> CollectingObserver:
    return CollectingObserver()


@pytest.fixture
def abi() -> RegistryAbi:
    return RegistryAbi.from_json()


@pytest.fixture
def mock_rpc():
    rpc = AsyncMock()
    rpc.get_logs = AsyncMock(return_value=[])
    rpc.latest_block = AsyncMock(return_value=100)
    rpc.get_transaction = AsyncMock(return_value=None)
    rpc.aclose = AsyncMock()
    return rpc


@pytest.fixture
def mock_store():
    store = AsyncMock()
    store.add = AsyncMock(return_value="bafy-mock")
    store.cat = AsyncMock(return_value=b"")
    return store
