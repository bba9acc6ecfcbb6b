"""Registry client: upload-and-anchor writes, CID discovery reads.

This module provides two layers:

1) `RegistryClient`:
   - Depends ONLY on interfaces (IChainProvider, IContentStore, IScanObserver).
   - Does NOT instantiate RPC or IPFS clients and does not close them.

2) `open_registry_client(...)` (convenience wrapper):
   - Wires concrete implementations (RPC, KuboClient) for scripts.
   - Closes both on exit.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, aclosing, asynccontextmanager

from ipfsreg.clients.ipfs import Codec, KuboClient
from ipfsreg.clients.rpc import RPC
from ipfsreg.core.config import RegistryConfig
from ipfsreg.core.interfaces import IChainProvider, IContentStore, IScanObserver
from ipfsreg.core.models import AnchoredRecord, RegistrationResult, RegistryEvent, TxOptions
from ipfsreg.decoding.transaction import TransactionDecoder
from ipfsreg.orchestration.anchor import RegistryAnchor
from ipfsreg.orchestration.observers import LoggingObserver
from ipfsreg.orchestration.scanner import EventRangeScanner
from ipfsreg.orchestration.utils import validate_address
from ipfsreg.storage.uploader import ContentUploader

logger = logging.getLogger(__name__)


class RegistryClient:
    """Compose uploader, anchor, scanner and decoder over injected handles.

    Parameters
    ----------
    chain : IChainProvider
        Chain connection (RPC or any compatible provider).
    store : IContentStore
        Handle to a running content-addressed storage node.
    config : RegistryConfig
        Registry address, ABI, deployment block and scan tuning.
    observer : IScanObserver | None
        Receives per-window and per-skip records; defaults to logging.
    """

    def __init__(
        self,
        chain: IChainProvider,
        store: IContentStore,
        config: RegistryConfig | None = None,
        *,
        observer: IScanObserver | None = None,
    ) -> None:
        self.config = config or RegistryConfig()
        self._chain = chain
        abi = self.config.registry_abi()
        observer = observer or LoggingObserver()

        self.uploader = ContentUploader(store)
        self.anchor = RegistryAnchor(
            chain,
            registry_address=self.config.registry_address,
            selector=abi.store_selector,
            receipt_timeout_s=self.config.receipt_timeout_s,
            receipt_poll_interval_s=self.config.receipt_poll_interval_s,
        )
        self.scanner = EventRangeScanner(
            chain,
            registry_address=self.config.registry_address,
            event_topic0=abi.event_topic0,
            window_size=self.config.window_size,
            concurrency=self.config.concurrency,
            observer=observer,
        )
        self.decoder = TransactionDecoder(chain, selector=abi.store_selector, observer=observer)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    async def upload_and_register(self, data: bytes, tx_options: TxOptions) -> RegistrationResult:
        """Upload `data`, then anchor its CID.

        Not atomic: if anchoring fails the content stays stored. Uploading the
        same bytes again yields the same CID, or call `register` directly.
        """
        cid = await self.uploader.upload(data)
        return await self.register(cid, tx_options)

    async def register(self, cid: str, tx_options: TxOptions) -> RegistrationResult:
        """Anchor an already uploaded CID."""
        receipt = await self.anchor.anchor(cid, tx_options)
        return RegistrationResult(transaction_hash=receipt.transaction_hash, uploaded_cid=cid)

    async def fetch(self, cid: str) -> bytes:
        """Read content back from the store."""
        return await self.uploader.retrieve(cid)

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    async def _decode_window(self, events: list[RegistryEvent], sem: asyncio.Semaphore) -> list[AnchoredRecord]:
        async def one(tx_hash: str, block_number: int) -> AnchoredRecord | None:
            async with sem:
                cid = await self.decoder.decode(tx_hash, block_number=block_number)
            if cid is None:
                return None
            return AnchoredRecord(cid=cid, transaction_hash=tx_hash, block_number=block_number)

        tasks = [
            asyncio.create_task(one(ev.transaction_hash, ev.block_number))
            for ev in events
            if ev.transaction_hash
        ]
        try:
            # gather keeps input order, so output order is scan order
            decoded = await asyncio.gather(*tasks)
        finally:
            # a failed lookup aborts the window; no fetch may outlive the call
            unfinished = [t for t in tasks if not t.done()]
            for t in unfinished:
                t.cancel()
            if unfinished:
                await asyncio.gather(*unfinished, return_exceptions=True)
        return [r for r in decoded if r is not None]

    async def discover_records(self, address: str) -> list[AnchoredRecord]:
        """Return every CID `address` anchored, with its transaction, in block order.

        Raises `InvalidAddress` before any network call. A failed window query
        aborts the whole call with `ScanFailed`; undecodable transactions are
        skipped.
        """
        owner = validate_address(address)
        latest = await self._chain.latest_block()
        sem = asyncio.Semaphore(self.config.concurrency)

        records: list[AnchoredRecord] = []
        windows = self.scanner.scan_windows(self.config.deployed_at_block, latest, owner)
        async with aclosing(windows):
            async for _, events in windows:
                if events:
                    records.extend(await self._decode_window(events, sem))

        logger.info("discovered %d CIDs for %s up to block %d", len(records), owner, latest)
        return records

    async def discover_cids(self, address: str) -> list[str]:
        """Return the CIDs `address` anchored, in ascending block order."""
        return [r.cid for r in await self.discover_records(address)]


@asynccontextmanager
async def open_registry_client(
    rpc_url: str,
    ipfs_api_url: str,
    config: RegistryConfig | None = None,
    *,
    observer: IScanObserver | None = None,
    timeout_s: int = 20,
    ipfs_codec: Codec = "raw",
) -> AsyncIterator[RegistryClient]:
    """Connect to a JSON-RPC node and a Kubo node; close both on exit."""
    async with AsyncExitStack() as stack:
        rpc = RPC(rpc_url, timeout_s=timeout_s)
        stack.push_async_callback(rpc.aclose)
        ipfs = KuboClient(ipfs_api_url, codec=ipfs_codec)
        stack.push_async_callback(ipfs.aclose)
        yield RegistryClient(rpc, ipfs, config, observer=observer)
