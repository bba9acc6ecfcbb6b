"""Windowed `CIDStored` log scanner with ordered prefetch.

The block range [deployed_at_block, latest_block] is split into inclusive
windows of `window_size` blocks (eth_getLogs ranges are inclusive on both
ends, so windows never overlap and a log at a window's `to_block` is fetched
exactly once). Up to `concurrency` windows are queried ahead of the consumer;
results are always yielded in ascending window order.
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from collections.abc import AsyncIterator
from contextlib import aclosing

from ipfsreg.core.constants import DEFAULT_WINDOW_SIZE
from ipfsreg.core.errors import ScanFailed
from ipfsreg.core.interfaces import IChainProvider, IScanObserver
from ipfsreg.core.models import BlockRange, ChunkRecord, RegistryEvent
from ipfsreg.orchestration.utils import address_topic, iter_windows

WindowResult = tuple[BlockRange, list[RegistryEvent]]


class EventRangeScanner:
    """Paginate registry events for one owner across the whole block range."""

    def __init__(
        self,
        chain: IChainProvider,
        *,
        registry_address: str,
        event_topic0: str,
        window_size: int = DEFAULT_WINDOW_SIZE,
        concurrency: int = 1,
        observer: IScanObserver | None = None,
    ) -> None:
        if window_size <= 0:
            raise ValueError("window_size must be > 0")
        if concurrency <= 0:
            raise ValueError("concurrency must be > 0")
        self._chain = chain
        self._registry_address = registry_address
        self._event_topic0 = event_topic0
        self.window_size = window_size
        self.concurrency = concurrency
        self._observer = observer

    def _emit(self, rng: BlockRange, status: str, logs: int = 0, error: str | None = None) -> None:
        if self._observer is not None:
            self._observer.on_chunk(
                ChunkRecord(
                    from_block=rng.from_block,
                    to_block=rng.to_block,
                    status=status,
                    logs=logs,
                    error=error,
                    updated_at=time.time(),
                )
            )

    async def _fetch_window(self, rng: BlockRange, owner_topic: str) -> list[RegistryEvent]:
        self._emit(rng, "started")
        logs = await self._chain.get_logs(
            address=self._registry_address,
            topics=[self._event_topic0, owner_topic],
            from_block=rng.from_block,
            to_block=rng.to_block,
        )
        self._emit(rng, "done", logs=len(logs))
        return [RegistryEvent.from_log(log) for log in logs]

    async def scan_windows(
        self,
        deployed_at_block: int,
        latest_block: int,
        owner: str,
    ) -> AsyncIterator[WindowResult]:
        """Yield `(window, events)` pairs in ascending block order.

        Raises `ScanFailed` with the failing window's bounds; prefetched
        queries still in flight are cancelled.
        """
        owner_topic = address_topic(owner)
        windows = iter_windows(deployed_at_block, latest_block, self.window_size)
        pending: deque[tuple[BlockRange, asyncio.Task[list[RegistryEvent]]]] = deque()

        def fill() -> None:
            while len(pending) < self.concurrency:
                rng = next(windows, None)
                if rng is None:
                    return
                pending.append((rng, asyncio.create_task(self._fetch_window(rng, owner_topic))))

        try:
            fill()
            while pending:
                rng, task = pending.popleft()
                try:
                    events = await task
                except Exception as e:
                    self._emit(rng, "failed", error=str(e))
                    raise ScanFailed(rng.from_block, rng.to_block, str(e)) from e
                yield rng, events
                # refill after the consumer resumes; with concurrency=1 requests never overlap
                fill()
        finally:
            for _, task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*(task for _, task in pending), return_exceptions=True)

    async def scan(self, deployed_at_block: int, latest_block: int, owner: str) -> AsyncIterator[RegistryEvent]:
        """Yield every matching `RegistryEvent`, flattened in scan order."""
        async with aclosing(self.scan_windows(deployed_at_block, latest_block, owner)) as windows:
            async for _, events in windows:
                for event in events:
                    yield event
