"""Lightweight JSON-RPC client for Ethereum-compatible nodes.

This module provides:
- `RPC`: an async client with sane timeouts/connection limits
- Helper utilities to format block numbers and parse quantities

It returns `EventLog`, `Transaction` and `Receipt` records and raises
`ChainCallFailed` for every transport, HTTP or JSON-RPC error.
"""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from typing import Any

import httpx

from ipfsreg.core.errors import ChainCallFailed
from ipfsreg.core.models import EventLog, Receipt, Transaction


def to_hex_block(x: int) -> str:
    """Return a 0x-prefixed hex block number."""
    return hex(x)


def from_quantity(x: str | int | None) -> int | None:
    """Parse a JSON-RPC quantity (0x-hex string or int)."""
    if x is None:
        return None
    if isinstance(x, int):
        return x
    return int(x, 16)


def topics_param(topics: Sequence[str | None]) -> list[str | None]:
    """Lowercase topic filters, keeping None wildcards in place."""
    return [t.lower() if t is not None else None for t in topics]


class RPC:
    """Minimal async RPC client.

    Parameters
    ----------
    url : str
        RPC endpoint URL.
    timeout_s : int
        Per-operation timeout in seconds (connect/read/write).
    max_connections : int
        Maximum concurrent connections to keep in the pool.
    """

    def __init__(self, url: str, *, timeout_s: int = 20, max_connections: int = 16) -> None:
        self.url = url
        self._ids = itertools.count(1)
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=timeout_s,
                read=timeout_s,
                write=timeout_s,
                pool=max(30, timeout_s * 3),
            ),
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max(1, max_connections // 2),
            ),
            http2=True,
        )

    async def _call(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            r = await self.client.post(self.url, json=payload)
            r.raise_for_status()
            data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ChainCallFailed(method, f"{type(e).__name__}: {e}") from e
        if not isinstance(data, dict):
            raise ChainCallFailed(method, f"unexpected response body: {data!r}")
        if "error" in data:
            e = data["error"]
            if isinstance(e, dict):
                raise ChainCallFailed(method, f"RPC error: {e.get('code')} {e.get('message')}")
            raise ChainCallFailed(method, f"RPC error: {e}")
        return data.get("result")

    async def latest_block(self) -> int:
        """Return the latest block number as an int."""
        return int(await self._call("eth_blockNumber", []), 16)

    async def get_logs(
        self,
        *,
        address: str,
        topics: Sequence[str | None],
        from_block: int,
        to_block: int,
    ) -> list[EventLog]:
        """Fetch logs for an address and topic filter within an inclusive block range."""
        params = [
            {
                "address": address.lower(),
                "fromBlock": to_hex_block(from_block),
                "toBlock": to_hex_block(to_block),
                "topics": topics_param(topics),
            }
        ]
        result = await self._call("eth_getLogs", params)

        out: list[EventLog] = []
        for rl in result or []:
            out.append(
                EventLog(
                    address=rl["address"].lower(),
                    topics=tuple(t.lower() for t in rl.get("topics", [])),
                    data_hex=str(rl.get("data") or "0x"),
                    block_number=int(rl["blockNumber"], 16),
                    tx_hash=(rl.get("transactionHash") or "").lower(),
                    log_index=int(rl["logIndex"], 16),
                )
            )
        return out

    async def get_transaction(self, tx_hash: str) -> Transaction | None:
        """Return the transaction by hash, or None if the node does not know it."""
        rt = await self._call("eth_getTransactionByHash", [tx_hash])
        if not rt:
            return None
        return Transaction(
            hash=rt["hash"].lower(),
            input=rt.get("input") or rt.get("data") or "0x",
            from_address=(rt.get("from") or "").lower(),
            to=rt["to"].lower() if rt.get("to") else None,
            block_number=from_quantity(rt.get("blockNumber")),
        )

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        """Submit a transaction signed by the node's account; return its hash."""
        return str(await self._call("eth_sendTransaction", [tx])).lower()

    async def get_transaction_receipt(self, tx_hash: str) -> Receipt | None:
        """Return the receipt, or None while the transaction is still pending."""
        rr = await self._call("eth_getTransactionReceipt", [tx_hash])
        if not rr:
            return None
        # Pre-Byzantium receipts carry no status field
        status = from_quantity(rr.get("status"))
        return Receipt(
            transaction_hash=rr["transactionHash"].lower(),
            block_number=int(rr["blockNumber"], 16),
            status=1 if status is None else status,
            gas_used=from_quantity(rr.get("gasUsed")) or 0,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
