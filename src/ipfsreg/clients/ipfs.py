"""Async client for an IPFS (Kubo) node's HTTP RPC API.

Only the calls the registry needs are implemented: storing bytes and reading
them back. Every Kubo RPC endpoint is a POST under `<api_url>/api/v0/`.

Two codecs are supported:
- ``raw`` (default): `/add` + `/cat`; small blobs get ``bafkrei...`` CIDs.
- ``dag-cbor``: `/dag/put` + `/dag/get`; the bytes are stored as a CBOR byte
  string and get ``bafyrei...`` CIDs, the same blocks a Helia ``dagCbor.add``
  of a byte array produces.
"""

from __future__ import annotations

import base64
import json
from typing import Literal

import httpx

Codec = Literal["raw", "dag-cbor"]


def _b64encode(data: bytes) -> str:
    # dag-json bytes are unpadded standard base64
    return base64.b64encode(data).decode("ascii").rstrip("=")


def _b64decode(text: str) -> bytes:
    return base64.b64decode(text + "=" * (-len(text) % 4))


class KuboClient:
    """Minimal async Kubo RPC client.

    Parameters
    ----------
    api_url : str
        Base URL of the node's RPC API, e.g. ``http://127.0.0.1:5001``.
    timeout_s : int
        Per-operation timeout in seconds.
    cid_version : int
        CID version passed to `add` for the raw codec.
    pin : bool
        Pin added content so the node does not garbage-collect it.
    codec : {"raw", "dag-cbor"}
        How bytes are stored and read back.
    """

    def __init__(
        self,
        api_url: str,
        *,
        timeout_s: int = 60,
        cid_version: int = 1,
        pin: bool = True,
        codec: Codec = "raw",
    ) -> None:
        if codec not in ("raw", "dag-cbor"):
            raise ValueError(f"unsupported codec: {codec!r}")
        self.api_url = api_url.rstrip("/")
        self.cid_version = cid_version
        self.pin = pin
        self.codec = codec
        self.client = httpx.AsyncClient(base_url=f"{self.api_url}/api/v0", timeout=timeout_s)

    async def add(self, data: bytes) -> str:
        """Add bytes to the node and return the resulting CID."""
        if self.codec == "dag-cbor":
            return await self._dag_put(data)
        r = await self.client.post(
            "/add",
            params={"cid-version": self.cid_version, "pin": str(self.pin).lower(), "quieter": "true"},
            files={"file": ("blob", data, "application/octet-stream")},
        )
        r.raise_for_status()
        body = r.json()
        if not isinstance(body, dict) or not body.get("Hash"):
            raise ValueError(f"unexpected /add response: {body!r}")
        return str(body["Hash"])

    async def cat(self, cid: str) -> bytes:
        """Return the raw bytes stored under `cid`."""
        if self.codec == "dag-cbor":
            return await self._dag_get(cid)
        r = await self.client.post("/cat", params={"arg": cid})
        r.raise_for_status()
        return r.content

    async def _dag_put(self, data: bytes) -> str:
        node = {"/": {"bytes": _b64encode(data)}}
        r = await self.client.post(
            "/dag/put",
            params={"store-codec": "dag-cbor", "input-codec": "dag-json", "pin": str(self.pin).lower()},
            files={"file": ("node.json", json.dumps(node).encode(), "application/json")},
        )
        r.raise_for_status()
        body = r.json()
        link = body.get("Cid") if isinstance(body, dict) else None
        if not isinstance(link, dict) or not link.get("/"):
            raise ValueError(f"unexpected /dag/put response: {body!r}")
        return str(link["/"])

    async def _dag_get(self, cid: str) -> bytes:
        r = await self.client.post("/dag/get", params={"arg": cid, "output-codec": "dag-json"})
        r.raise_for_status()
        body = r.json()
        inner = body.get("/") if isinstance(body, dict) else None
        if not isinstance(inner, dict) or not isinstance(inner.get("bytes"), str):
            raise ValueError(f"{cid} is not a dag-cbor byte string")
        return _b64decode(inner["bytes"])

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
