from __future__ import annotations

import logging

import httpx

from ipfsreg.core.errors import StorageUnavailable
from ipfsreg.core.interfaces import IContentStore

logger = logging.getLogger(__name__)

# Failures a content store may raise that all mean "store unavailable"
_STORE_ERRORS = (httpx.HTTPError, OSError, ValueError)


class ContentUploader:
    """Stores bytes in a content-addressed store and reads them back.

    No retry is performed; identical bytes always map to the same CID, so the
    caller can simply upload again.
    """

    def __init__(self, store: IContentStore) -> None:
        self._store = store

    async def upload(self, data: bytes) -> str:
        """Store `data` and return its CID."""
        try:
            cid = await self._store.add(bytes(data))
        except _STORE_ERRORS as e:
            logger.warning("upload of %d bytes failed: %s", len(data), e)
            raise StorageUnavailable(f"upload failed: {e}") from e
        if not cid:
            raise StorageUnavailable("store returned an empty CID")
        logger.info("uploaded %d bytes as %s", len(data), cid)
        return cid

    async def retrieve(self, cid: str) -> bytes:
        """Return the bytes stored under `cid`."""
        try:
            return await self._store.cat(cid)
        except _STORE_ERRORS as e:
            logger.warning("retrieval of %s failed: %s", cid, e)
            raise StorageUnavailable(f"retrieve {cid} failed: {e}") from e
