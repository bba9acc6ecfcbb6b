"""Exception hierarchy shared by the read and write paths.

- `InvalidAddress`: caller input rejected before any network access.
- `StorageUnavailable`: the content-addressed store failed.
- `ChainCallFailed`: any JSON-RPC failure (transport, HTTP, or RPC error object).
- `ScanFailed`: a block window query failed; aborts the whole scan.

Undecodable registry transactions are not errors; see `DecodeSkipped`
in `ipfsreg.core.models`.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for all registry client errors."""


class InvalidAddress(RegistryError, ValueError):
    def __init__(self, address: object) -> None:
        super().__init__(f"Invalid address: {address!r}")
        self.address = address


class StorageUnavailable(RegistryError):
    """Content-addressed store could not be reached or answered garbage."""


class ChainCallFailed(RegistryError):
    """A chain RPC call failed. `method` names the JSON-RPC method."""

    def __init__(self, method: str, message: str) -> None:
        super().__init__(f"{method}: {message}")
        self.method = method


class ScanFailed(ChainCallFailed):
    """A block window query failed. Carries the inclusive window bounds."""

    def __init__(self, from_block: int, to_block: int, message: str) -> None:
        super().__init__("eth_getLogs", f"window [{from_block}, {to_block}] failed: {message}")
        self.from_block = from_block
        self.to_block = to_block
