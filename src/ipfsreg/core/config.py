from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from eth_utils import is_address

from ipfsreg.core.constants import DEFAULT_REGISTRY_ADDRESS, DEFAULT_WINDOW_SIZE, DEPLOYED_AT_BLOCK
from ipfsreg.decoding.abi import REGISTRY_ABI, RegistryAbi


@dataclass(frozen=True)
class RegistryConfig:
    """Configuration for the registry client.

    `window_size` is the block span of one eth_getLogs query; providers differ
    in what they accept, so tune it per network. `concurrency` bounds in-flight
    window queries and transaction fetches (1 keeps everything sequential).
    """

    registry_address: str = DEFAULT_REGISTRY_ADDRESS
    abi: tuple[dict[str, Any], ...] = REGISTRY_ABI
    deployed_at_block: int = DEPLOYED_AT_BLOCK
    window_size: int = DEFAULT_WINDOW_SIZE
    concurrency: int = 1
    receipt_timeout_s: float = 120.0
    receipt_poll_interval_s: float = 1.0

    def __post_init__(self) -> None:
        if not is_address(self.registry_address):
            raise ValueError(f"registry_address is not an address: {self.registry_address!r}")
        if self.deployed_at_block < 0:
            raise ValueError("deployed_at_block must be >= 0")
        if self.window_size <= 0:
            raise ValueError("window_size must be > 0")
        if self.concurrency <= 0:
            raise ValueError("concurrency must be > 0")
        if self.receipt_timeout_s <= 0 or self.receipt_poll_interval_s <= 0:
            raise ValueError("receipt timeout and poll interval must be > 0")
        # Fail at construction rather than on first use
        self.registry_abi()

    def registry_abi(self) -> RegistryAbi:
        return RegistryAbi.from_json(self.abi)
