"""Block window and address helpers for the registry scan.

All intervals are inclusive on both ends: [start, end].
"""

from __future__ import annotations

from collections.abc import Generator

from eth_utils import is_address, to_normalized_address

from ipfsreg.core.errors import InvalidAddress
from ipfsreg.core.models import BlockRange


def iter_windows(start: int, latest: int, size: int) -> Generator[BlockRange, None, None]:
    """Yield contiguous inclusive windows of `size` blocks covering [start, latest].

    The last window is clamped to `latest`. Nothing is yielded when
    `latest < start`.
    """
    if size <= 0:
        raise ValueError("window size must be > 0")
    i = 0
    while i <= latest - start:
        a = start + i
        yield BlockRange(a, min(latest, a + size - 1))
        i += size


def validate_address(address: object) -> str:
    """Return `address` normalized (lowercase 0x-hex) or raise `InvalidAddress`."""
    if not isinstance(address, str) or not is_address(address):
        raise InvalidAddress(address)
    return to_normalized_address(address)


def address_topic(address: str) -> str:
    """Left-pad an address to a 32-byte indexed topic."""
    return "0x" + "0" * 24 + to_normalized_address(address)[2:]
