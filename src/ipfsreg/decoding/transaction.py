"""Recover the CID string from the transaction behind a `CIDStored` event.

`CIDStored` indexes its `cid` argument, so the log only holds
keccak(cid). The original string lives in the calldata of the `store(string)`
call that emitted the event:

    0x | selector (4 bytes) | abi.encode(string)
"""

from __future__ import annotations

import logging

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError

from ipfsreg.core.interfaces import IChainProvider, IScanObserver
from ipfsreg.core.models import DecodeSkipped, SkipReason

logger = logging.getLogger(__name__)


class CalldataMismatch(ValueError):
    """Calldata does not call the expected function."""


def decode_store_input(input_hex: str, selector: bytes) -> str:
    """Decode `store(string)` calldata and return the string argument.

    Raises `CalldataMismatch` when the selector differs and `ValueError` /
    `DecodingError` when the payload is not a valid ABI-encoded string.
    """
    raw = bytes.fromhex(input_hex[2:] if input_hex.lower().startswith("0x") else input_hex)
    if raw[:4] != selector:
        raise CalldataMismatch(f"selector 0x{raw[:4].hex()} != 0x{selector.hex()}")
    (cid,) = abi_decode(["string"], raw[4:])
    return cid


class TransactionDecoder:
    """Fetch a registry transaction and decode its CID argument.

    Missing transactions and undecodable calldata are skipped (reported to the
    observer, `decode` returns None). Chain failures propagate.
    """

    def __init__(
        self,
        chain: IChainProvider,
        *,
        selector: bytes,
        observer: IScanObserver | None = None,
    ) -> None:
        self._chain = chain
        self._selector = selector
        self._observer = observer

    async def decode(self, transaction_hash: str, *, block_number: int = -1) -> str | None:
        tx = await self._chain.get_transaction(transaction_hash)
        if tx is None:
            return self._skip(transaction_hash, block_number, "not_found")
        try:
            return decode_store_input(tx.input, self._selector)
        except CalldataMismatch:
            return self._skip(transaction_hash, block_number, "selector_mismatch")
        except (DecodingError, ValueError, OverflowError) as e:
            logger.debug("cannot decode %s: %s", transaction_hash, e)
            return self._skip(transaction_hash, block_number, "malformed_input")

    def _skip(self, transaction_hash: str, block_number: int, reason: SkipReason) -> None:
        if self._observer is not None:
            self._observer.on_skip(DecodeSkipped(transaction_hash, block_number, reason))
        return None
