from __future__ import annotations

import asyncio
import logging
import time

from eth_abi import encode as abi_encode

from ipfsreg.core.errors import ChainCallFailed
from ipfsreg.core.interfaces import IChainProvider
from ipfsreg.core.models import Receipt, TxOptions

logger = logging.getLogger(__name__)


def encode_store_call(selector: bytes, cid: str) -> str:
    """Return 0x-hex calldata for `store(string cid)`."""
    return "0x" + (selector + abi_encode(["string"], [cid])).hex()


class RegistryAnchor:
    """Submit `store(cid)` to the registry and wait for its receipt.

    Submission errors are surfaced as-is: no retry, no fee bumping. A reverted
    receipt or a receipt that does not show up within `receipt_timeout_s`
    raises `ChainCallFailed`.
    """

    def __init__(
        self,
        chain: IChainProvider,
        *,
        registry_address: str,
        selector: bytes,
        receipt_timeout_s: float = 120.0,
        receipt_poll_interval_s: float = 1.0,
    ) -> None:
        self._chain = chain
        self._registry_address = registry_address
        self._selector = selector
        self.receipt_timeout_s = receipt_timeout_s
        self.receipt_poll_interval_s = receipt_poll_interval_s

    async def anchor(self, cid: str, tx_options: TxOptions) -> Receipt:
        tx = {
            **tx_options.to_rpc_params(),
            "to": self._registry_address,
            "data": encode_store_call(self._selector, cid),
        }
        tx_hash = await self._chain.send_transaction(tx)
        logger.info("submitted store(%s) as %s", cid, tx_hash)

        receipt = await self._wait_for_receipt(tx_hash)
        if receipt.status == 0:
            logger.warning("store(%s) reverted in %s", cid, tx_hash)
            raise ChainCallFailed("eth_sendTransaction", f"transaction {tx_hash} reverted")
        return receipt

    async def _wait_for_receipt(self, tx_hash: str) -> Receipt:
        deadline = time.monotonic() + self.receipt_timeout_s
        while True:
            receipt = await self._chain.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            if time.monotonic() >= deadline:
                raise ChainCallFailed(
                    "eth_getTransactionReceipt",
                    f"no receipt for {tx_hash} after {self.receipt_timeout_s}s",
                )
            await asyncio.sleep(self.receipt_poll_interval_s)
