import pytest
from eth_abi import decode as abi_decode

from conftest import OWNER, REGISTRY, FakeChain
from ipfsreg.core.errors import ChainCallFailed
from ipfsreg.core.models import Receipt, TxOptions
from ipfsreg.decoding.abi import RegistryAbi
from ipfsreg.orchestration.anchor import RegistryAnchor, encode_store_call


def make_anchor(chain, abi: RegistryAbi, **kwargs) -> RegistryAnchor:
    kwargs.setdefault("receipt_poll_interval_s", 0.001)
    return RegistryAnchor(chain, registry_address=REGISTRY, selector=abi.store_selector, **kwargs)


def test_encode_store_call(abi: RegistryAbi) -> None:
    calldata = encode_store_call(abi.store_selector, "bafy123")
    raw = bytes.fromhex(calldata[2:])

    assert raw[:4] == abi.store_selector
    assert abi_decode(["string"], raw[4:]) == ("bafy123",)


def test_tx_options_to_rpc_params() -> None:
    opts = TxOptions(from_address=OWNER, value=10**15, gas=100_000, max_fee_per_gas=30 * 10**9)

    assert opts.to_rpc_params() == {
        "from": OWNER,
        "value": hex(10**15),
        "gas": hex(100_000),
        "maxFeePerGas": hex(30 * 10**9),
    }


@pytest.mark.asyncio
async def test_anchor_sends_payable_store_call(chain: FakeChain, abi: RegistryAbi) -> None:
    anchor = make_anchor(chain, abi)

    receipt = await anchor.anchor("bafy123", TxOptions(from_address=OWNER, value=5))

    sent = chain.sent[0]
    assert sent["to"] == REGISTRY
    assert sent["from"] == OWNER
    assert sent["value"] == "0x5"
    assert sent["data"] == encode_store_call(abi.store_selector, "bafy123")
    assert receipt.status == 1
    assert receipt.transaction_hash.startswith("0x")


@pytest.mark.asyncio
async def test_anchor_polls_until_receipt(chain: FakeChain, abi: RegistryAbi) -> None:
    anchor = make_anchor(chain, abi)
    tx_hash = await chain.send_transaction({"data": encode_store_call(abi.store_selector, "bafy123")})
    mined = Receipt(transaction_hash=tx_hash, block_number=77, status=1, gas_used=1)
    chain.receipts[tx_hash] = [None, None, mined]

    receipt = await anchor.anchor("bafy123", TxOptions(from_address=OWNER))

    assert receipt == mined
    assert len(chain.network_calls("eth_getTransactionReceipt")) == 3


@pytest.mark.asyncio
async def test_anchor_reverted(chain: FakeChain, abi: RegistryAbi) -> None:
    anchor = make_anchor(chain, abi)
    tx_hash = await chain.send_transaction({"data": encode_store_call(abi.store_selector, "bafy123")})
    chain.receipts[tx_hash] = [Receipt(transaction_hash=tx_hash, block_number=77, status=0, gas_used=1)]

    with pytest.raises(ChainCallFailed, match="reverted"):
        await anchor.anchor("bafy123", TxOptions(from_address=OWNER))


@pytest.mark.asyncio
async def test_anchor_receipt_timeout(chain: FakeChain, abi: RegistryAbi) -> None:
    anchor = make_anchor(chain, abi, receipt_timeout_s=0.01)
    tx_hash = await chain.send_transaction({"data": encode_store_call(abi.store_selector, "bafy123")})
    chain.receipts[tx_hash] = [None] * 10_000

    with pytest.raises(ChainCallFailed) as excinfo:
        await anchor.anchor("bafy123", TxOptions(from_address=OWNER))

    assert excinfo.value.method == "eth_getTransactionReceipt"


@pytest.mark.asyncio
async def test_anchor_submission_error_is_not_retried(mock_rpc, abi: RegistryAbi) -> None:
    mock_rpc.send_transaction.side_effect = ChainCallFailed("eth_sendTransaction", "insufficient funds")
    anchor = make_anchor(mock_rpc, abi)

    with pytest.raises(ChainCallFailed, match="insufficient funds"):
        await anchor.anchor("bafy123", TxOptions(from_address=OWNER, value=1))

    assert mock_rpc.send_transaction.await_count == 1
    mock_rpc.get_transaction_receipt.assert_not_awaited()
