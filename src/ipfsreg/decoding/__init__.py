"""Registry ABI handling and transaction calldata decoding.

This package provides:
- Built-in registry ABI and pydantic-validated `RegistryAbi`
- `TransactionDecoder` recovering CID strings from `store(string)` calls
"""

from ipfsreg.decoding.abi import REGISTRY_ABI, RegistryAbi, load_abi_entries
from ipfsreg.decoding.transaction import TransactionDecoder, decode_store_input

__all__ = [
    "REGISTRY_ABI",
    "RegistryAbi",
    "load_abi_entries",
    "TransactionDecoder",
    "decode_store_input",
]
