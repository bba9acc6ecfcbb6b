"""Core data models, configuration, errors and interfaces.

This package provides:
- Data models (RegistryEvent, AnchoredRecord, RegistrationResult, TxOptions, ...)
- Configuration (RegistryConfig)
- Error hierarchy (RegistryError and subclasses)
- Provider / store / observer protocols
"""

from ipfsreg.core.config import RegistryConfig
from ipfsreg.core.errors import ChainCallFailed, InvalidAddress, RegistryError, ScanFailed, StorageUnavailable
from ipfsreg.core.models import (
    AnchoredRecord,
    BlockRange,
    ChunkRecord,
    DecodeSkipped,
    EventLog,
    Receipt,
    RegistrationResult,
    RegistryEvent,
    Transaction,
    TxOptions,
)

__all__ = [
    "RegistryConfig",
    "ChainCallFailed",
    "InvalidAddress",
    "RegistryError",
    "ScanFailed",
    "StorageUnavailable",
    "AnchoredRecord",
    "BlockRange",
    "ChunkRecord",
    "DecodeSkipped",
    "EventLog",
    "Receipt",
    "RegistrationResult",
    "RegistryEvent",
    "Transaction",
    "TxOptions",
]
