from __future__ import annotations

from .core.config import RegistryConfig
from .core.constants import DEFAULT_REGISTRY_ADDRESS, DEFAULT_WINDOW_SIZE, DEPLOYED_AT_BLOCK
from .core.errors import ChainCallFailed, InvalidAddress, RegistryError, ScanFailed, StorageUnavailable
from .core.models import AnchoredRecord, RegistrationResult, TxOptions
from .orchestration.registry_client import RegistryClient, open_registry_client

__all__ = [
    "RegistryClient",
    "open_registry_client",
    "RegistryConfig",
    "TxOptions",
    "AnchoredRecord",
    "RegistrationResult",
    "RegistryError",
    "InvalidAddress",
    "StorageUnavailable",
    "ChainCallFailed",
    "ScanFailed",
    "DEFAULT_REGISTRY_ADDRESS",
    "DEFAULT_WINDOW_SIZE",
    "DEPLOYED_AT_BLOCK",
]
