"""Orchestration of the registry read and write paths.

This package provides:
- `RegistryClient` and the `open_registry_client` wiring helper
- `EventRangeScanner` for windowed, ordered log scans
- `RegistryAnchor` for `store(cid)` submissions
- Window and address helpers
"""

from ipfsreg.orchestration.anchor import RegistryAnchor
from ipfsreg.orchestration.observers import LoggingObserver
from ipfsreg.orchestration.registry_client import RegistryClient, open_registry_client
from ipfsreg.orchestration.scanner import EventRangeScanner
from ipfsreg.orchestration.utils import address_topic, iter_windows, validate_address

__all__ = [
    "RegistryAnchor",
    "LoggingObserver",
    "RegistryClient",
    "open_registry_client",
    "EventRangeScanner",
    "address_topic",
    "iter_windows",
    "validate_address",
]
