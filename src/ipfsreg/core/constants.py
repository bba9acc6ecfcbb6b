from __future__ import annotations

# Registry deployment defaults (overridable through RegistryConfig)
DEFAULT_REGISTRY_ADDRESS = "0xa683bf985bc560c5dc99e8f33f3340d1e53736eb"
DEPLOYED_AT_BLOCK = 4_642_028

# Maximum block span most providers accept for one eth_getLogs query
DEFAULT_WINDOW_SIZE = 1024

STORE_FUNCTION = "store"
CID_STORED_EVENT = "CIDStored"
