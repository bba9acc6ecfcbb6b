"""Network clients: Ethereum JSON-RPC and IPFS (Kubo) HTTP RPC."""

from ipfsreg.clients.ipfs import Codec, KuboClient
from ipfsreg.clients.rpc import RPC

__all__ = ["Codec", "KuboClient", "RPC"]
