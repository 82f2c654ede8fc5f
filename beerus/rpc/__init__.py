"""
Beerus RPC Module

Provides the JSON-RPC 2.0 interface of the Beerus light client:
- Wire codec (parameter decoding, result encoding)
- eth_* and stark_* method modules
- Transport-agnostic JSON-RPC server
"""

from .server import RPCServer
from .config import RPCConfig

__all__ = [
    "RPCServer",
    "RPCConfig",
]
