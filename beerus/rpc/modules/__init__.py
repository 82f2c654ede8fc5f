"""
Beerus RPC Modules

Ethereum- and Starknet-compatible JSON-RPC method implementations.
"""

from .eth import EthModule
from .stark import StarkModule

__all__ = [
    "EthModule",
    "StarkModule",
]
