"""
Beerus light client layer

Capability interfaces for the Ethereum and Starknet light clients, the
shared handle that guards them, and upstream JSON-RPC adapters.
"""

from .beerus import BeerusLightClient
from .ethereum import EthereumLightClient
from .lock import ReadWriteLock
from .starknet import StarknetLightClient

__all__ = [
    "BeerusLightClient",
    "EthereumLightClient",
    "ReadWriteLock",
    "StarknetLightClient",
]
