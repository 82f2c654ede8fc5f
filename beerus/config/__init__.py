"""
Beerus Unified Configuration

Loads all sections of config.toml at startup.
Environment variables override TOML values.
"""

from .loader import (
    BeerusConfig,
    EthereumConfig,
    NodeSectionConfig,
    StarknetConfig,
    load_config,
)

__all__ = [
    "BeerusConfig",
    "EthereumConfig",
    "NodeSectionConfig",
    "StarknetConfig",
    "load_config",
]
