"""
Beerus Unified TOML Configuration Loader

Loads all sections of config.toml at startup with environment variable overrides.

Environment variable mapping:
    [node] network              → BEERUS_NETWORK
    [node] log_level            → BEERUS_LOG_LEVEL
    [ethereum] execution_rpc    → ETHEREUM_EXECUTION_RPC_URL
    [starknet] rpc              → STARKNET_RPC_URL
    [rpc.http] host / port      → BEERUS_RPC_HOST / BEERUS_RPC_PORT
    [rpc] backend_timeout       → BEERUS_BACKEND_TIMEOUT
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # type: ignore[no-redef]

from ..constants import NETWORK_CHAIN_IDS
from ..rpc.config import RPCConfig

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

@dataclass
class NodeSectionConfig:
    """[node] section."""
    network: str = "mainnet"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NodeSectionConfig":
        return cls(
            network=data.get("network", "mainnet"),
            log_level=data.get("log_level", "INFO"),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("BEERUS_NETWORK"):
            self.network = v
        if v := os.environ.get("BEERUS_LOG_LEVEL"):
            self.log_level = v

    @property
    def chain_id(self) -> int:
        return NETWORK_CHAIN_IDS[self.network]


@dataclass
class EthereumConfig:
    """[ethereum] section."""
    execution_rpc: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EthereumConfig":
        return cls(
            execution_rpc=data.get("execution_rpc", ""),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("ETHEREUM_EXECUTION_RPC_URL"):
            self.execution_rpc = v


@dataclass
class StarknetConfig:
    """[starknet] section."""
    rpc: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StarknetConfig":
        return cls(rpc=data.get("rpc", ""))

    def apply_env(self) -> None:
        if v := os.environ.get("STARKNET_RPC_URL"):
            self.rpc = v


# -----------------------------------------------------------------------
# Top-level config
# -----------------------------------------------------------------------

@dataclass
class BeerusConfig:
    """
    Unified Beerus configuration.

    Loads every section of config.toml and applies environment variable
    overrides.
    """
    node: NodeSectionConfig = field(default_factory=NodeSectionConfig)
    ethereum: EthereumConfig = field(default_factory=EthereumConfig)
    starknet: StarknetConfig = field(default_factory=StarknetConfig)
    rpc: RPCConfig = field(default_factory=RPCConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BeerusConfig":
        """Create BeerusConfig from a parsed TOML dict."""
        return cls(
            node=NodeSectionConfig.from_dict(data.get("node", {})),
            ethereum=EthereumConfig.from_dict(data.get("ethereum", {})),
            starknet=StarknetConfig.from_dict(data.get("starknet", {})),
            rpc=RPCConfig.from_dict(data.get("rpc", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "BeerusConfig":
        """
        Load configuration from a TOML file.

        A missing file yields defaults (plus environment overrides).
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning("Config file not found: %s, using defaults", config_path)
            cfg = cls()
            cfg.apply_env()
            return cfg

        with open(path, "rb") as f:
            raw = tomli.load(f)

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        return cfg

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.node.apply_env()
        self.ethereum.apply_env()
        self.starknet.apply_env()
        self.rpc.apply_env()

    def validate(self) -> bool:
        """
        Validate all configuration sections.

        Raises:
            ValueError: on invalid config
        """
        if self.node.network not in NETWORK_CHAIN_IDS:
            raise ValueError(f"Unknown network: {self.node.network}")
        if self.node.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.node.log_level}")
        if not self.ethereum.execution_rpc:
            raise ValueError("ethereum.execution_rpc must be set")
        if not self.starknet.rpc:
            raise ValueError("starknet.rpc must be set")
        self.rpc.validate()
        return True


def load_config(path: Optional[str] = None) -> BeerusConfig:
    """
    Load Beerus configuration.

    Resolution order:
        1. Explicit *path* argument
        2. BEERUS_CONFIG env var
        3. ./config.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("BEERUS_CONFIG", "config.toml")
    return BeerusConfig.from_file(path)
