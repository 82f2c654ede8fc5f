"""
Beerus RPC Configuration
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..constants import DEFAULT_BACKEND_TIMEOUT


@dataclass
class HTTPConfig:
    """HTTP RPC configuration."""

    # Listen address
    host: str = "127.0.0.1"

    # Listen port
    port: int = 3030

    # Enable CORS
    cors_enabled: bool = True

    # CORS allowed origins
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # JSON-RPC endpoint path
    path: str = "/rpc"


@dataclass
class WebSocketConfig:
    """WebSocket RPC configuration."""

    enabled: bool = True

    # Endpoint path on the HTTP listener
    path: str = "/ws"


@dataclass
class ModulesConfig:
    """RPC modules configuration."""

    # eth_* namespace
    eth: bool = True

    # stark_* namespace
    stark: bool = True


@dataclass
class RPCConfig:
    """RPC configuration."""

    http: HTTPConfig = field(default_factory=HTTPConfig)

    websocket: WebSocketConfig = field(default_factory=WebSocketConfig)

    modules: ModulesConfig = field(default_factory=ModulesConfig)

    # Seconds a single light client call may take before the request fails
    backend_timeout: float = DEFAULT_BACKEND_TIMEOUT

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "RPCConfig":
        """Create from dictionary."""
        config = dict(config)
        http_dict = config.pop("http", {})
        websocket_dict = config.pop("websocket", {})
        modules_dict = config.pop("modules", {})

        return cls(
            **config,
            http=HTTPConfig(**http_dict),
            websocket=WebSocketConfig(**websocket_dict),
            modules=ModulesConfig(**modules_dict),
        )

    def apply_env(self) -> None:
        """Override from environment variables."""
        if v := os.environ.get("BEERUS_RPC_HOST"):
            self.http.host = v
        if v := os.environ.get("BEERUS_RPC_PORT"):
            self.http.port = int(v)
        if v := os.environ.get("BEERUS_BACKEND_TIMEOUT"):
            self.backend_timeout = float(v)

    def validate(self) -> None:
        if not 0 < self.http.port < 65536:
            raise ValueError(f"Invalid RPC port: {self.http.port}")
        if self.backend_timeout <= 0:
            raise ValueError("backend_timeout must be > 0")
        if not (self.modules.eth or self.modules.stark):
            raise ValueError("At least one RPC module must be enabled")
