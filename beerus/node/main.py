"""
Beerus RPC node

FastAPI application serving the JSON-RPC interface:
    POST /rpc    JSON-RPC 2.0 (single and batch)
    WS   /ws     JSON-RPC 2.0 over WebSocket
    GET  /health liveness and registered method count
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ..config import BeerusConfig, load_config
from ..constants import BEERUS_VERSION
from ..exceptions import BackendError, ConfigurationError
from ..lightclient import BeerusLightClient
from ..lightclient.http import HttpEthereumClient, HttpStarknetClient
from ..logger import get_logger, set_log_level
from ..rpc.modules import EthModule, StarkModule
from ..rpc.server import RPCServer

logger = get_logger(__name__)


def build_light_client(config: BeerusConfig) -> BeerusLightClient:
    """
    Create the shared light client handle from configuration.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    try:
        config.validate()
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    timeout = config.rpc.backend_timeout
    return BeerusLightClient(
        ethereum_lightclient=HttpEthereumClient(config.ethereum.execution_rpc, timeout=timeout),
        starknet_lightclient=HttpStarknetClient(config.starknet.rpc, timeout=timeout),
        backend_timeout=timeout,
    )


async def check_chain_id(light_client: BeerusLightClient, config: BeerusConfig) -> None:
    """
    Compare the upstream chain id with the configured network.

    An upstream that cannot be reached is only logged; requests will surface
    the failure on their own.

    Raises:
        ConfigurationError: The upstream serves a different chain
    """
    expected = config.node.chain_id
    try:
        actual = await light_client.read_ethereum(lambda eth: eth.chain_id())
    except BackendError as e:
        logger.warning(f"Could not verify upstream chain id: {e}")
        return
    if actual != expected:
        raise ConfigurationError(
            f"Upstream chain id {actual} does not match network "
            f"{config.node.network} (chain id {expected})"
        )


def create_app(
    config: Optional[BeerusConfig] = None,
    client: Optional[BeerusLightClient] = None,
) -> FastAPI:
    """
    Build the Beerus FastAPI application.

    Args:
        config: Loaded configuration (defaults to ``load_config()``)
        client: Shared light client handle. When omitted, one is built from
            ``config`` at startup and closed at shutdown.
    """
    if config is None:
        config = load_config()
    set_log_level(config.node.log_level)

    rpc_server = RPCServer()
    modules = []
    if config.rpc.modules.eth:
        modules.append(EthModule())
    if config.rpc.modules.stark:
        modules.append(StarkModule())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if client is None:
            light_client = build_light_client(config)
            try:
                await check_chain_id(light_client, config)
            except ConfigurationError:
                await light_client.close()
                raise
        else:
            light_client = client

        # Wire the shared handle into every module before serving
        for module in modules:
            module.client = light_client
            rpc_server.register_module(module)

        app.state.light_client = light_client
        logger.info(f"Beerus RPC {BEERUS_VERSION} on {config.node.network}: "
                    f"{len(rpc_server.get_methods())} methods")
        logger.info(f"RPC endpoint: http://{config.rpc.http.host}:{config.rpc.http.port}{config.rpc.http.path}")
        try:
            yield
        finally:
            if client is None:
                await light_client.close()
            logger.info("Beerus RPC stopped")

    app = FastAPI(title="Beerus RPC", version=BEERUS_VERSION, lifespan=lifespan)
    app.state.rpc_server = rpc_server
    app.state.config = config

    if config.rpc.http.cors_enabled:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.rpc.http.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.post(config.rpc.http.path)
    async def rpc_endpoint(request: Request):
        """JSON-RPC 2.0 endpoint"""
        result = await rpc_server.handle_request(await request.body())
        if result is None:
            return Response(status_code=204)
        # handle_request returns a JSON string; send it raw to avoid double-encoding
        return Response(content=result, media_type="application/json")

    if config.rpc.websocket.enabled:
        @app.websocket(config.rpc.websocket.path)
        async def ws_endpoint(websocket: WebSocket):
            """JSON-RPC 2.0 over WebSocket, one response per request message."""
            await websocket.accept()
            try:
                while True:
                    message = await websocket.receive_text()
                    result = await rpc_server.handle_request(message)
                    if result is not None:
                        await websocket.send_text(result)
            except WebSocketDisconnect:
                logger.debug("WebSocket client disconnected")

    @app.get("/health")
    async def health():
        """Health check."""
        return {
            "status": "ok",
            "version": BEERUS_VERSION,
            "network": config.node.network,
            "methods": len(rpc_server.get_methods()),
        }

    return app
