"""
Beerus JSON-RPC 2.0 Server

Implements the JSON-RPC 2.0 envelope for the Beerus RPC modules:
- Method registration and namespacing
- Batch requests (entries run concurrently)
- Conversion of domain errors into structured error objects
"""

import asyncio
import inspect
import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional, Union

from ..exceptions import (
    BackendError,
    BeerusException,
    BlockNotFoundError,
    DecodeError,
    IndexOutOfRangeError,
)
from ..logger import get_logger

logger = get_logger(__name__)


class RPCErrorCode(IntEnum):
    """JSON-RPC 2.0 error codes."""

    # Standard errors
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Server errors (-32000 to -32099)
    SERVER_ERROR = -32000
    RESOURCE_NOT_FOUND = -32001
    RESOURCE_UNAVAILABLE = -32002


@dataclass
class RPCError(Exception):
    """JSON-RPC error."""

    code: int
    message: str
    data: Optional[Any] = None

    def to_dict(self) -> dict:
        result = {
            "code": int(self.code),
            "message": self.message,
        }
        if self.data is not None:
            result["data"] = self.data
        return result

    @classmethod
    def from_exception(cls, exc: BeerusException) -> "RPCError":
        """Map a domain exception onto its JSON-RPC error."""
        if isinstance(exc, (DecodeError, IndexOutOfRangeError)):
            return cls(RPCErrorCode.INVALID_PARAMS, str(exc))
        if isinstance(exc, BlockNotFoundError):
            return cls(RPCErrorCode.RESOURCE_NOT_FOUND, str(exc))
        if isinstance(exc, BackendError):
            return cls(RPCErrorCode.SERVER_ERROR, str(exc))
        return cls(RPCErrorCode.INTERNAL_ERROR, str(exc))


@dataclass
class RPCRequest:
    """JSON-RPC request."""

    jsonrpc: str
    method: str
    params: Union[List, Dict, None]
    id: Union[str, int, None]

    @classmethod
    def from_dict(cls, data: dict) -> "RPCRequest":
        return cls(
            jsonrpc=data.get("jsonrpc", "2.0"),
            method=data.get("method", ""),
            params=data.get("params"),
            id=data.get("id"),
        )

    @property
    def is_notification(self) -> bool:
        """Check if this is a notification (no id)."""
        return self.id is None


@dataclass
class RPCResponse:
    """JSON-RPC response."""

    jsonrpc: str = "2.0"
    result: Optional[Any] = None
    error: Optional[Dict] = None
    id: Union[str, int, None] = None

    def to_dict(self) -> dict:
        response = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            response["error"] = self.error
        else:
            response["result"] = self.result
        return response

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


# Type for RPC method handlers
RPCMethod = Callable[..., Any]


class RPCModule:
    """
    Base class for RPC modules.

    Subclass this to create method namespaces like eth_, stark_.
    """

    # Namespace prefix (e.g., "eth", "stark")
    namespace: str = ""

    def __init__(self, client: Any = None):
        """
        Initialize module with the shared light client handle.

        Args:
            client: BeerusLightClient shared by every request
        """
        self.client = client

    def get_methods(self) -> Dict[str, RPCMethod]:
        """
        Get all public methods in this module.

        Methods starting with underscore are private.

        Returns:
            Dict mapping method names to callables
        """
        methods = {}
        for name in dir(self):
            if name.startswith("_"):
                continue
            attr = getattr(self, name)
            if callable(attr) and hasattr(attr, "__rpc_method__"):
                full_name = f"{self.namespace}_{name}" if self.namespace else name
                methods[full_name] = attr
        return methods


def rpc_method(func: RPCMethod) -> RPCMethod:
    """
    Decorator to mark a method as an RPC endpoint.

    Usage:
        @rpc_method
        async def blockNumber(self) -> int:
            return await self.client.read_ethereum(lambda eth: eth.get_block_number())
    """
    func.__rpc_method__ = True
    return func


class RPCServer:
    """
    JSON-RPC 2.0 server.

    Manages method registration and request handling.
    Can be used with HTTP or WebSocket transports.
    """

    def __init__(self):
        self._methods: Dict[str, RPCMethod] = {}
        self._modules: Dict[str, RPCModule] = {}

    def register_method(self, name: str, handler: RPCMethod):
        """
        Register a single RPC method.

        Args:
            name: Method name (e.g., "eth_blockNumber")
            handler: Async function to handle the method
        """
        self._methods[name] = handler
        logger.debug(f"Registered RPC method: {name}")

    def register_module(self, module: RPCModule):
        """
        Register an RPC module.

        Args:
            module: RPCModule instance
        """
        methods = module.get_methods()
        self._methods.update(methods)
        self._modules[module.namespace] = module
        logger.info(f"Registered RPC module: {module.namespace} ({len(methods)} methods)")

    def unregister_module(self, namespace: str):
        """
        Unregister an RPC module.

        Args:
            namespace: Module namespace to remove
        """
        if namespace in self._modules:
            module = self._modules.pop(namespace)
            for name in module.get_methods():
                self._methods.pop(name, None)
            logger.info(f"Unregistered RPC module: {namespace}")

    def get_methods(self) -> List[str]:
        """Get list of registered method names."""
        return list(self._methods.keys())

    async def handle_request(self, data: Union[str, bytes, dict, list]) -> Optional[str]:
        """
        Handle a JSON-RPC request.

        Args:
            data: Request data (JSON string or already-parsed object)

        Returns:
            JSON response string, or None for notifications
        """
        try:
            if isinstance(data, (str, bytes)):
                parsed = json.loads(data)
            else:
                parsed = data
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            error = RPCError(RPCErrorCode.PARSE_ERROR, f"Parse error: {e}")
            return RPCResponse(error=error.to_dict()).to_json()

        if isinstance(parsed, list):
            if not parsed:
                error = RPCError(RPCErrorCode.INVALID_REQUEST, "Empty batch")
                return RPCResponse(error=error.to_dict()).to_json()

            responses = await asyncio.gather(*[
                self._handle_single(req) for req in parsed
            ])

            # Filter out None responses (notifications)
            responses = [r for r in responses if r is not None]
            if not responses:
                return None
            return json.dumps(responses)

        response = await self._handle_single(parsed)
        if response is None:
            return None
        return json.dumps(response)

    @staticmethod
    def _bind(handler: RPCMethod, params: Union[List, Dict, None]) -> inspect.BoundArguments:
        """Check params against the handler signature before anything runs."""
        # Parameters are positional only; named params are not supported
        if params is None:
            params = []
        if not isinstance(params, list):
            raise RPCError(RPCErrorCode.INVALID_PARAMS, "Invalid params: expected a positional array")
        try:
            return inspect.signature(handler).bind(*params)
        except TypeError as e:
            raise RPCError(RPCErrorCode.INVALID_PARAMS, f"Invalid params: {e}") from e

    async def _handle_single(self, data: Any) -> Optional[dict]:
        """Handle a single request and return response dict."""
        if not isinstance(data, dict):
            return RPCResponse(
                error=RPCError(RPCErrorCode.INVALID_REQUEST, "Invalid request").to_dict()
            ).to_dict()

        request = RPCRequest.from_dict(data)

        if request.jsonrpc != "2.0":
            return RPCResponse(
                id=request.id,
                error=RPCError(RPCErrorCode.INVALID_REQUEST, "Invalid JSON-RPC version").to_dict()
            ).to_dict()

        if not request.method or not isinstance(request.method, str):
            return RPCResponse(
                id=request.id,
                error=RPCError(RPCErrorCode.INVALID_REQUEST, "Missing method").to_dict()
            ).to_dict()

        handler = self._methods.get(request.method)
        if handler is None:
            if request.is_notification:
                return None
            return RPCResponse(
                id=request.id,
                error=RPCError(
                    RPCErrorCode.METHOD_NOT_FOUND,
                    f"Method not found: {request.method}"
                ).to_dict()
            ).to_dict()

        try:
            bound = self._bind(handler, request.params)
            result = await handler(*bound.args, **bound.kwargs)

            if request.is_notification:
                return None

            return RPCResponse(id=request.id, result=result).to_dict()

        except RPCError as e:
            error = e

        except BeerusException as e:
            logger.debug(f"{request.method} failed: {e}")
            error = RPCError.from_exception(e)

        except Exception as e:
            logger.exception(f"Error handling RPC method {request.method}")
            error = RPCError(RPCErrorCode.INTERNAL_ERROR, str(e))

        if request.is_notification:
            return None
        return RPCResponse(id=request.id, error=error.to_dict()).to_dict()
