"""
Beerus shared light client handle.

One ``BeerusLightClient`` is owned by the host process and shared by every
RPC request. Each client sits behind its own ``ReadWriteLock``: RPC handlers
only ever take the read side, for the duration of a single backend call,
while the sync task takes the write side through ``write_ethereum()`` /
``write_starknet()`` when it mutates client state.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional, TypeVar

from ..constants import DEFAULT_BACKEND_TIMEOUT
from ..exceptions import BackendError, BeerusException
from ..logger import get_logger
from .ethereum import EthereumLightClient
from .lock import ReadWriteLock
from .starknet import StarknetLightClient

logger = get_logger(__name__)

T = TypeVar("T")
C = TypeVar("C")


class BeerusLightClient:
    """
    Shared handle over the Ethereum and Starknet light clients.

    Args:
        ethereum_lightclient: Ethereum capability implementation
        starknet_lightclient: Starknet capability implementation
        backend_timeout: Seconds a single backend call may take (None = unbounded)
    """

    def __init__(
        self,
        ethereum_lightclient: EthereumLightClient,
        starknet_lightclient: StarknetLightClient,
        backend_timeout: Optional[float] = DEFAULT_BACKEND_TIMEOUT,
    ):
        self.ethereum_lightclient = ethereum_lightclient
        self.starknet_lightclient = starknet_lightclient
        self.backend_timeout = backend_timeout
        self.ethereum_lock = ReadWriteLock()
        self.starknet_lock = ReadWriteLock()

    async def _read(
        self,
        name: str,
        lock: ReadWriteLock,
        client: C,
        operation: Callable[[C], Awaitable[T]],
    ) -> T:
        try:
            async with lock.read():
                return await asyncio.wait_for(operation(client), self.backend_timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"{name} light client call timed out after {self.backend_timeout}s")
            raise BackendError(
                f"{name} light client did not answer within {self.backend_timeout}s"
            ) from e
        except BeerusException:
            raise
        except Exception as e:
            logger.debug(f"{name} light client call failed: {e!r}")
            raise BackendError(f"{name} light client error: {e}") from e

    async def read_ethereum(self, operation: Callable[[EthereumLightClient], Awaitable[T]]) -> T:
        """
        Run one read-only Ethereum call under the shared read lock.

        The lock is released as soon as the call returns, so callers format
        the result without holding it.

        Raises:
            BackendError: The client failed or did not answer in time
        """
        return await self._read("Ethereum", self.ethereum_lock, self.ethereum_lightclient, operation)

    async def read_starknet(self, operation: Callable[[StarknetLightClient], Awaitable[T]]) -> T:
        """Run one read-only Starknet call under the Starknet read lock."""
        return await self._read("Starknet", self.starknet_lock, self.starknet_lightclient, operation)

    @asynccontextmanager
    async def write_ethereum(self) -> AsyncIterator[EthereumLightClient]:
        """Exclusive access to the Ethereum client, for state mutation by the sync task."""
        async with self.ethereum_lock.write():
            yield self.ethereum_lightclient

    @asynccontextmanager
    async def write_starknet(self) -> AsyncIterator[StarknetLightClient]:
        """Exclusive access to the Starknet client."""
        async with self.starknet_lock.write():
            yield self.starknet_lightclient

    async def close(self) -> None:
        """Close clients that hold network resources."""
        for client in (self.ethereum_lightclient, self.starknet_lightclient):
            aclose = getattr(client, "aclose", None)
            if aclose is not None:
                await aclose()
