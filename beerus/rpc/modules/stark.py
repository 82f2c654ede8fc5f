"""
Beerus stark_* RPC Methods

Starknet subset served from the Starknet light client.
"""

from ..codec import encode_decimal
from ..server import RPCError, RPCErrorCode, RPCModule, rpc_method


class StarkModule(RPCModule):
    """
    Starknet RPC methods (stark_* namespace).
    """

    namespace = "stark"

    async def _read(self, operation):
        if self.client is None:
            raise RPCError(RPCErrorCode.INTERNAL_ERROR, "Light client not available")
        return await self.client.read_starknet(operation)

    @rpc_method
    async def chainId(self) -> str:
        """
        Returns the configured Starknet chain id.

        Returns:
            Chain id felt as a decimal string
        """
        chain_id = await self._read(lambda sn: sn.chain_id())
        return encode_decimal(chain_id)

    @rpc_method
    async def blockNumber(self) -> int:
        """Returns the most recent accepted block number."""
        return await self._read(lambda sn: sn.block_number())
