# cifer_sdk/adapters/rpc_read_client.py
"""
CIFER SDK Adapters: JSON-RPC ReadClient

ReadClient backed by plain JSON-RPC endpoints, one per chain.

Usage:
    client = RpcReadClient({
        752025: "https://rpc.ternoa.network",
        11155111: "https://sepolia.example.org",
    })
    head = await client.get_block_number(752025)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from typing import Optional, Dict, List

from ..errors import ConfigError
from ..transport import HTTPTransport, HttpxTransport, JsonRpcClient
from ..types import Hex, Log, LogFilter, CallRequest
from .base import ReadClient


class RpcReadClient(ReadClient):
    """ReadClient over eth_blockNumber / eth_getLogs / eth_call."""

    def __init__(
        self,
        rpc_url_by_chain_id: Dict[int, str],
        transport: Optional[HTTPTransport] = None,
    ):
        """
        Args:
            rpc_url_by_chain_id: RPC endpoint per chain id
            transport: HTTP transport shared by all chains
        """
        self._urls = dict(rpc_url_by_chain_id)
        self._transport = transport or HttpxTransport()
        self._clients: Dict[int, JsonRpcClient] = {}

    def _client(self, chain_id: int) -> JsonRpcClient:
        client = self._clients.get(chain_id)
        if client is None:
            url = self._urls.get(chain_id)
            if not url:
                raise ConfigError(f"No RPC URL configured for chain {chain_id}")
            client = JsonRpcClient(url, self._transport)
            self._clients[chain_id] = client
        return client

    async def get_block_number(self, chain_id: int) -> int:
        result = await self._client(chain_id).call("eth_blockNumber", [])
        return int(result, 16)

    async def get_logs(self, chain_id: int, log_filter: LogFilter) -> List[Log]:
        result = await self._client(chain_id).call("eth_getLogs", [log_filter.to_rpc_params()])
        return [Log.from_rpc(raw) for raw in result or []]

    async def call(self, chain_id: int, request: CallRequest) -> Hex:
        block_tag = request.block_tag
        if isinstance(block_tag, int):
            block_tag = hex(block_tag)
        return await self._client(chain_id).call(
            "eth_call",
            [{"to": request.to, "data": request.data}, block_tag],
        )
