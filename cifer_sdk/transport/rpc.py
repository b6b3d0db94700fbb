# cifer_sdk/transport/rpc.py
"""
CIFER SDK Transport: JSON-RPC

Minimal JSON-RPC 2.0 client on top of HTTPTransport. Used by
RpcReadClient for eth_blockNumber / eth_getLogs / eth_call.

Usage:
    rpc = JsonRpcClient("https://sepolia.example.org", transport=HttpxTransport())
    head = int(await rpc.call("eth_blockNumber", []), 16)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Union

from ..errors import CiferError
from .http import HTTPTransport, HttpxTransport


JSONRPC_VERSION = "2.0"


# =============================================================================
# Exceptions
# =============================================================================

class RPCError(CiferError):
    """JSON-RPC error response, or a non-2xx HTTP status from the node."""

    def __init__(self, message: str, rpc_code: int = -32000, data: Any = None):
        super().__init__(message, "RPC_ERROR")
        self.rpc_code = rpc_code
        self.data = data


# =============================================================================
# Request/Response Types
# =============================================================================

@dataclass
class RPCRequest:
    """JSON-RPC request."""
    method: str
    params: List[Any] = field(default_factory=list)
    id: Union[int, str] = 1
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
            "params": self.params,
            "id": self.id,
        }


@dataclass
class RPCResponse:
    """JSON-RPC response."""
    id: Union[int, str, None]
    result: Any = None
    error: Optional[Dict[str, Any]] = None
    jsonrpc: str = JSONRPC_VERSION

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RPCResponse':
        return cls(
            id=data.get("id"),
            result=data.get("result"),
            error=data.get("error"),
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
        )


# =============================================================================
# Client
# =============================================================================

class JsonRpcClient:
    """JSON-RPC client bound to one endpoint."""

    def __init__(self, endpoint: str, transport: Optional[HTTPTransport] = None):
        self._endpoint = endpoint
        self._transport = transport or HttpxTransport()
        self._request_id = 0

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def _next_id(self) -> int:
        self._request_id += 1
        return self._request_id

    async def call(self, method: str, params: List[Any]) -> Any:
        """
        Make RPC call.

        Args:
            method: RPC method name
            params: Method parameters

        Returns:
            Result from RPC response

        Raises:
            RPCError: On HTTP failure status or JSON-RPC error
        """
        request = RPCRequest(method=method, params=params, id=self._next_id())
        http_response = await self._transport.request(
            "POST",
            self._endpoint,
            json=request.to_dict(),
            headers={"Content-Type": "application/json"},
        )
        if not http_response.ok:
            raise RPCError(
                f"RPC request failed: {http_response.status_code} {http_response.text}",
                rpc_code=http_response.status_code,
            )

        response = RPCResponse.from_dict(http_response.json())
        if response.is_error:
            error = response.error or {}
            raise RPCError(
                f"RPC error: {error.get('message', 'Unknown error')}",
                rpc_code=error.get("code", -32000),
                data=error.get("data"),
            )
        return response.result
