# cifer_sdk/transport/__init__.py
"""
CIFER SDK Transport Layer

HTTP and JSON-RPC plumbing shared by the Blackbox client, discovery and
the RPC read client.

Updated: 2025-01-20
Version: 0.1.0
"""

from .http import (
    HTTPTransport,
    HttpxTransport,
    MockHTTPTransport,
    HTTPResponse,
    RecordedRequest,
    TransportError,
    DEFAULT_TIMEOUT_SECONDS,
)

from .rpc import (
    JsonRpcClient,
    RPCRequest,
    RPCResponse,
    RPCError,
    JSONRPC_VERSION,
)


__all__ = [
    # HTTP
    "HTTPTransport",
    "HttpxTransport",
    "MockHTTPTransport",
    "HTTPResponse",
    "RecordedRequest",
    "TransportError",
    "DEFAULT_TIMEOUT_SECONDS",
    # JSON-RPC
    "JsonRpcClient",
    "RPCRequest",
    "RPCResponse",
    "RPCError",
    "JSONRPC_VERSION",
]
