# tests/test_transport.py
"""
httpx transport and JSON-RPC client.
"""

import asyncio
import json

import httpx
import pytest

from cifer_sdk.transport import (
    HTTPResponse,
    HttpxTransport,
    JsonRpcClient,
    MockHTTPTransport,
    RPCError,
    TransportError,
)


def httpx_transport(handler):
    """HttpxTransport whose client is served by an in-process handler."""
    return HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


# =============================================================================
# HttpxTransport
# =============================================================================

def test_httpx_transport_returns_response():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json={"ok": True})

    response = asyncio.run(httpx_transport(handler).request(
        "POST", "https://blackbox.test/encrypt-payload", json={"a": 1},
    ))

    assert response.status_code == 201
    assert response.ok
    assert response.json() == {"ok": True}
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/encrypt-payload"
    assert json.loads(seen[0].content) == {"a": 1}


def test_httpx_transport_wraps_connection_errors():

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as info:
        asyncio.run(httpx_transport(handler).request("GET", "https://blackbox.test/healthz"))
    assert info.value.url == "https://blackbox.test/healthz"
    assert isinstance(info.value.cause, httpx.ConnectError)


def test_non_json_body():
    response = HTTPResponse(502, b"<html>bad gateway</html>")

    assert not response.ok
    assert response.json_or_empty() == {}
    with pytest.raises(ValueError):
        response.json()


# =============================================================================
# MockHTTPTransport
# =============================================================================

def test_mock_transport_sequence_repeats_last():
    transport = MockHTTPTransport()
    transport.add_route("GET", "/status", [HTTPResponse(200, b"1"), HTTPResponse(200, b"2")])

    async def scenario():
        return [
            (await transport.request("GET", "https://x.test/jobs/a/status")).text
            for _ in range(3)
        ]

    assert asyncio.run(scenario()) == ["1", "2", "2"]


def test_mock_transport_unrouted_is_404():
    transport = MockHTTPTransport()

    response = asyncio.run(transport.request("POST", "https://x.test/nowhere"))

    assert response.status_code == 404
    assert transport.requests_to("/nowhere")[0].method == "POST"


# =============================================================================
# JSON-RPC
# =============================================================================

def test_json_rpc_increments_ids():
    transport = MockHTTPTransport()
    transport.add_route("POST", "/rpc", lambda request: HTTPResponse.from_json(
        {"jsonrpc": "2.0", "id": request.json["id"], "result": "0x1"},
    ))
    client = JsonRpcClient("https://node.test/rpc", transport)

    async def scenario():
        await client.call("eth_chainId", [])
        await client.call("eth_chainId", [])

    asyncio.run(scenario())

    assert [r.json["id"] for r in transport.requests] == [1, 2]
    assert transport.requests[0].json["jsonrpc"] == "2.0"


def test_json_rpc_http_failure():
    transport = MockHTTPTransport()
    transport.add_route("POST", "/rpc", HTTPResponse(429, b"rate limited"))
    client = JsonRpcClient("https://node.test/rpc", transport)

    with pytest.raises(RPCError) as info:
        asyncio.run(client.call("eth_blockNumber", []))
    assert info.value.rpc_code == 429


def test_json_rpc_error_object():
    transport = MockHTTPTransport()
    transport.add_route("POST", "/rpc", HTTPResponse.from_json({
        "jsonrpc": "2.0", "id": 1, "error": {"code": 3, "message": "execution reverted", "data": "0x08c379a0"},
    }))
    client = JsonRpcClient("https://node.test/rpc", transport)

    with pytest.raises(RPCError) as info:
        asyncio.run(client.call("eth_call", []))
    assert info.value.rpc_code == 3
    assert info.value.data == "0x08c379a0"
    assert "execution reverted" in info.value.message
