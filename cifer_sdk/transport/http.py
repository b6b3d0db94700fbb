# cifer_sdk/transport/http.py
"""
CIFER SDK Transport: HTTP

The single seam through which the SDK talks HTTP. Every network-facing
function takes an optional HTTPTransport; flows pass ctx.transport.

Implementations:
    HttpxTransport     - httpx.AsyncClient (default)
    MockHTTPTransport  - recorded requests and canned responses for tests

Usage:
    async with HttpxTransport(timeout=10.0) as transport:
        response = await transport.request("GET", "https://blackbox/healthz")
        print(response.status_code, response.json())

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

import json as jsonlib
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Callable, Union
from urllib.parse import urlsplit

import httpx

from ..errors import CiferError


logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT_SECONDS = 30.0


# =============================================================================
# Exceptions
# =============================================================================

class TransportError(CiferError):
    """Request never produced an HTTP response (DNS, connect, timeout)."""

    def __init__(self, message: str, url: str, cause: Optional[BaseException] = None):
        super().__init__(message, "TRANSPORT_ERROR", cause)
        self.url = url


# =============================================================================
# Request/Response Types
# =============================================================================

@dataclass
class HTTPResponse:
    """Transport-neutral HTTP response."""
    status_code: int
    content: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode body as JSON (raises ValueError on bad JSON)."""
        return jsonlib.loads(self.content)

    def json_or_empty(self) -> Any:
        """Decode body as JSON, or {} when the body is not JSON."""
        try:
            return self.json()
        except ValueError:
            return {}

    @classmethod
    def from_json(cls, data: Any, status_code: int = 200) -> 'HTTPResponse':
        """Build a JSON response (used by mocks)."""
        return cls(
            status_code=status_code,
            content=jsonlib.dumps(data).encode(),
            headers={"content-type": "application/json"},
        )


@dataclass
class RecordedRequest:
    """Request captured by MockHTTPTransport."""
    method: str
    url: str
    json: Any = None
    data: Optional[Dict[str, Any]] = None
    files: Optional[Dict[str, Any]] = None
    headers: Optional[Dict[str, str]] = None

    @property
    def path(self) -> str:
        return urlsplit(self.url).path


# =============================================================================
# Transport Interface
# =============================================================================

class HTTPTransport(ABC):
    """Abstract async HTTP transport."""

    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> HTTPResponse:
        """
        Send a request and return the full response.

        Args:
            method: HTTP method
            url: Absolute URL
            json: JSON body
            data: Form fields (multipart when files is given)
            files: Multipart files, {name: (filename, bytes, content_type)}
            headers: Extra headers

        Raises:
            TransportError: If no response was received
        """
        pass


class HttpxTransport(HTTPTransport):
    """
    HTTPTransport on httpx.AsyncClient.

    With an injected client the caller owns its lifecycle. Without one, a
    short-lived client is opened per request so nothing leaks.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        headers: Optional[Dict[str, str]] = None,
    ):
        self._client = client
        self._timeout = timeout
        self._headers = dict(headers or {})
        self._owns_client = False

    async def __aenter__(self) -> 'HttpxTransport':
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, headers=self._headers)
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the client if this transport opened it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> HTTPResponse:
        logger.debug("%s %s", method, url)
        try:
            if self._client is not None:
                response = await self._client.request(
                    method, url, json=json, data=data, files=files, headers=headers,
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout, headers=self._headers) as client:
                    response = await client.request(
                        method, url, json=json, data=data, files=files, headers=headers,
                    )
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP request to {url} failed: {e}", url, e) from e

        return HTTPResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
        )


# =============================================================================
# Mock Transport
# =============================================================================

RouteResponse = Union[HTTPResponse, List[HTTPResponse], Callable[[RecordedRequest], HTTPResponse]]


class MockHTTPTransport(HTTPTransport):
    """
    Mock HTTP transport for testing.

    Routes match on method and URL path suffix. A list of responses is
    consumed in order and its last entry repeats. Unrouted requests fall
    back to the response queue, then to 404.
    """

    def __init__(self):
        self.requests: List[RecordedRequest] = []
        self._routes: List[tuple] = []
        self._response_queue: List[HTTPResponse] = []

    def add_route(self, method: str, path_suffix: str, response: RouteResponse) -> None:
        """Register a canned response for METHOD ...path_suffix."""
        if isinstance(response, list):
            response = list(response)
        self._routes.append((method.upper(), path_suffix, response))

    def queue_response(self, response: HTTPResponse) -> None:
        """Queue a response for the next unrouted request."""
        self._response_queue.append(response)

    def requests_to(self, path_suffix: str) -> List[RecordedRequest]:
        """Recorded requests whose path ends with path_suffix."""
        return [r for r in self.requests if r.path.endswith(path_suffix)]

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> HTTPResponse:
        recorded = RecordedRequest(
            method=method.upper(), url=url, json=json, data=data, files=files, headers=headers,
        )
        self.requests.append(recorded)

        for route_method, suffix, response in self._routes:
            if route_method == recorded.method and recorded.path.endswith(suffix):
                if callable(response):
                    return response(recorded)
                if isinstance(response, list):
                    return response.pop(0) if len(response) > 1 else response[0]
                return response

        if self._response_queue:
            return self._response_queue.pop(0)
        return HTTPResponse.from_json({"error": f"No mock route for {method} {url}"}, 404)
