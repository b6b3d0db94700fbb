# cifer_sdk/blackbox/common.py
"""
CIFER SDK Blackbox: Shared Request Plumbing

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from typing import Optional, Any, Dict

from ..auth.block_freshness import parse_block_freshness_error
from ..common import trim_url
from ..errors import CiferError, BlackboxError, SecretNotReadyError
from ..transport import HTTPTransport, HttpxTransport, HTTPResponse


JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def endpoint_url(blackbox_url: str, path: str) -> str:
    return trim_url(blackbox_url) + path


def resolve_transport(transport: Optional[HTTPTransport]) -> HTTPTransport:
    return transport if transport is not None else HttpxTransport()


def error_message(body: Any, status_code: int) -> str:
    """Best-effort error text from a Blackbox error body."""
    if isinstance(body, dict):
        message = body.get("error") or body.get("message")
        if message:
            return str(message)
    elif isinstance(body, str) and body:
        return body
    return f"Request failed with status {status_code}"


def parse_blackbox_error_response(body: Any, status_code: int, endpoint: str) -> CiferError:
    """
    Map a Blackbox error body to a typed SDK error.

    Args:
        body: Decoded JSON body or raw text
        status_code: HTTP status code
        endpoint: Endpoint path, for diagnostics

    Returns:
        BlockStaleError for freshness rejections (retryable),
        SecretNotReadyError while the secret is syncing,
        BlackboxError otherwise
    """
    message = error_message(body, status_code)

    stale = parse_block_freshness_error(message)
    if stale is not None:
        return stale

    lowered = message.lower()
    if "is syncing" in lowered or "not ready" in lowered:
        return SecretNotReadyError()

    return BlackboxError(message, status_code, endpoint)


def raise_for_response(response: HTTPResponse, endpoint: str) -> None:
    """Raise the mapped error for a non-2xx response."""
    if not response.ok:
        body = response.json_or_empty() or response.text
        raise parse_blackbox_error_response(body, response.status_code, endpoint)


def signed_body(data: str, signature: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"data": data, "signature": signature}
    body.update(extra)
    return body
