# cifer_sdk/common.py
"""
CIFER SDK: Common Helpers

Hex/bytes conversion, keccak-256 and the cancellable sleep shared by the
job poller, the block-freshness retry loop and the flows.

Cancellation uses asyncio.Event as the abort token: the caller sets it,
every wait in the SDK races against it.

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

import asyncio
from typing import Optional, Union

from web3 import Web3

from .errors import AbortedError


AbortSignal = asyncio.Event

ZERO_ADDRESS = "0x" + "00" * 20
ZERO_BYTES32 = "0x" + "00" * 32


# =============================================================================
# Hex / Bytes
# =============================================================================

def to_bytes(value: Union[str, bytes, bytearray]) -> bytes:
    """Accept "0x" hex or raw bytes, return bytes."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return Web3.to_bytes(hexstr=value)


def to_hex(value: Union[str, bytes, bytearray]) -> str:
    """Accept "0x" hex or raw bytes, return lowercase "0x" hex."""
    if isinstance(value, str):
        return value.lower() if value.startswith("0x") else "0x" + value.lower()
    return Web3.to_hex(bytes(value))


def to_bytes32_hex(value: Union[int, str, bytes]) -> str:
    """Left-pad an int, hex string or bytes into a 32-byte hex topic."""
    if isinstance(value, int):
        raw = value.to_bytes(32, "big")
    else:
        raw = to_bytes(value)
        if len(raw) > 32:
            raise ValueError(f"Value is {len(raw)} bytes, expected at most 32")
        raw = raw.rjust(32, b"\x00")
    return Web3.to_hex(raw)


def byte_length(value: Union[str, bytes]) -> int:
    """Byte length of a hex string or bytes."""
    if isinstance(value, (bytes, bytearray)):
        return len(value)
    body = value[2:] if value.startswith("0x") else value
    return len(body) // 2


def keccak256(value: Union[str, bytes]) -> str:
    """keccak-256 of hex or raw bytes, as "0x" hex."""
    return Web3.to_hex(Web3.keccak(to_bytes(value)))


def trim_url(url: str) -> str:
    """Strip a single trailing slash."""
    return url[:-1] if url.endswith("/") else url


# =============================================================================
# Cancellation
# =============================================================================

def check_aborted(abort_signal: Optional[AbortSignal], message: str = "Operation aborted") -> None:
    """Raise AbortedError if the signal is already set."""
    if abort_signal is not None and abort_signal.is_set():
        raise AbortedError(message)


async def sleep_with_abort(
    ms: float,
    abort_signal: Optional[AbortSignal] = None,
    message: str = "Operation aborted",
) -> None:
    """
    Sleep for ms milliseconds, waking early if the abort signal fires.

    Args:
        ms: Delay in milliseconds
        abort_signal: Optional asyncio.Event used as the abort token
        message: Message for the AbortedError

    Raises:
        AbortedError: If the signal is set before or during the sleep
    """
    check_aborted(abort_signal, message)
    if abort_signal is None:
        await asyncio.sleep(ms / 1000)
        return

    try:
        await asyncio.wait_for(abort_signal.wait(), timeout=ms / 1000)
    except asyncio.TimeoutError:
        return
    raise AbortedError(message)
