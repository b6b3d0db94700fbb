# cifer_sdk/auth/block_freshness.py
"""
CIFER SDK Auth: Block Freshness

Authentication strings embed a recent block number so the Blackbox can
reject replays. Between reading the head and the server validating the
signature the chain moves on, so a fresh request can arrive stale. This
module validates freshness locally and retries the stale case only.

Usage:
    async def call(get_fresh_block):
        block = await get_fresh_block()
        return await post_signed(block)

    result = await with_block_fresh_retry(call, read_client, chain_id)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Callable, Awaitable, TypeVar

from ..adapters.base import ReadClient
from ..common import AbortSignal, sleep_with_abort
from ..errors import AuthError, BlockStaleError, BlockInFutureError


logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Constants
# =============================================================================

# Blocks a signed block number may run ahead of our view of the head
FUTURE_BLOCK_TOLERANCE = 5

DEFAULT_FRESHNESS_WINDOW = 100
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 1000

_STALE_PATTERN = re.compile(
    r"Block number (\d+) is too old \(current: (\d+), max window: (\d+)\)"
)
_FUTURE_PATTERN = re.compile(r"Block number (\d+) is in the future \(current: (\d+)\)")


# =============================================================================
# Validation
# =============================================================================

async def get_fresh_block_number(chain_id: int, read_client: ReadClient) -> int:
    """
    Read the current head, uncached.

    Raises:
        AuthError: If the read client fails
    """
    try:
        return await read_client.get_block_number(chain_id)
    except Exception as e:
        raise AuthError(f"Failed to fetch block number for chain {chain_id}: {e}", e) from e


def validate_block_freshness(
    block_number: int,
    current_block: int,
    max_window_blocks: int = DEFAULT_FRESHNESS_WINDOW,
) -> bool:
    """
    Check a block number against the head.

    Args:
        block_number: Block embedded in the auth string
        current_block: Current chain head
        max_window_blocks: Maximum allowed age in blocks

    Returns:
        True when fresh

    Raises:
        BlockInFutureError: block_number > current_block + FUTURE_BLOCK_TOLERANCE
        BlockStaleError: current_block - block_number > max_window_blocks
    """
    if block_number > current_block + FUTURE_BLOCK_TOLERANCE:
        raise BlockInFutureError(block_number, current_block, FUTURE_BLOCK_TOLERANCE)
    if current_block - block_number > max_window_blocks:
        raise BlockStaleError(block_number, current_block, max_window_blocks)
    return True


def parse_block_freshness_error(message: str) -> Optional[BlockStaleError]:
    """
    Recognize a Blackbox freshness rejection in an error message.

    Future-block rejections are reported as stale with the tolerance as
    window, since a retry with a new head is the remedy for both.
    """
    match = _STALE_PATTERN.search(message)
    if match:
        return BlockStaleError(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    match = _FUTURE_PATTERN.search(message)
    if match:
        return BlockStaleError(int(match.group(1)), int(match.group(2)), FUTURE_BLOCK_TOLERANCE)

    return None


# =============================================================================
# Retry
# =============================================================================

async def with_block_fresh_retry(
    fn: Callable[[Callable[[], Awaitable[int]]], Awaitable[T]],
    read_client: ReadClient,
    chain_id: int,
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS,
    on_retry: Optional[Callable[[int, BlockStaleError], None]] = None,
    abort_signal: Optional[AbortSignal] = None,
) -> T:
    """
    Run fn, retrying only when it raises BlockStaleError.

    fn receives get_fresh_block, which reads the head on every call.
    Any other error propagates on first occurrence. After max_retries
    retries the last BlockStaleError propagates.

    Args:
        fn: Operation taking get_fresh_block
        read_client: Source of the chain head
        chain_id: Chain to read
        max_retries: Retries after the first attempt
        retry_delay_ms: Delay before each retry
        on_retry: Called with (attempt, error) before each retry, attempt from 1
        abort_signal: Cancels the wait between attempts

    Raises:
        BlockStaleError: When retries are exhausted
        AbortedError: If aborted while waiting
    """

    async def get_fresh_block() -> int:
        return await get_fresh_block_number(chain_id, read_client)

    attempt = 0
    while True:
        try:
            return await fn(get_fresh_block)
        except BlockStaleError as e:
            if attempt >= max_retries:
                raise
            attempt += 1
            logger.warning(
                "Block %d stale on chain %d (current %d), retry %d/%d",
                e.block_number, chain_id, e.current_block, attempt, max_retries,
            )
            await sleep_with_abort(retry_delay_ms, abort_signal)
            if on_retry is not None:
                on_retry(attempt, e)
