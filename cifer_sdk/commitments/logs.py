# cifer_sdk/commitments/logs.py
"""
CIFER SDK Commitments: Log Retrieval

Commitment bytes are never in contract storage; they are recovered from
the CIFERDataStored / CIFERDataUpdated event emitted at storedAtBlock.

Exact lookup (fetch_commitment_from_logs):
    1. stored event for dataId at exactly storedAtBlock
    2. otherwise updated event at the same block
    3. otherwise CommitmentNotFoundError
    Several matches in the block: highest logIndex wins.

Widened lookup (fetch_commitment_with_retry) searches
[storedAtBlock - blocks_before, storedAtBlock + blocks_after] for both
events and prefers the exact block, then highest logIndex, then the
block closest to storedAtBlock.

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

import logging
from typing import List

from ..abi.cifer_encrypted import (
    decode_cifer_data_event,
    cifer_data_stored_topic,
    cifer_data_updated_topic,
)
from ..adapters.base import ReadClient
from ..common import to_bytes32_hex
from ..errors import CommitmentsError, CommitmentNotFoundError
from ..types import Address, Bytes32, CommitmentData, Log, LogFilter


logger = logging.getLogger(__name__)


DEFAULT_BLOCKS_BEFORE = 0
DEFAULT_BLOCKS_AFTER = 5


def parse_commitment_log(log: Log) -> CommitmentData:
    """
    Decode a stored/updated event into CommitmentData.

    Raises:
        CommitmentsError: If the log cannot be decoded
    """
    try:
        event = decode_cifer_data_event(log)
    except Exception as e:
        raise CommitmentsError(f"Failed to parse commitment log: {e}", e) from e
    return CommitmentData(
        cifer=event.cifer,
        encrypted_message=event.encrypted_message,
        cifer_hash=event.cifer_hash,
        encrypted_message_hash=event.encrypted_message_hash,
    )


def is_cifer_data_event(log: Log) -> bool:
    if not log.topics:
        return False
    topic0 = log.topics[0].lower()
    return topic0 in (cifer_data_stored_topic().lower(), cifer_data_updated_topic().lower())


def _latest_in_block(logs: List[Log]) -> Log:
    return max(logs, key=lambda log: log.log_index)


def select_closest_log(logs: List[Log], stored_at_block: int) -> Log:
    """
    Pick the best candidate from a widened search.

    Exact-block matches beat any other block; within a block the highest
    logIndex wins; otherwise the block nearest stored_at_block wins.
    """
    exact = [log for log in logs if log.block_number == stored_at_block]
    if exact:
        return _latest_in_block(exact)

    best_distance = min(abs(log.block_number - stored_at_block) for log in logs)
    nearest = [log for log in logs if abs(log.block_number - stored_at_block) == best_distance]
    # Equidistant blocks on both sides: take the earlier one
    nearest_block = min(log.block_number for log in nearest)
    return _latest_in_block([log for log in nearest if log.block_number == nearest_block])


async def fetch_commitment_from_logs(
    *,
    chain_id: int,
    contract_address: Address,
    data_id: Bytes32,
    stored_at_block: int,
    read_client: ReadClient,
) -> CommitmentData:
    """
    Recover commitment bytes from the event at exactly stored_at_block.

    Raises:
        CommitmentNotFoundError: If neither event exists at the block
        CommitmentsError: On read or decode failure
    """
    data_topic = to_bytes32_hex(data_id)

    def exact_filter(topic: str) -> LogFilter:
        return LogFilter(
            address=contract_address,
            topics=[topic, data_topic],
            from_block=stored_at_block,
            to_block=stored_at_block,
        )

    try:
        logs = await read_client.get_logs(chain_id, exact_filter(cifer_data_stored_topic()))
        if not logs:
            logs = await read_client.get_logs(chain_id, exact_filter(cifer_data_updated_topic()))
    except Exception as e:
        raise CommitmentsError(f"Failed to fetch commitment from logs: {e}", e) from e

    if not logs:
        raise CommitmentNotFoundError(data_id)

    log = _latest_in_block(logs)
    logger.debug(
        "Commitment %s found at block %d (logIndex %d)", data_id, log.block_number, log.log_index,
    )
    return parse_commitment_log(log)


async def fetch_commitment_with_retry(
    *,
    chain_id: int,
    contract_address: Address,
    data_id: Bytes32,
    stored_at_block: int,
    read_client: ReadClient,
    blocks_before: int = DEFAULT_BLOCKS_BEFORE,
    blocks_after: int = DEFAULT_BLOCKS_AFTER,
) -> CommitmentData:
    """
    Widened variant for nodes whose storedAtBlock view may be off by a few blocks.

    Raises:
        CommitmentNotFoundError: If no event exists in the range
        CommitmentsError: On read or decode failure
    """
    data_topic = to_bytes32_hex(data_id)
    from_block = max(0, stored_at_block - blocks_before)
    to_block = stored_at_block + blocks_after

    def range_filter(topic: str) -> LogFilter:
        return LogFilter(
            address=contract_address,
            topics=[topic, data_topic],
            from_block=from_block,
            to_block=to_block,
        )

    try:
        stored = await read_client.get_logs(chain_id, range_filter(cifer_data_stored_topic()))
        updated = await read_client.get_logs(chain_id, range_filter(cifer_data_updated_topic()))
    except Exception as e:
        raise CommitmentsError(f"Failed to fetch commitment from logs: {e}", e) from e

    logs = list(stored) + list(updated)
    if not logs:
        raise CommitmentNotFoundError(data_id)

    return parse_commitment_log(select_closest_log(logs, stored_at_block))
