# cifer_sdk/abi/cifer_encrypted.py
"""
CIFER SDK ABI: CiferEncrypted

Interface shared by contracts that store CIFER commitments. Only the
fingerprint lives in storage; the bytes are emitted in events:

    getCIFERMetadata(bytes32) -> (uint256 secretId, uint64 storedAtBlock,
                                  bytes32 ciferHash, bytes32 encryptedMessageHash)
    ciferDataExists(bytes32) -> bool

    CIFERDataStored(bytes32 indexed dataId, uint256 indexed secretId,
                    bytes cifer, bytes encryptedMessage,
                    bytes32 ciferHash, bytes32 encryptedMessageHash)
    CIFERDataUpdated(... same layout ...)
    CIFERDataDeleted(bytes32 indexed dataId)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from web3 import Web3

from ..types import CIFERMetadata, Hex, Log
from .codec import (
    encode_call,
    decode_values,
    event_topic,
    topic_to_int,
)


# =============================================================================
# Signatures
# =============================================================================

GET_CIFER_METADATA = "getCIFERMetadata(bytes32)"
CIFER_DATA_EXISTS = "ciferDataExists(bytes32)"

CIFER_DATA_STORED = "CIFERDataStored(bytes32,uint256,bytes,bytes,bytes32,bytes32)"
CIFER_DATA_UPDATED = "CIFERDataUpdated(bytes32,uint256,bytes,bytes,bytes32,bytes32)"
CIFER_DATA_DELETED = "CIFERDataDeleted(bytes32)"

_METADATA_TYPES = ["uint256", "uint64", "bytes32", "bytes32"]
_EVENT_DATA_TYPES = ["bytes", "bytes", "bytes32", "bytes32"]


def cifer_data_stored_topic() -> str:
    return event_topic(CIFER_DATA_STORED)


def cifer_data_updated_topic() -> str:
    return event_topic(CIFER_DATA_UPDATED)


def cifer_data_deleted_topic() -> str:
    return event_topic(CIFER_DATA_DELETED)


# =============================================================================
# Calls
# =============================================================================

def encode_get_cifer_metadata(data_id: Hex) -> Hex:
    return encode_call(GET_CIFER_METADATA, [Web3.to_bytes(hexstr=data_id)])


def decode_get_cifer_metadata(result: Hex) -> CIFERMetadata:
    secret_id, stored_at_block, cifer_hash, message_hash = decode_values(_METADATA_TYPES, result)
    return CIFERMetadata(
        secret_id=secret_id,
        stored_at_block=stored_at_block,
        cifer_hash=Web3.to_hex(cifer_hash),
        encrypted_message_hash=Web3.to_hex(message_hash),
    )


def encode_cifer_data_exists(data_id: Hex) -> Hex:
    return encode_call(CIFER_DATA_EXISTS, [Web3.to_bytes(hexstr=data_id)])


def decode_cifer_data_exists(result: Hex) -> bool:
    return bool(decode_values(["bool"], result)[0])


def encode_store(function_signature: str, args: Sequence[Any]) -> Hex:
    """
    Calldata for an application-defined store function.

    bytes32/bytes arguments may be passed as "0x" hex; they are converted
    to raw bytes before encoding.
    """
    converted = [
        Web3.to_bytes(hexstr=value) if isinstance(value, str) and value.startswith("0x") else value
        for value in args
    ]
    return encode_call(function_signature, converted)


# =============================================================================
# Events
# =============================================================================

@dataclass
class CIFERDataEvent:
    """Decoded CIFERDataStored / CIFERDataUpdated event."""
    data_id: Hex
    secret_id: int
    cifer: Hex
    encrypted_message: Hex
    cifer_hash: Hex
    encrypted_message_hash: Hex


def decode_cifer_data_event(log: Log) -> CIFERDataEvent:
    """
    Decode a stored/updated event.

    Raises:
        ValueError: If the log does not have the expected topics or data
    """
    if len(log.topics) < 3:
        raise ValueError(f"Expected 3 topics, got {len(log.topics)}")

    cifer, encrypted_message, cifer_hash, message_hash = decode_values(_EVENT_DATA_TYPES, log.data)
    return CIFERDataEvent(
        data_id=log.topics[1].lower(),
        secret_id=topic_to_int(log.topics[2]),
        cifer=Web3.to_hex(cifer),
        encrypted_message=Web3.to_hex(encrypted_message),
        cifer_hash=Web3.to_hex(cifer_hash),
        encrypted_message_hash=Web3.to_hex(message_hash),
    )
