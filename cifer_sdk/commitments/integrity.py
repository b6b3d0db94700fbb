# cifer_sdk/commitments/integrity.py
"""
CIFER SDK Commitments: Integrity

Contract storage keeps only a fingerprint (keccak-256 of the cifer and of
the encrypted message); the bytes themselves come from event logs. This
module recomputes the fingerprint of retrieved bytes and compares it with
the stored one, and enforces size limits before new data is committed.

Usage:
    result = verify_commitment_integrity(data, metadata)
    if not result.valid:
        ...
    assert_commitment_integrity(data, metadata)   # raises on mismatch

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..common import byte_length, keccak256
from ..errors import (
    CommitmentsError,
    IntegrityError,
    InvalidCiferSizeError,
    PayloadTooLargeError,
)
from ..types import CommitmentData, CIFERMetadata


# =============================================================================
# Constants
# =============================================================================

# ML-KEM-768 ciphertext (1088) + AES-GCM tag (16)
CIFER_ENVELOPE_BYTES = 1104
MAX_PAYLOAD_BYTES = 16 * 1024


# =============================================================================
# Result Types
# =============================================================================

@dataclass
class SizeCheck:
    valid: bool
    actual: int
    limit: int


@dataclass
class HashCheck:
    valid: bool
    expected: str
    actual: str


@dataclass
class IntegrityResult:
    """Outcome of every integrity check; valid only if all passed."""
    cifer_size: SizeCheck
    payload_size: SizeCheck
    cifer_hash: Optional[HashCheck] = None
    encrypted_message_hash: Optional[HashCheck] = None

    @property
    def valid(self) -> bool:
        checks = [self.cifer_size, self.payload_size, self.cifer_hash, self.encrypted_message_hash]
        return all(check.valid for check in checks if check is not None)


def _hash_check(expected: str, content: str) -> HashCheck:
    actual = keccak256(content)
    return HashCheck(valid=actual.lower() == expected.lower(), expected=expected, actual=actual)


# =============================================================================
# Verification
# =============================================================================

def verify_commitment_integrity(
    data: CommitmentData,
    metadata: Optional[CIFERMetadata] = None,
) -> IntegrityResult:
    """
    Check sizes, and hashes against metadata when given. Never raises.

    Args:
        data: Bytes recovered from the event log
        metadata: Contract-stored fingerprint

    Returns:
        IntegrityResult with one entry per check
    """
    cifer_size = byte_length(data.cifer)
    payload_size = byte_length(data.encrypted_message)

    result = IntegrityResult(
        cifer_size=SizeCheck(
            valid=cifer_size == CIFER_ENVELOPE_BYTES,
            actual=cifer_size,
            limit=CIFER_ENVELOPE_BYTES,
        ),
        payload_size=SizeCheck(
            valid=0 < payload_size <= MAX_PAYLOAD_BYTES,
            actual=payload_size,
            limit=MAX_PAYLOAD_BYTES,
        ),
    )
    if metadata is not None:
        result.cifer_hash = _hash_check(metadata.cifer_hash, data.cifer)
        result.encrypted_message_hash = _hash_check(metadata.encrypted_message_hash, data.encrypted_message)
    return result


def assert_commitment_integrity(
    data: CommitmentData,
    metadata: Optional[CIFERMetadata] = None,
) -> None:
    """
    Raise if any integrity check fails.

    Raises:
        InvalidCiferSizeError: Cifer is not CIFER_ENVELOPE_BYTES long
        CommitmentsError: Encrypted message is empty
        PayloadTooLargeError: Encrypted message exceeds MAX_PAYLOAD_BYTES
        IntegrityError: A recomputed hash differs from the stored one
    """
    result = verify_commitment_integrity(data, metadata)

    if not result.cifer_size.valid:
        raise InvalidCiferSizeError(result.cifer_size.actual, CIFER_ENVELOPE_BYTES)
    if not result.payload_size.valid:
        if result.payload_size.actual == 0:
            raise CommitmentsError("Encrypted message is empty")
        raise PayloadTooLargeError(result.payload_size.actual, MAX_PAYLOAD_BYTES)
    if result.cifer_hash is not None and not result.cifer_hash.valid:
        raise IntegrityError("cifer", result.cifer_hash.expected, result.cifer_hash.actual)
    if result.encrypted_message_hash is not None and not result.encrypted_message_hash.valid:
        raise IntegrityError(
            "encryptedMessage",
            result.encrypted_message_hash.expected,
            result.encrypted_message_hash.actual,
        )


def validate_for_storage(
    cifer: Union[str, bytes],
    encrypted_message: Union[str, bytes],
) -> None:
    """
    Pre-check before building a store transaction.

    Raises:
        InvalidCiferSizeError, CommitmentsError, PayloadTooLargeError
    """
    cifer_size = byte_length(cifer)
    message_size = byte_length(encrypted_message)

    if cifer_size != CIFER_ENVELOPE_BYTES:
        raise InvalidCiferSizeError(cifer_size, CIFER_ENVELOPE_BYTES)
    if message_size == 0:
        raise CommitmentsError("Encrypted message cannot be empty")
    if message_size > MAX_PAYLOAD_BYTES:
        raise PayloadTooLargeError(message_size, MAX_PAYLOAD_BYTES)
