# cifer_sdk/commitments/__init__.py
"""
CIFER SDK Commitments

On-chain encrypted commitments: metadata reads, log retrieval,
integrity verification and store transaction building.

Updated: 2025-01-20
Version: 0.1.0
"""

from .metadata import (
    CommitmentReadParams,
    get_cifer_metadata,
    cifer_data_exists,
)

from .logs import (
    fetch_commitment_from_logs,
    fetch_commitment_with_retry,
    parse_commitment_log,
    is_cifer_data_event,
    select_closest_log,
    DEFAULT_BLOCKS_BEFORE,
    DEFAULT_BLOCKS_AFTER,
)

from .integrity import (
    verify_commitment_integrity,
    assert_commitment_integrity,
    validate_for_storage,
    IntegrityResult,
    SizeCheck,
    HashCheck,
    CIFER_ENVELOPE_BYTES,
    MAX_PAYLOAD_BYTES,
)

from .tx_builders import (
    build_store_commitment_tx,
    encode_store_call,
    StoreFunction,
    StoreCommitmentArgs,
    COMMON_STORE_FUNCTIONS,
)


__all__ = [
    # Metadata
    "CommitmentReadParams",
    "get_cifer_metadata",
    "cifer_data_exists",
    # Logs
    "fetch_commitment_from_logs",
    "fetch_commitment_with_retry",
    "parse_commitment_log",
    "is_cifer_data_event",
    "select_closest_log",
    "DEFAULT_BLOCKS_BEFORE",
    "DEFAULT_BLOCKS_AFTER",
    # Integrity
    "verify_commitment_integrity",
    "assert_commitment_integrity",
    "validate_for_storage",
    "IntegrityResult",
    "SizeCheck",
    "HashCheck",
    "CIFER_ENVELOPE_BYTES",
    "MAX_PAYLOAD_BYTES",
    # Transactions
    "build_store_commitment_tx",
    "encode_store_call",
    "StoreFunction",
    "StoreCommitmentArgs",
    "COMMON_STORE_FUNCTIONS",
]
