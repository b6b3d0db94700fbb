# cifer_sdk/auth/__init__.py
"""
CIFER SDK Auth

Replay-safe request authentication for the Blackbox:
    - data strings bound to chain, secret, signer and a recent block
    - signing through the caller's SignerAdapter
    - block freshness validation and stale-block retry

Updated: 2025-01-20
Version: 0.1.0
"""

from .block_freshness import (
    get_fresh_block_number,
    validate_block_freshness,
    parse_block_freshness_error,
    with_block_fresh_retry,
    FUTURE_BLOCK_TOLERANCE,
    DEFAULT_FRESHNESS_WINDOW,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY_MS,
)

from .data_string import (
    build_data_string,
    build_encrypt_payload_data_string,
    build_decrypt_payload_data_string,
    build_file_operation_data_string,
    build_job_download_data_string,
    build_job_delete_data_string,
    build_jobs_list_data_string,
)

from .signer import (
    SignedData,
    sign_data_string,
    normalize_address,
    addresses_equal,
    validate_signer,
)


__all__ = [
    # Block freshness
    "get_fresh_block_number",
    "validate_block_freshness",
    "parse_block_freshness_error",
    "with_block_fresh_retry",
    "FUTURE_BLOCK_TOLERANCE",
    "DEFAULT_FRESHNESS_WINDOW",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_DELAY_MS",
    # Data strings
    "build_data_string",
    "build_encrypt_payload_data_string",
    "build_decrypt_payload_data_string",
    "build_file_operation_data_string",
    "build_job_download_data_string",
    "build_job_delete_data_string",
    "build_jobs_list_data_string",
    # Signing
    "SignedData",
    "sign_data_string",
    "normalize_address",
    "addresses_equal",
    "validate_signer",
]
