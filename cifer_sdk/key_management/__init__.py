# cifer_sdk/key_management/__init__.py
"""
CIFER SDK Key Management

SecretsController reads, transaction builders and event parsing.

Updated: 2025-01-20
Version: 0.1.0
"""

from .reads import (
    ReadParams,
    get_secret_creation_fee,
    get_secret,
    get_secret_owner,
    get_delegate,
    get_secrets_by_wallet,
    get_secrets_count_by_wallet,
    is_secret_ready,
    is_authorized,
)

from .tx_builders import (
    build_create_secret_tx,
    build_set_delegate_tx,
    build_remove_delegation_tx,
    build_transfer_secret_tx,
)

from .events import (
    parse_secret_created_log,
    parse_secret_synced_log,
    parse_delegate_updated_log,
    extract_secret_id_from_receipt,
)


__all__ = [
    # Reads
    "ReadParams",
    "get_secret_creation_fee",
    "get_secret",
    "get_secret_owner",
    "get_delegate",
    "get_secrets_by_wallet",
    "get_secrets_count_by_wallet",
    "is_secret_ready",
    "is_authorized",
    # Transactions
    "build_create_secret_tx",
    "build_set_delegate_tx",
    "build_remove_delegation_tx",
    "build_transfer_secret_tx",
    # Events
    "parse_secret_created_log",
    "parse_secret_synced_log",
    "parse_delegate_updated_log",
    "extract_secret_id_from_receipt",
]
