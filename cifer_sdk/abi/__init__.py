# cifer_sdk/abi/__init__.py
"""
CIFER SDK ABI

Contract interfaces used by the SDK:
    CiferEncrypted     - commitment metadata + data events
    SecretsController  - secret registry

Updated: 2025-01-20
Version: 0.1.0
"""

from . import cifer_encrypted
from . import secrets_controller

from .codec import (
    encode_call,
    decode_values,
    function_selector,
    event_topic,
    signature_types,
)

from .cifer_encrypted import (
    CIFERDataEvent,
    decode_cifer_data_event,
    cifer_data_stored_topic,
    cifer_data_updated_topic,
    cifer_data_deleted_topic,
)


__all__ = [
    "cifer_encrypted",
    "secrets_controller",
    # Codec
    "encode_call",
    "decode_values",
    "function_selector",
    "event_topic",
    "signature_types",
    # CiferEncrypted events
    "CIFERDataEvent",
    "decode_cifer_data_event",
    "cifer_data_stored_topic",
    "cifer_data_updated_topic",
    "cifer_data_deleted_topic",
]
