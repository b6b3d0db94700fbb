# cifer_sdk/key_management/events.py
"""
CIFER SDK Key Management: Events

Typed parsing of SecretsController logs, and secret id extraction from
a createSecret receipt.

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from typing import Callable, List, TypeVar

from ..abi import secrets_controller as abi
from ..errors import KeyManagementError
from ..types import Log


T = TypeVar("T")


def _parse(log: Log, name: str, decode: Callable[[Log], T]) -> T:
    if len(log.topics) < 3:
        raise KeyManagementError(f"Invalid {name} log: insufficient topics")
    try:
        return decode(log)
    except Exception as e:
        raise KeyManagementError(f"Failed to parse {name} log: {e}", e) from e


def parse_secret_created_log(log: Log) -> abi.SecretCreatedEvent:
    return _parse(log, "SecretCreated", abi.decode_secret_created_event)


def parse_secret_synced_log(log: Log) -> abi.SecretSyncedEvent:
    return _parse(log, "SecretSynced", abi.decode_secret_synced_event)


def parse_delegate_updated_log(log: Log) -> abi.DelegateUpdatedEvent:
    return _parse(log, "DelegateUpdated", abi.decode_delegate_updated_event)


def extract_secret_id_from_receipt(logs: List[Log]) -> int:
    """
    Secret id from the SecretCreated event among a receipt's logs.

    Raises:
        KeyManagementError: If no SecretCreated event is present
    """
    topic = abi.secret_created_topic().lower()
    for log in logs:
        if log.topics and log.topics[0].lower() == topic:
            return parse_secret_created_log(log).secret_id
    raise KeyManagementError("No SecretCreated event found in transaction receipt")
