# cifer_sdk/abi/secrets_controller.py
"""
CIFER SDK ABI: SecretsController

Calldata encoders, return decoders and event decoders for the contract
that registers secrets, their owners and delegates.

Usage:
    data = encode_get_secret_state(42)
    raw = await read_client.call(chain_id, CallRequest(to=controller, data=data))
    state = decode_get_secret_state(raw)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from web3 import Web3

from ..types import Address, Hex, Log, SecretState
from .codec import (
    encode_call,
    decode_values,
    event_topic,
    topic_to_int,
    topic_to_address,
)


# =============================================================================
# Signatures
# =============================================================================

SECRET_CREATION_FEE = "secretCreationFee()"
GET_SECRET_STATE = "getSecretState(uint256)"
GET_SECRET_OWNER = "getSecretOwner(uint256)"
GET_DELEGATE = "getDelegate(uint256)"
GET_SECRETS_BY_WALLET = "getSecretsByWallet(address)"
GET_SECRETS_COUNT_BY_WALLET = "getSecretsCountByWallet(address)"
CREATE_SECRET = "createSecret()"
SET_DELEGATE = "setDelegate(uint256,address)"
TRANSFER_SECRET = "transferSecret(uint256,address)"

SECRET_CREATED = "SecretCreated(uint256,address,uint8)"
SECRET_SYNCED = "SecretSynced(uint256,uint8,string)"
DELEGATE_UPDATED = "DelegateUpdated(uint256,address)"


def secret_created_topic() -> str:
    return event_topic(SECRET_CREATED)


def secret_synced_topic() -> str:
    return event_topic(SECRET_SYNCED)


def delegate_updated_topic() -> str:
    return event_topic(DELEGATE_UPDATED)


# =============================================================================
# Encoders
# =============================================================================

def encode_secret_creation_fee() -> Hex:
    return encode_call(SECRET_CREATION_FEE)


def encode_get_secret_state(secret_id: int) -> Hex:
    return encode_call(GET_SECRET_STATE, [secret_id])


def encode_get_secret_owner(secret_id: int) -> Hex:
    return encode_call(GET_SECRET_OWNER, [secret_id])


def encode_get_delegate(secret_id: int) -> Hex:
    return encode_call(GET_DELEGATE, [secret_id])


def encode_get_secrets_by_wallet(wallet: Address) -> Hex:
    return encode_call(GET_SECRETS_BY_WALLET, [Web3.to_checksum_address(wallet)])


def encode_get_secrets_count_by_wallet(wallet: Address) -> Hex:
    return encode_call(GET_SECRETS_COUNT_BY_WALLET, [Web3.to_checksum_address(wallet)])


def encode_create_secret() -> Hex:
    return encode_call(CREATE_SECRET)


def encode_set_delegate(secret_id: int, new_delegate: Address) -> Hex:
    return encode_call(SET_DELEGATE, [secret_id, Web3.to_checksum_address(new_delegate)])


def encode_transfer_secret(secret_id: int, new_owner: Address) -> Hex:
    return encode_call(TRANSFER_SECRET, [secret_id, Web3.to_checksum_address(new_owner)])


# =============================================================================
# Decoders
# =============================================================================

@dataclass
class SecretsByWallet:
    owned: List[int]
    delegated: List[int]


@dataclass
class SecretsCountByWallet:
    owned_count: int
    delegated_count: int


def decode_secret_creation_fee(result: Hex) -> int:
    return decode_values(["uint256"], result)[0]


def decode_get_secret_state(result: Hex) -> SecretState:
    owner, delegate, is_syncing, cluster_id, secret_type, cid = decode_values(
        ["address", "address", "bool", "uint8", "uint8", "string"], result,
    )
    return SecretState(
        owner=Web3.to_checksum_address(owner),
        delegate=Web3.to_checksum_address(delegate),
        is_syncing=is_syncing,
        cluster_id=cluster_id,
        secret_type=secret_type,
        public_key_cid=cid,
    )


def decode_address_result(result: Hex) -> Address:
    """Decode a single address return (getSecretOwner, getDelegate)."""
    return Web3.to_checksum_address(decode_values(["address"], result)[0])


def decode_get_secrets_by_wallet(result: Hex) -> SecretsByWallet:
    owned, delegated = decode_values(["uint256[]", "uint256[]"], result)
    return SecretsByWallet(owned=list(owned), delegated=list(delegated))


def decode_get_secrets_count_by_wallet(result: Hex) -> SecretsCountByWallet:
    owned_count, delegated_count = decode_values(["uint256", "uint256"], result)
    return SecretsCountByWallet(owned_count=owned_count, delegated_count=delegated_count)


# =============================================================================
# Events
# =============================================================================

@dataclass
class SecretCreatedEvent:
    secret_id: int
    owner: Address
    secret_type: int


@dataclass
class SecretSyncedEvent:
    secret_id: int
    cluster_id: int
    public_key_cid: str


@dataclass
class DelegateUpdatedEvent:
    secret_id: int
    new_delegate: Address


def decode_secret_created_event(log: Log) -> SecretCreatedEvent:
    return SecretCreatedEvent(
        secret_id=topic_to_int(log.topics[1]),
        owner=topic_to_address(log.topics[2]),
        secret_type=decode_values(["uint8"], log.data)[0],
    )


def decode_secret_synced_event(log: Log) -> SecretSyncedEvent:
    return SecretSyncedEvent(
        secret_id=topic_to_int(log.topics[1]),
        cluster_id=topic_to_int(log.topics[2]),
        public_key_cid=decode_values(["string"], log.data)[0],
    )


def decode_delegate_updated_event(log: Log) -> DelegateUpdatedEvent:
    return DelegateUpdatedEvent(
        secret_id=topic_to_int(log.topics[1]),
        new_delegate=topic_to_address(log.topics[2]),
    )
