# cifer_sdk/key_management/reads.py
"""
CIFER SDK Key Management: Reads

eth_call reads against the SecretsController. All failures surface as
KeyManagementError (or a subclass) with the underlying error as cause.

Usage:
    params = ReadParams(chain_id=752025, controller_address=addr, read_client=client)
    fee = await get_secret_creation_fee(params)
    state = await get_secret(params, 42)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar

from ..abi import secrets_controller as abi
from ..adapters.base import ReadClient
from ..auth.signer import addresses_equal
from ..common import ZERO_ADDRESS
from ..errors import KeyManagementError, SecretNotFoundError
from ..types import Address, CallRequest, Hex, SecretState


T = TypeVar("T")


@dataclass
class ReadParams:
    """Where to read from."""
    chain_id: int
    controller_address: Address
    read_client: ReadClient


async def _call(params: ReadParams, data: Hex, decode: Callable[[Hex], T], what: str) -> T:
    try:
        raw = await params.read_client.call(
            params.chain_id, CallRequest(to=params.controller_address, data=data),
        )
        return decode(raw)
    except KeyManagementError:
        raise
    except Exception as e:
        raise KeyManagementError(f"Failed to read {what}: {e}", e) from e


async def get_secret_creation_fee(params: ReadParams) -> int:
    """Fee in wei payable to createSecret()."""
    return await _call(
        params, abi.encode_secret_creation_fee(), abi.decode_secret_creation_fee, "secret creation fee",
    )


async def get_secret(params: ReadParams, secret_id: int) -> SecretState:
    """
    Full state of a secret.

    Raises:
        SecretNotFoundError: If the secret has no owner
    """
    state = await _call(
        params, abi.encode_get_secret_state(secret_id), abi.decode_get_secret_state,
        f"secret {secret_id}",
    )
    if addresses_equal(state.owner, ZERO_ADDRESS):
        raise SecretNotFoundError(secret_id)
    return state


async def get_secret_owner(params: ReadParams, secret_id: int) -> Address:
    return await _call(
        params, abi.encode_get_secret_owner(secret_id), abi.decode_address_result,
        f"owner of secret {secret_id}",
    )


async def get_delegate(params: ReadParams, secret_id: int) -> Address:
    """Delegate address, or the zero address when none is set."""
    return await _call(
        params, abi.encode_get_delegate(secret_id), abi.decode_address_result,
        f"delegate of secret {secret_id}",
    )


async def get_secrets_by_wallet(params: ReadParams, wallet: Address) -> abi.SecretsByWallet:
    return await _call(
        params, abi.encode_get_secrets_by_wallet(wallet), abi.decode_get_secrets_by_wallet,
        f"secrets of {wallet}",
    )


async def get_secrets_count_by_wallet(params: ReadParams, wallet: Address) -> abi.SecretsCountByWallet:
    return await _call(
        params, abi.encode_get_secrets_count_by_wallet(wallet), abi.decode_get_secrets_count_by_wallet,
        f"secret counts of {wallet}",
    )


async def is_secret_ready(params: ReadParams, secret_id: int) -> bool:
    """True once syncing finished and the public key CID is published."""
    state = await get_secret(params, secret_id)
    return not state.is_syncing and state.public_key_cid != ""


async def is_authorized(params: ReadParams, secret_id: int, address: Address) -> bool:
    """True if address is the owner or the (non-zero) delegate."""
    state = await get_secret(params, secret_id)
    is_owner = addresses_equal(state.owner, address)
    is_delegate = (
        not addresses_equal(state.delegate, ZERO_ADDRESS)
        and addresses_equal(state.delegate, address)
    )
    return is_owner or is_delegate
