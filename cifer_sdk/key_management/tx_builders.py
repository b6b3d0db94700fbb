# cifer_sdk/key_management/tx_builders.py
"""
CIFER SDK Key Management: Transaction Builders

Pure functions returning TxIntentWithMeta. Nothing is signed or sent.

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from ..abi import secrets_controller as abi
from ..common import ZERO_ADDRESS
from ..types import Address, TxIntentWithMeta


def build_create_secret_tx(chain_id: int, controller_address: Address, fee: int) -> TxIntentWithMeta:
    """createSecret() paying fee wei."""
    return TxIntentWithMeta(
        chain_id=chain_id,
        to=controller_address,
        data=abi.encode_create_secret(),
        value=fee,
        description="Create a new CIFER secret",
        function_name="createSecret",
        args={},
    )


def build_set_delegate_tx(
    chain_id: int, controller_address: Address, secret_id: int, new_delegate: Address,
) -> TxIntentWithMeta:
    return TxIntentWithMeta(
        chain_id=chain_id,
        to=controller_address,
        data=abi.encode_set_delegate(secret_id, new_delegate),
        description=f"Set delegate for secret {secret_id} to {new_delegate}",
        function_name="setDelegate",
        args={"secretId": str(secret_id), "newDelegate": new_delegate},
    )


def build_remove_delegation_tx(
    chain_id: int, controller_address: Address, secret_id: int,
) -> TxIntentWithMeta:
    """setDelegate to the zero address."""
    return TxIntentWithMeta(
        chain_id=chain_id,
        to=controller_address,
        data=abi.encode_set_delegate(secret_id, ZERO_ADDRESS),
        description=f"Remove delegate from secret {secret_id}",
        function_name="setDelegate",
        args={"secretId": str(secret_id), "newDelegate": ZERO_ADDRESS},
    )


def build_transfer_secret_tx(
    chain_id: int, controller_address: Address, secret_id: int, new_owner: Address,
) -> TxIntentWithMeta:
    return TxIntentWithMeta(
        chain_id=chain_id,
        to=controller_address,
        data=abi.encode_transfer_secret(secret_id, new_owner),
        description=f"Transfer secret {secret_id} to {new_owner}",
        function_name="transferSecret",
        args={"secretId": str(secret_id), "newOwner": new_owner},
    )
