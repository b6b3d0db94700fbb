# cifer_sdk/auth/signer.py
"""
CIFER SDK Auth: Signing

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass

from ..adapters.base import SignerAdapter
from ..errors import SignatureError, SignerMismatchError
from ..types import Hex


@dataclass
class SignedData:
    """Data string with its signature and signer address."""
    data: str
    signature: Hex
    signer: str


async def sign_data_string(data: str, signer: SignerAdapter) -> SignedData:
    """
    Sign a data string with the caller's signer.

    Raises:
        SignatureError: If the address lookup or signing fails
    """
    try:
        address = await signer.get_address()
        signature = await signer.sign_message(data)
    except Exception as e:
        raise SignatureError(f"Failed to sign data: {e}", e) from e
    return SignedData(data=data, signature=signature, signer=address)


def normalize_address(address: str) -> str:
    return address.lower()


def addresses_equal(a: str, b: str) -> bool:
    return normalize_address(a) == normalize_address(b)


def validate_signer(signed: SignedData, expected_signer: str) -> None:
    """Raise SignerMismatchError if signed.signer is not expected_signer."""
    if not addresses_equal(signed.signer, expected_signer):
        raise SignerMismatchError(expected_signer, signed.signer)
