# cifer_sdk/adapters/local.py
"""
CIFER SDK Adapters: Local Key Signer

SignerAdapter holding a private key in-process via eth_account. Intended
for servers, scripts and tests; it signs only and does not broadcast.

Usage:
    signer = LocalAccountSigner.from_key(os.environ["PRIVATE_KEY"])
    signature = await signer.sign_message(data_string)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from web3 import Web3

from ..errors import SignatureError
from ..types import Address, Hex
from .base import SignerAdapter


class LocalAccountSigner(SignerAdapter):
    """EIP-191 signer over an eth_account LocalAccount."""

    def __init__(self, account: LocalAccount):
        self._account = account

    @classmethod
    def from_key(cls, private_key: str) -> 'LocalAccountSigner':
        return cls(Account.from_key(private_key))

    @classmethod
    def create(cls) -> 'LocalAccountSigner':
        """Random throwaway account."""
        return cls(Account.create())

    async def get_address(self) -> Address:
        return self._account.address

    async def sign_message(self, message: str) -> Hex:
        try:
            signed = self._account.sign_message(encode_defunct(text=message))
        except (ValueError, TypeError) as e:
            raise SignatureError(f"Failed to sign message: {e}", e) from e
        return Web3.to_hex(signed.signature)


def recover_message_signer(message: str, signature: Hex) -> Address:
    """Recover the EIP-191 signer of a personal message."""
    return Account.recover_message(encode_defunct(text=message), signature=signature)
