# cifer_sdk/adapters/eip1193.py
"""
CIFER SDK Adapters: EIP-1193 Signer

SignerAdapter over any EIP-1193 style provider (browser bridge, WalletConnect
session, test double). The provider only needs `async request(method, params)`.

Usage:
    signer = Eip1193SignerAdapter(provider)
    address = await signer.get_address()
    signature = await signer.sign_message("11155111_1_0xabc..._123_hello")

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Optional, Any, Dict, List

from ..errors import AuthError
from ..types import Address, Hex, TxIntent, TxExecutionResult, TransactionReceipt
from .base import SignerAdapter


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

ETH_ACCOUNTS = "eth_accounts"
ETH_REQUEST_ACCOUNTS = "eth_requestAccounts"
PERSONAL_SIGN = "personal_sign"
ETH_SEND_TRANSACTION = "eth_sendTransaction"
ETH_GET_TRANSACTION_RECEIPT = "eth_getTransactionReceipt"

RECEIPT_POLL_ATTEMPTS = 60
RECEIPT_POLL_INTERVAL_MS = 5000


# =============================================================================
# Provider Interface
# =============================================================================

class Eip1193Provider(ABC):
    """Minimal EIP-1193 provider."""

    @abstractmethod
    async def request(self, method: str, params: Any = None) -> Any:
        """Send JSON-RPC request."""
        pass


class MockEip1193Provider(Eip1193Provider):
    """
    Mock provider for testing.

    Records every call; signatures are deterministic digests, not real
    ECDSA signatures.
    """

    def __init__(
        self,
        accounts: Optional[List[str]] = None,
        auto_approve: bool = True,
        receipts: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self._accounts = accounts if accounts is not None else ["0x" + "1" * 40]
        self._auto_approve = auto_approve
        self._receipts = receipts or {}
        self.calls: List[tuple] = []
        self.sent_transactions: List[Dict[str, Any]] = []

    async def request(self, method: str, params: Any = None) -> Any:
        self.calls.append((method, params))

        if method in (ETH_ACCOUNTS, ETH_REQUEST_ACCOUNTS):
            return list(self._accounts)

        elif method == PERSONAL_SIGN:
            if not self._auto_approve:
                raise RuntimeError("User rejected request")
            digest = hashlib.sha256(params[0].encode() + params[1].encode()).digest()
            return "0x" + (digest + digest + b"\x1b").hex()

        elif method == ETH_SEND_TRANSACTION:
            if not self._auto_approve:
                raise RuntimeError("User rejected request")
            self.sent_transactions.append(params[0])
            return "0x" + hashlib.sha256(repr(params[0]).encode()).hexdigest()

        elif method == ETH_GET_TRANSACTION_RECEIPT:
            return self._receipts.get(params[0])

        raise RuntimeError(f"Unsupported method: {method}")


# =============================================================================
# Signer
# =============================================================================

class Eip1193SignerAdapter(SignerAdapter):
    """SignerAdapter backed by an EIP-1193 provider."""

    def __init__(
        self,
        provider: Eip1193Provider,
        receipt_poll_interval_ms: int = RECEIPT_POLL_INTERVAL_MS,
        receipt_poll_attempts: int = RECEIPT_POLL_ATTEMPTS,
    ):
        self._provider = provider
        self._receipt_poll_interval_ms = receipt_poll_interval_ms
        self._receipt_poll_attempts = receipt_poll_attempts
        self._cached_address: Optional[Address] = None

    async def get_address(self) -> Address:
        if self._cached_address is not None:
            return self._cached_address

        try:
            accounts = await self._provider.request(ETH_ACCOUNTS, [])
            if not accounts:
                accounts = await self._provider.request(ETH_REQUEST_ACCOUNTS, [])
        except Exception as e:
            raise AuthError(f"Failed to get accounts: {e}", e) from e

        if not accounts:
            raise AuthError("No accounts available. Please connect your wallet.")

        self._cached_address = accounts[0]
        return self._cached_address

    async def sign_message(self, message: str) -> Hex:
        address = await self.get_address()
        hex_message = "0x" + message.encode("utf-8").hex()
        try:
            return await self._provider.request(PERSONAL_SIGN, [hex_message, address])
        except Exception as e:
            raise AuthError(f"Failed to sign message: {e}", e) from e

    async def send_transaction(self, intent: TxIntent) -> TxExecutionResult:
        address = await self.get_address()
        tx: Dict[str, str] = {
            "from": address,
            "to": intent.to,
            "data": intent.data,
        }
        if intent.value is not None:
            tx["value"] = hex(intent.value)

        try:
            tx_hash = await self._provider.request(ETH_SEND_TRANSACTION, [tx])
        except Exception as e:
            raise AuthError(f"Failed to send transaction: {e}", e) from e

        async def wait_receipt() -> TransactionReceipt:
            return await self.wait_for_receipt(tx_hash)

        return TxExecutionResult(hash=tx_hash, wait_receipt=wait_receipt)

    async def wait_for_receipt(self, tx_hash: Hex) -> TransactionReceipt:
        """
        Poll eth_getTransactionReceipt until the transaction is mined.

        Raises:
            AuthError: If no receipt appears within the polling budget
        """
        for attempt in range(self._receipt_poll_attempts):
            raw = await self._provider.request(ETH_GET_TRANSACTION_RECEIPT, [tx_hash])
            if raw:
                return TransactionReceipt.from_rpc(raw)
            logger.debug("Receipt for %s not available (attempt %d)", tx_hash, attempt + 1)
            await asyncio.sleep(self._receipt_poll_interval_ms / 1000)

        total_seconds = self._receipt_poll_attempts * self._receipt_poll_interval_ms / 1000
        raise AuthError(f"Transaction receipt not found after {total_seconds:g} seconds")

    def clear_cache(self) -> None:
        """Forget the cached address (e.g. after an account switch)."""
        self._cached_address = None
