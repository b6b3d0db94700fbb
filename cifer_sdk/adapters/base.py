# cifer_sdk/adapters/base.py
"""
CIFER SDK Adapters: Base Interfaces

The SDK never holds keys or talks to a node directly. Callers plug in:

    SignerAdapter  - address + personal-message signing (+ optional tx sending)
    ReadClient     - block number, logs (+ optional eth_call)

Both are treated as stateless services that independent flows may share.

Usage:
    class MySigner(SignerAdapter):
        async def get_address(self) -> str: ...
        async def sign_message(self, message: str) -> str: ...

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from ..errors import UnsupportedOperationError
from ..types import (
    Address,
    Hex,
    Log,
    LogFilter,
    CallRequest,
    TxIntent,
    TxExecutionResult,
    TxExecutor,
)


# =============================================================================
# Signer
# =============================================================================

class SignerAdapter(ABC):
    """Wallet-agnostic signer."""

    @abstractmethod
    async def get_address(self) -> Address:
        """Return the signer's checksummed address."""
        pass

    @abstractmethod
    async def sign_message(self, message: str) -> Hex:
        """
        Sign a raw string with EIP-191 personal_sign semantics.

        Args:
            message: UTF-8 message, signed as-is

        Returns:
            65-byte signature as "0x" hex
        """
        pass

    async def send_transaction(self, intent: TxIntent) -> TxExecutionResult:
        """Broadcast a transaction. Optional capability."""
        raise UnsupportedOperationError(type(self).__name__, "send_transaction")


def signer_tx_executor(signer: SignerAdapter) -> TxExecutor:
    """Use a signer's send_transaction as a flow tx_executor."""

    async def execute(intent: TxIntent) -> TxExecutionResult:
        return await signer.send_transaction(intent)

    return execute


# =============================================================================
# Read Client
# =============================================================================

class ReadClient(ABC):
    """Chain read access."""

    @abstractmethod
    async def get_block_number(self, chain_id: int) -> int:
        """Return the current head block number."""
        pass

    @abstractmethod
    async def get_logs(self, chain_id: int, log_filter: LogFilter) -> List[Log]:
        """Return logs matching the filter."""
        pass

    async def call(self, chain_id: int, request: CallRequest) -> Hex:
        """eth_call. Optional capability."""
        raise UnsupportedOperationError(type(self).__name__, "eth_call")
