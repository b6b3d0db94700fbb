# cifer_sdk/adapters/__init__.py
"""
CIFER SDK Adapters

Caller-side integrations the SDK consumes:

    SignerAdapter         - abstract signer
    ReadClient            - abstract chain reader
    Eip1193SignerAdapter  - browser/WalletConnect style providers
    LocalAccountSigner    - in-process eth_account key
    RpcReadClient         - plain JSON-RPC endpoints

Updated: 2025-01-20
Version: 0.1.0
"""

from .base import (
    SignerAdapter,
    ReadClient,
    signer_tx_executor,
)

from .eip1193 import (
    Eip1193Provider,
    Eip1193SignerAdapter,
    MockEip1193Provider,
)

from .local import (
    LocalAccountSigner,
    recover_message_signer,
)

from .rpc_read_client import RpcReadClient


__all__ = [
    # Base
    "SignerAdapter",
    "ReadClient",
    "signer_tx_executor",
    # EIP-1193
    "Eip1193Provider",
    "Eip1193SignerAdapter",
    "MockEip1193Provider",
    # Local
    "LocalAccountSigner",
    "recover_message_signer",
    # RPC
    "RpcReadClient",
]
