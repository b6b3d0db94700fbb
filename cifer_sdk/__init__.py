# cifer_sdk/__init__.py
"""
CIFER SDK: Client Core

Quantum-resistant encryption through the CIFER Blackbox, with secrets
managed on-chain by the SecretsController.

- Secret lifecycle (create, delegate, transfer, readiness)
- Payload encryption and on-chain commitments
- File encryption/decryption jobs with polling and download
- Replay-safe request signing with block-freshness retry
- Multi-step flows with plan/execute modes and progress callbacks

Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │  cifer_sdk                                              │
    │  ├── transport/      # HTTP (httpx) + JSON-RPC          │
    │  ├── adapters/       # SignerAdapter, ReadClient        │
    │  ├── abi/            # Contract encoding (eth-abi)      │
    │  ├── auth/           # Data strings, block freshness    │
    │  ├── blackbox/       # Payload, files, jobs             │
    │  ├── key_management/ # SecretsController                │
    │  ├── commitments/    # Metadata, logs, integrity        │
    │  ├── flows/          # FlowEngine + flows               │
    │  └── config.py       # Env config, discovery            │
    └─────────────────────────────────────────────────────────┘
"""

__version__ = "0.1.0"

# =============================================================================
# Namespaces
# =============================================================================

from . import abi
from . import adapters
from . import auth
from . import blackbox
from . import commitments
from . import flows
from . import key_management
from . import transport

# =============================================================================
# Configuration
# =============================================================================

from .config import (
    CiferConfig,
    ChainConfig,
    DiscoveryResult,
    DiscoveryCache,
    ResolvedChainConfig,
    discover,
    resolve_chain,
    estimate_block_freshness_window,
)

# =============================================================================
# Types
# =============================================================================

from .types import (
    Log,
    LogFilter,
    CallRequest,
    TransactionReceipt,
    TxIntent,
    TxIntentWithMeta,
    TxExecutionResult,
    SecretState,
    CIFERMetadata,
    CommitmentData,
    JobType,
    JobStatus,
    JobInfo,
    PollingStrategy,
    DataConsumption,
)

from .common import (
    AbortSignal,
    keccak256,
    sleep_with_abort,
)

# =============================================================================
# Adapters
# =============================================================================

from .adapters import (
    SignerAdapter,
    ReadClient,
    Eip1193SignerAdapter,
    LocalAccountSigner,
    RpcReadClient,
    signer_tx_executor,
)

# =============================================================================
# Flows
# =============================================================================

from .flows import (
    FlowMode,
    FlowContext,
    FlowOptions,
    FlowResult,
    FlowPlan,
    FlowStep,
    StepStatus,
    StepType,
    create_secret_and_wait_ready,
    encrypt_file_job_flow,
    decrypt_file_job_flow,
    decrypt_existing_file_job_flow,
    encrypt_then_prepare_commit_tx,
    retrieve_from_logs_then_decrypt,
)

# =============================================================================
# Errors
# =============================================================================

from .errors import (
    CiferError,
    ConfigError,
    DiscoveryError,
    ChainNotSupportedError,
    UnsupportedOperationError,
    AuthError,
    SignatureError,
    BlockStaleError,
    BlockInFutureError,
    SignerMismatchError,
    BlackboxError,
    EncryptionError,
    DecryptionError,
    JobError,
    JobTimeoutError,
    SecretNotReadyError,
    KeyManagementError,
    SecretNotFoundError,
    NotAuthorizedError,
    CommitmentsError,
    CommitmentNotFoundError,
    IntegrityError,
    InvalidCiferSizeError,
    PayloadTooLargeError,
    FlowError,
    FlowAbortedError,
    FlowTimeoutError,
    AbortedError,
    is_cifer_error,
    is_block_stale_error,
)


__all__ = [
    "__version__",
    # Namespaces
    "abi",
    "adapters",
    "auth",
    "blackbox",
    "commitments",
    "flows",
    "key_management",
    "transport",
    # Configuration
    "CiferConfig",
    "ChainConfig",
    "DiscoveryResult",
    "DiscoveryCache",
    "ResolvedChainConfig",
    "discover",
    "resolve_chain",
    "estimate_block_freshness_window",
    # Types
    "Log",
    "LogFilter",
    "CallRequest",
    "TransactionReceipt",
    "TxIntent",
    "TxIntentWithMeta",
    "TxExecutionResult",
    "SecretState",
    "CIFERMetadata",
    "CommitmentData",
    "JobType",
    "JobStatus",
    "JobInfo",
    "PollingStrategy",
    "DataConsumption",
    "AbortSignal",
    "keccak256",
    "sleep_with_abort",
    # Adapters
    "SignerAdapter",
    "ReadClient",
    "Eip1193SignerAdapter",
    "LocalAccountSigner",
    "RpcReadClient",
    "signer_tx_executor",
    # Flows
    "FlowMode",
    "FlowContext",
    "FlowOptions",
    "FlowResult",
    "FlowPlan",
    "FlowStep",
    "StepStatus",
    "StepType",
    "create_secret_and_wait_ready",
    "encrypt_file_job_flow",
    "decrypt_file_job_flow",
    "decrypt_existing_file_job_flow",
    "encrypt_then_prepare_commit_tx",
    "retrieve_from_logs_then_decrypt",
    # Errors
    "CiferError",
    "ConfigError",
    "DiscoveryError",
    "ChainNotSupportedError",
    "UnsupportedOperationError",
    "AuthError",
    "SignatureError",
    "BlockStaleError",
    "BlockInFutureError",
    "SignerMismatchError",
    "BlackboxError",
    "EncryptionError",
    "DecryptionError",
    "JobError",
    "JobTimeoutError",
    "SecretNotReadyError",
    "KeyManagementError",
    "SecretNotFoundError",
    "NotAuthorizedError",
    "CommitmentsError",
    "CommitmentNotFoundError",
    "IntegrityError",
    "InvalidCiferSizeError",
    "PayloadTooLargeError",
    "FlowError",
    "FlowAbortedError",
    "FlowTimeoutError",
    "AbortedError",
    "is_cifer_error",
    "is_block_stale_error",
]
