# cifer_sdk/flows/__init__.py
"""
CIFER SDK Flows

Multi-step operations with plan/execute modes and per-step progress.

    create_secret_and_wait_ready     read_fee → create_secret_tx → wait_sync
    encrypt_file_job_flow            upload → poll → download
    decrypt_file_job_flow            upload → poll → download (signed)
    decrypt_existing_file_job_flow   create_job → poll → download (signed)
    encrypt_then_prepare_commit_tx   encrypt → validate → build_tx
    retrieve_from_logs_then_decrypt  [read_metadata] → fetch_logs → [verify_integrity] → decrypt

Updated: 2025-01-20
Version: 0.1.0
"""

from .types import (
    FlowMode,
    StepType,
    StepStatus,
    FlowStep,
    FlowPlan,
    FlowContext,
    FlowOptions,
    FlowResult,
    validate_execution_context,
    DEFAULT_POLLING_STRATEGY,
)

from .engine import (
    StepTracker,
    run_flow,
)

from .create_secret import (
    create_secret_and_wait_ready,
    CreateSecretResult,
)

from .file_jobs import (
    encrypt_file_job_flow,
    decrypt_file_job_flow,
    decrypt_existing_file_job_flow,
    EncryptFileParams,
    DecryptFileParams,
    DecryptExistingFileParams,
    FileJobFlowResult,
)

from .encrypt_commit import (
    encrypt_then_prepare_commit_tx,
    EncryptThenCommitParams,
    EncryptThenCommitResult,
    DEFAULT_STORE_FUNCTION,
)

from .decrypt_from_logs import (
    retrieve_from_logs_then_decrypt,
    RetrieveAndDecryptParams,
    RetrieveAndDecryptResult,
)


__all__ = [
    # Types
    "FlowMode",
    "StepType",
    "StepStatus",
    "FlowStep",
    "FlowPlan",
    "FlowContext",
    "FlowOptions",
    "FlowResult",
    "validate_execution_context",
    "DEFAULT_POLLING_STRATEGY",
    # Engine
    "StepTracker",
    "run_flow",
    # Create secret
    "create_secret_and_wait_ready",
    "CreateSecretResult",
    # File jobs
    "encrypt_file_job_flow",
    "decrypt_file_job_flow",
    "decrypt_existing_file_job_flow",
    "EncryptFileParams",
    "DecryptFileParams",
    "DecryptExistingFileParams",
    "FileJobFlowResult",
    # Commitments
    "encrypt_then_prepare_commit_tx",
    "EncryptThenCommitParams",
    "EncryptThenCommitResult",
    "DEFAULT_STORE_FUNCTION",
    "retrieve_from_logs_then_decrypt",
    "RetrieveAndDecryptParams",
    "RetrieveAndDecryptResult",
]
