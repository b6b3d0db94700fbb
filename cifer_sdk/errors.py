# cifer_sdk/errors.py
"""
CIFER SDK: Error Taxonomy

Every error raised by the SDK derives from CiferError and carries a stable
string code plus an optional cause. The families mirror the SDK layout:

    config          ConfigError, DiscoveryError, ChainNotSupportedError,
                    UnsupportedOperationError
    auth            AuthError, SignatureError, BlockStaleError, ...
    blackbox        BlackboxError, EncryptionError, DecryptionError, JobError, ...
    key management  KeyManagementError, SecretNotFoundError, NotAuthorizedError
    commitments     CommitmentsError, CommitmentNotFoundError, IntegrityError, ...
    flows           FlowError, FlowAbortedError, FlowTimeoutError

Usage:
    try:
        await encrypt_payload(...)
    except BlockStaleError as e:
        print(e.block_number, e.current_block, e.max_window)
    except CiferError as e:
        print(e.code, e)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from typing import Optional, Any, Dict


# =============================================================================
# Base
# =============================================================================

class CiferError(Exception):
    """Base class for all SDK errors."""

    def __init__(
        self,
        message: str,
        code: str = "CIFER_ERROR",
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigError(CiferError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, "CONFIG_ERROR", cause)


class DiscoveryError(ConfigError):
    """Blackbox discovery (/healthz) failed."""

    def __init__(
        self,
        message: str,
        blackbox_url: str,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.code = "DISCOVERY_ERROR"
        self.blackbox_url = blackbox_url


class ChainNotSupportedError(ConfigError):
    """Chain is neither discovered nor configured."""

    def __init__(self, chain_id: int, cause: Optional[BaseException] = None):
        super().__init__(f"Chain {chain_id} is not supported", cause)
        self.code = "CHAIN_NOT_SUPPORTED"
        self.chain_id = chain_id


class UnsupportedOperationError(ConfigError):
    """Adapter does not implement an optional capability."""

    def __init__(self, adapter: str, operation: str, cause: Optional[BaseException] = None):
        super().__init__(f"{adapter} does not support {operation}", cause)
        self.code = "UNSUPPORTED_OPERATION"
        self.adapter = adapter
        self.operation = operation


# =============================================================================
# Authentication Errors
# =============================================================================

class AuthError(CiferError):
    """Authentication or signing failed."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        code: str = "AUTH_ERROR",
    ):
        super().__init__(message, code, cause)


class SignatureError(AuthError):
    """Signer refused or failed to sign."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, cause, "SIGNATURE_ERROR")


class BlockStaleError(AuthError):
    """Block number embedded in the auth string is outside the freshness window."""

    def __init__(
        self,
        block_number: int,
        current_block: int,
        max_window: int,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(
            f"Block number {block_number} is too old "
            f"(current: {current_block}, max window: {max_window})",
            cause,
            "BLOCK_STALE",
        )
        self.block_number = block_number
        self.current_block = current_block
        self.max_window = max_window


class BlockInFutureError(AuthError):
    """Block number is ahead of the chain head by more than the skew tolerance."""

    def __init__(
        self,
        block_number: int,
        current_block: int,
        tolerance: int,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(
            f"Block number {block_number} is in the future "
            f"(current: {current_block}, tolerance: {tolerance})",
            cause,
            "BLOCK_IN_FUTURE",
        )
        self.block_number = block_number
        self.current_block = current_block
        self.tolerance = tolerance


class SignerMismatchError(AuthError):
    """Signature does not recover to the expected signer."""

    def __init__(self, expected: str, actual: str, cause: Optional[BaseException] = None):
        super().__init__(
            f"Signer mismatch: expected {expected}, got {actual}",
            cause,
            "SIGNER_MISMATCH",
        )
        self.expected = expected
        self.actual = actual


# =============================================================================
# Blackbox Errors
# =============================================================================

class BlackboxError(CiferError):
    """Blackbox service returned an error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        cause: Optional[BaseException] = None,
        code: str = "BLACKBOX_ERROR",
    ):
        super().__init__(message, code, cause)
        self.status_code = status_code
        self.endpoint = endpoint


class EncryptionError(BlackboxError):
    """Payload or file encryption failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, cause: Optional[BaseException] = None):
        super().__init__(message, status_code, "/encrypt-payload", cause, "ENCRYPTION_ERROR")


class DecryptionError(BlackboxError):
    """Payload or file decryption failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, cause: Optional[BaseException] = None):
        super().__init__(message, status_code, "/decrypt-payload", cause, "DECRYPTION_ERROR")


class JobError(BlackboxError):
    """Job lookup or job operation failed."""

    def __init__(
        self,
        message: str,
        job_id: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, status_code, f"/jobs/{job_id}", cause, "JOB_ERROR")
        self.job_id = job_id


class JobTimeoutError(JobError):
    """Job did not reach a terminal state within the polling budget."""

    def __init__(self, job_id: str, max_attempts: int, cause: Optional[BaseException] = None):
        super().__init__(
            f"Job {job_id} did not complete after {max_attempts} attempts",
            job_id,
            None,
            cause,
        )
        self.code = "JOB_TIMEOUT"
        self.max_attempts = max_attempts


class SecretNotReadyError(BlackboxError):
    """Secret is still syncing and cannot be used yet."""

    def __init__(self, secret_id: Optional[int] = None, cause: Optional[BaseException] = None):
        if secret_id is None:
            message = "Secret is not ready (still syncing)"
        else:
            message = f"Secret {secret_id} is not ready (still syncing)"
        super().__init__(message, None, None, cause, "SECRET_NOT_READY")
        self.secret_id = secret_id


# =============================================================================
# Key Management Errors
# =============================================================================

class KeyManagementError(CiferError):
    """SecretsController read or transaction building failed."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        code: str = "KEY_MANAGEMENT_ERROR",
    ):
        super().__init__(message, code, cause)


class SecretNotFoundError(KeyManagementError):
    """Secret id does not exist on the controller."""

    def __init__(self, secret_id: int, cause: Optional[BaseException] = None):
        super().__init__(f"Secret {secret_id} not found", cause, "SECRET_NOT_FOUND")
        self.secret_id = secret_id


class NotAuthorizedError(KeyManagementError):
    """Address is neither owner nor delegate of the secret."""

    def __init__(self, secret_id: int, address: str, cause: Optional[BaseException] = None):
        super().__init__(
            f"Address {address} is not authorized for secret {secret_id}",
            cause,
            "NOT_AUTHORIZED",
        )
        self.secret_id = secret_id
        self.address = address


# =============================================================================
# Commitment Errors
# =============================================================================

class CommitmentsError(CiferError):
    """On-chain commitment operation failed."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        code: str = "COMMITMENTS_ERROR",
    ):
        super().__init__(message, code, cause)


class CommitmentNotFoundError(CommitmentsError):
    """No commitment metadata or log exists for the data id."""

    def __init__(self, data_id: str, cause: Optional[BaseException] = None):
        super().__init__(
            f"Commitment data not found for dataId: {data_id}",
            cause,
            "COMMITMENT_NOT_FOUND",
        )
        self.data_id = data_id


class IntegrityError(CommitmentsError):
    """Retrieved bytes do not match the on-chain fingerprint."""

    def __init__(self, field: str, expected: Any, actual: Any, cause: Optional[BaseException] = None):
        super().__init__(
            f"Integrity check failed for {field}: expected {expected}, got {actual}",
            cause,
            "INTEGRITY_ERROR",
        )
        self.field = field
        self.expected = expected
        self.actual = actual


class InvalidCiferSizeError(CommitmentsError):
    """Cifer envelope is not exactly the fixed size."""

    def __init__(self, actual_size: int, expected_size: int, cause: Optional[BaseException] = None):
        super().__init__(
            f"Invalid cifer size: expected {expected_size} bytes, got {actual_size}",
            cause,
            "INVALID_CIFER_SIZE",
        )
        self.actual_size = actual_size
        self.expected_size = expected_size


class PayloadTooLargeError(CommitmentsError):
    """Encrypted message exceeds the storable maximum."""

    def __init__(self, actual_size: int, max_size: int, cause: Optional[BaseException] = None):
        super().__init__(
            f"Payload too large: {actual_size} bytes exceeds maximum {max_size}",
            cause,
            "PAYLOAD_TOO_LARGE",
        )
        self.actual_size = actual_size
        self.max_size = max_size


# =============================================================================
# Flow Errors
# =============================================================================

class FlowError(CiferError):
    """A flow step failed."""

    def __init__(
        self,
        message: str,
        flow_name: str,
        step_name: Optional[str] = None,
        cause: Optional[BaseException] = None,
        code: str = "FLOW_ERROR",
    ):
        super().__init__(message, code, cause)
        self.flow_name = flow_name
        self.step_name = step_name


class FlowAbortedError(FlowError):
    """Flow was cancelled through its abort signal."""

    def __init__(self, flow_name: str, step_name: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(f"Flow {flow_name} was aborted", flow_name, step_name, cause, "FLOW_ABORTED")


class FlowTimeoutError(FlowError):
    """Flow gave up waiting for a remote state change."""

    def __init__(
        self,
        flow_name: str,
        timeout_ms: int,
        step_name: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(
            f"Flow {flow_name} timed out after {timeout_ms}ms",
            flow_name,
            step_name,
            cause,
            "FLOW_TIMEOUT",
        )
        self.timeout_ms = timeout_ms


class AbortedError(CiferError):
    """A cancellable wait observed its abort signal."""

    def __init__(self, message: str = "Operation aborted", cause: Optional[BaseException] = None):
        super().__init__(message, "ABORTED", cause)


# =============================================================================
# Helpers
# =============================================================================

def is_cifer_error(error: Any) -> bool:
    """True if error is any SDK error."""
    return isinstance(error, CiferError)


def is_block_stale_error(error: Any) -> bool:
    """True if error is a retryable block-staleness rejection."""
    return isinstance(error, BlockStaleError)


def error_details(error: CiferError) -> Dict[str, Any]:
    """Flatten an error into a loggable dict."""
    details: Dict[str, Any] = {"code": error.code, "message": error.message}
    for key in ("flow_name", "step_name", "job_id", "data_id", "status_code", "endpoint"):
        value = getattr(error, key, None)
        if value is not None:
            details[key] = value
    return details
