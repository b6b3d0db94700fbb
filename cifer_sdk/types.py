# cifer_sdk/types.py
"""
CIFER SDK: Shared Types

Library-neutral data types exchanged between the SDK layers and the
caller's chain/wallet integration. Hex values travel as "0x"-prefixed
strings, block numbers and amounts as Python ints.

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List, Callable, Awaitable, Union


Address = str
Hex = str
Bytes32 = str


# =============================================================================
# Chain Types
# =============================================================================

@dataclass
class Log:
    """Decoded-envelope event log as returned by eth_getLogs."""
    address: Address
    topics: List[Hex]
    data: Hex
    block_number: int
    transaction_hash: Hex
    log_index: int
    transaction_index: int = 0

    @classmethod
    def from_rpc(cls, raw: Dict[str, Any]) -> 'Log':
        """Parse a JSON-RPC log object (hex quantities)."""
        return cls(
            address=raw["address"],
            topics=list(raw.get("topics", [])),
            data=raw.get("data", "0x"),
            block_number=_quantity(raw.get("blockNumber")),
            transaction_hash=raw.get("transactionHash", ""),
            log_index=_quantity(raw.get("logIndex")),
            transaction_index=_quantity(raw.get("transactionIndex")),
        )


@dataclass
class LogFilter:
    """
    eth_getLogs filter.

    Topics are positional; None is a wildcard. from_block == to_block
    selects a single block.
    """
    from_block: Union[int, str]
    to_block: Union[int, str]
    address: Optional[Address] = None
    topics: Optional[List[Optional[Hex]]] = None

    def to_rpc_params(self) -> Dict[str, Any]:
        """Convert to the JSON-RPC filter object."""
        params: Dict[str, Any] = {
            "fromBlock": _block_tag(self.from_block),
            "toBlock": _block_tag(self.to_block),
        }
        if self.address is not None:
            params["address"] = self.address
        if self.topics is not None:
            params["topics"] = list(self.topics)
        return params


@dataclass
class CallRequest:
    """eth_call request."""
    to: Address
    data: Hex
    block_tag: Union[int, str] = "latest"


@dataclass
class TransactionReceipt:
    """Mined transaction receipt. status is 1 on success, 0 on revert."""
    transaction_hash: Hex
    block_number: int
    status: int
    gas_used: int = 0
    logs: List[Log] = field(default_factory=list)
    contract_address: Optional[Address] = None

    @classmethod
    def from_rpc(cls, raw: Dict[str, Any]) -> 'TransactionReceipt':
        """Parse a JSON-RPC receipt object."""
        return cls(
            transaction_hash=raw["transactionHash"],
            block_number=_quantity(raw.get("blockNumber")),
            status=1 if _quantity(raw.get("status")) == 1 else 0,
            gas_used=_quantity(raw.get("gasUsed")),
            logs=[Log.from_rpc(entry) for entry in raw.get("logs", [])],
            contract_address=raw.get("contractAddress"),
        )


# =============================================================================
# Transactions
# =============================================================================

@dataclass
class TxIntent:
    """Unsigned transaction for the caller's wallet to broadcast."""
    chain_id: int
    to: Address
    data: Hex
    value: Optional[int] = None


@dataclass
class TxIntentWithMeta(TxIntent):
    """TxIntent with a human-readable description for previews."""
    description: str = ""
    function_name: str = ""
    args: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TxExecutionResult:
    """Result of submitting a TxIntent."""
    hash: Hex
    wait_receipt: Callable[[], Awaitable[TransactionReceipt]]


TxExecutor = Callable[[TxIntent], Awaitable[TxExecutionResult]]


# =============================================================================
# Contract State
# =============================================================================

@dataclass
class SecretState:
    """SecretsController state for one secret."""
    owner: Address
    delegate: Address
    is_syncing: bool
    cluster_id: int
    secret_type: int
    public_key_cid: str


@dataclass
class CIFERMetadata:
    """Contract-stored fingerprint of a commitment."""
    secret_id: int
    stored_at_block: int
    cifer_hash: Bytes32
    encrypted_message_hash: Bytes32


@dataclass
class CommitmentData:
    """Encrypted commitment bytes recovered from an event log."""
    cifer: Hex
    encrypted_message: Hex
    cifer_hash: Bytes32
    encrypted_message_hash: Bytes32


# =============================================================================
# Blackbox Jobs
# =============================================================================

class JobType(str, Enum):
    """Blackbox file job kind."""
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


class JobStatus(str, Enum):
    """Blackbox job lifecycle status."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        """Terminal statuses are final."""
        return self in (JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.EXPIRED)


@dataclass
class JobInfo:
    """Blackbox job record."""
    id: str
    type: JobType
    status: JobStatus
    progress: int
    secret_id: int
    chain_id: int
    created_at: int
    ttl: int
    completed_at: Optional[int] = None
    expired_at: Optional[int] = None
    error: Optional[str] = None
    result_file_name: Optional[str] = None
    original_size: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'JobInfo':
        """Parse the service's camelCase job object."""
        return cls(
            id=str(data["id"]),
            type=JobType(data["type"]),
            status=JobStatus(data["status"]),
            progress=int(data.get("progress", 0)),
            secret_id=int(data.get("secretId", 0)),
            chain_id=int(data.get("chainId", 0)),
            created_at=int(data.get("createdAt", 0)),
            ttl=int(data.get("ttl", 0)),
            completed_at=data.get("completedAt"),
            expired_at=data.get("expiredAt"),
            error=data.get("error"),
            result_file_name=data.get("resultFileName"),
            original_size=data.get("originalSize"),
        )


@dataclass(frozen=True)
class PollingStrategy:
    """How to wait on remote state: fixed interval, optional backoff and cap."""
    interval_ms: int = 2000
    max_attempts: int = 60
    backoff_multiplier: float = 1
    max_interval_ms: Optional[int] = None

    @property
    def budget_ms(self) -> int:
        """Nominal total wait, as reported in timeout errors."""
        return self.max_attempts * self.interval_ms


@dataclass
class UsageStats:
    """Byte quota for one direction (encryption or decryption)."""
    limit: int
    used: int
    remaining: int
    count: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UsageStats':
        return cls(
            limit=int(data.get("limit", 0)),
            used=int(data.get("used", 0)),
            remaining=int(data.get("remaining", 0)),
            count=int(data.get("count", 0)),
        )


@dataclass
class DataConsumption:
    """Per-wallet data usage reported by the Blackbox."""
    wallet: Address
    encryption: UsageStats
    decryption: UsageStats

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DataConsumption':
        return cls(
            wallet=data.get("wallet", ""),
            encryption=UsageStats.from_dict(data.get("encryption") or {}),
            decryption=UsageStats.from_dict(data.get("decryption") or {}),
        )


# =============================================================================
# Helpers
# =============================================================================

def _quantity(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    return int(value, 16) if str(value).startswith("0x") else int(value)


def _block_tag(value: Union[int, str]) -> str:
    if isinstance(value, int):
        return hex(value)
    return value
