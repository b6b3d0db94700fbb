# tests/conftest.py
"""
Shared fakes for the CIFER SDK test suite.

Everything runs offline: chain reads come from FakeReadClient, Blackbox
responses from MockHTTPTransport, signatures from a fixed eth_account key.
"""

from typing import Any, Dict, List, Optional, Union

import pytest
from eth_abi import encode
from web3 import Web3

from cifer_sdk.abi import cifer_encrypted, secrets_controller
from cifer_sdk.abi.codec import function_selector
from cifer_sdk.adapters import LocalAccountSigner, ReadClient
from cifer_sdk.common import ZERO_ADDRESS, keccak256, to_bytes32_hex
from cifer_sdk.flows import FlowContext
from cifer_sdk.transport import HTTPResponse, MockHTTPTransport
from cifer_sdk.types import (
    CallRequest,
    Log,
    LogFilter,
    PollingStrategy,
    TransactionReceipt,
    TxExecutionResult,
    TxIntent,
)


CHAIN_ID = 752025
BLACKBOX_URL = "https://blackbox.test"
CONTROLLER = "0x" + "c0" * 20
APP_CONTRACT = "0x" + "a1" * 20
SIGNER_KEY = "0x" + "4c" * 32
OWNER = "0x" + "0b" * 20

FAST_POLLING = PollingStrategy(interval_ms=1, max_attempts=5)


# =============================================================================
# Fakes
# =============================================================================

class FakeReadClient(ReadClient):
    """
    Scripted chain reader.

    block_numbers: an int, or a list consumed in order (last repeats)
    logs: topic0 → logs, filtered by the query's block range and data id
    calls: 4-byte selector hex → result hex, list (consumed in order),
           or exception to raise
    """

    def __init__(
        self,
        block_numbers: Union[int, List[int]] = 1000,
        logs: Optional[Dict[str, List[Log]]] = None,
        calls: Optional[Dict[str, Any]] = None,
    ):
        self.block_numbers = [block_numbers] if isinstance(block_numbers, int) else list(block_numbers)
        self.logs = {k.lower(): v for k, v in (logs or {}).items()}
        self.calls = calls or {}
        self.block_reads = 0
        self.log_queries: List[LogFilter] = []
        self.call_requests: List[CallRequest] = []

    async def get_block_number(self, chain_id: int) -> int:
        self.block_reads += 1
        if len(self.block_numbers) > 1:
            return self.block_numbers.pop(0)
        return self.block_numbers[0]

    async def get_logs(self, chain_id: int, log_filter: LogFilter) -> List[Log]:
        self.log_queries.append(log_filter)
        topics = log_filter.topics or []
        candidates = self.logs.get(topics[0].lower(), []) if topics else []
        matched = []
        for log in candidates:
            if not log_filter.from_block <= log.block_number <= log_filter.to_block:
                continue
            if len(topics) > 1 and topics[1] is not None and log.topics[1].lower() != topics[1].lower():
                continue
            matched.append(log)
        return matched

    async def call(self, chain_id: int, request: CallRequest) -> str:
        self.call_requests.append(request)
        result = self.calls[request.data[:10]]
        if isinstance(result, list):
            result = result.pop(0) if len(result) > 1 else result[0]
        if isinstance(result, Exception):
            raise result
        return result


class FakeTxExecutor:
    """Records intents and returns a canned receipt."""

    def __init__(self, receipt: TransactionReceipt):
        self.receipt = receipt
        self.intents: List[TxIntent] = []

    async def __call__(self, intent: TxIntent) -> TxExecutionResult:
        self.intents.append(intent)

        async def wait_receipt() -> TransactionReceipt:
            return self.receipt

        return TxExecutionResult(hash=self.receipt.transaction_hash, wait_receipt=wait_receipt)


# =============================================================================
# Builders
# =============================================================================

def selector(signature: str) -> str:
    return Web3.to_hex(function_selector(signature))


def abi_result(types: List[str], values: List[Any]) -> str:
    return Web3.to_hex(encode(types, values))


def secret_state_result(is_syncing: bool, owner: str = OWNER, cid: str = "bafkreipk") -> str:
    return abi_result(
        ["address", "address", "bool", "uint8", "uint8", "string"],
        [owner, ZERO_ADDRESS, is_syncing, 1, 1, cid],
    )


def secret_created_log(secret_id: int, owner: str = OWNER, block_number: int = 1001) -> Log:
    return Log(
        address=CONTROLLER,
        topics=[
            secrets_controller.secret_created_topic(),
            to_bytes32_hex(secret_id),
            to_bytes32_hex(owner),
        ],
        data=abi_result(["uint8"], [1]),
        block_number=block_number,
        transaction_hash="0x" + "ee" * 32,
        log_index=0,
    )


def receipt(status: int = 1, logs: Optional[List[Log]] = None) -> TransactionReceipt:
    return TransactionReceipt(
        transaction_hash="0x" + "ee" * 32,
        block_number=1001,
        status=status,
        logs=logs or [],
    )


def make_cifer(fill: int = 0x11, size: int = 1104) -> str:
    return Web3.to_hex(bytes([fill]) * size)


def cifer_data_log(
    data_id: str,
    cifer: str,
    encrypted_message: str,
    *,
    block_number: int,
    log_index: int = 0,
    secret_id: int = 42,
    updated: bool = False,
) -> Log:
    topic = cifer_encrypted.cifer_data_updated_topic() if updated else cifer_encrypted.cifer_data_stored_topic()
    return Log(
        address=APP_CONTRACT,
        topics=[topic, to_bytes32_hex(data_id), to_bytes32_hex(secret_id)],
        data=abi_result(
            ["bytes", "bytes", "bytes32", "bytes32"],
            [
                Web3.to_bytes(hexstr=cifer),
                Web3.to_bytes(hexstr=encrypted_message),
                Web3.to_bytes(hexstr=keccak256(cifer)),
                Web3.to_bytes(hexstr=keccak256(encrypted_message)),
            ],
        ),
        block_number=block_number,
        transaction_hash="0x" + "dd" * 32,
        log_index=log_index,
    )


def metadata_result(secret_id: int, stored_at_block: int, cifer: str, encrypted_message: str) -> str:
    return abi_result(
        ["uint256", "uint64", "bytes32", "bytes32"],
        [
            secret_id,
            stored_at_block,
            Web3.to_bytes(hexstr=keccak256(cifer)),
            Web3.to_bytes(hexstr=keccak256(encrypted_message)),
        ],
    )


def job_response(
    job_id: str,
    status: str,
    progress: int = 0,
    error: Optional[str] = None,
    job_type: str = "encrypt",
) -> HTTPResponse:
    job = {
        "id": job_id,
        "type": job_type,
        "status": status,
        "progress": progress,
        "secretId": 42,
        "chainId": CHAIN_ID,
        "createdAt": 1700000000000,
        "ttl": 86400000,
    }
    if error is not None:
        job["error"] = error
    return HTTPResponse.from_json({"job": job})


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def signer() -> LocalAccountSigner:
    return LocalAccountSigner.from_key(SIGNER_KEY)


@pytest.fixture
def read_client() -> FakeReadClient:
    return FakeReadClient()


@pytest.fixture
def transport() -> MockHTTPTransport:
    return MockHTTPTransport()


@pytest.fixture
def make_ctx(signer, read_client, transport):
    """Build a FlowContext over the shared fakes."""

    def build(**overrides) -> FlowContext:
        fields = dict(
            signer=signer,
            read_client=read_client,
            blackbox_url=BLACKBOX_URL,
            chain_id=CHAIN_ID,
            controller_address=CONTROLLER,
            polling_strategy=FAST_POLLING,
            transport=transport,
        )
        fields.update(overrides)
        return FlowContext(**fields)

    return build
