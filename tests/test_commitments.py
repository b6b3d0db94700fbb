# tests/test_commitments.py
"""
Commitment retrieval from logs, integrity verification, metadata reads
and store transaction building.
"""

import asyncio

import pytest

from cifer_sdk.abi import cifer_encrypted
from cifer_sdk.commitments import (
    CIFER_ENVELOPE_BYTES,
    COMMON_STORE_FUNCTIONS,
    MAX_PAYLOAD_BYTES,
    CommitmentReadParams,
    StoreCommitmentArgs,
    assert_commitment_integrity,
    build_store_commitment_tx,
    cifer_data_exists,
    fetch_commitment_from_logs,
    fetch_commitment_with_retry,
    get_cifer_metadata,
    is_cifer_data_event,
    parse_commitment_log,
    select_closest_log,
    validate_for_storage,
    verify_commitment_integrity,
)
from cifer_sdk.common import keccak256, to_bytes32_hex
from cifer_sdk.errors import (
    CommitmentNotFoundError,
    CommitmentsError,
    IntegrityError,
    InvalidCiferSizeError,
    PayloadTooLargeError,
)
from cifer_sdk.types import CIFERMetadata, CommitmentData

from conftest import (
    APP_CONTRACT,
    CHAIN_ID,
    FakeReadClient,
    abi_result,
    cifer_data_log,
    make_cifer,
    metadata_result,
    selector,
)


DATA_ID = "0x" + "ab" * 32
MESSAGE = "0x" + "5e" * 64


def fetch(read_client, stored_at_block):
    return asyncio.run(fetch_commitment_from_logs(
        chain_id=CHAIN_ID,
        contract_address=APP_CONTRACT,
        data_id=DATA_ID,
        stored_at_block=stored_at_block,
        read_client=read_client,
    ))


# =============================================================================
# Exact Lookup
# =============================================================================

def test_stored_event_at_exact_block():
    cifer = make_cifer()
    log = cifer_data_log(DATA_ID, cifer, MESSAGE, block_number=500)
    read_client = FakeReadClient(logs={log.topics[0]: [log]})

    data = fetch(read_client, 500)

    assert data.cifer == cifer
    assert data.encrypted_message == MESSAGE
    assert data.cifer_hash == keccak256(cifer)
    query = read_client.log_queries[0]
    assert (query.from_block, query.to_block) == (500, 500)
    assert query.topics == [cifer_encrypted.cifer_data_stored_topic(), to_bytes32_hex(DATA_ID)]
    assert query.address == APP_CONTRACT


def test_falls_back_to_updated_event():
    cifer = make_cifer(0x22)
    log = cifer_data_log(DATA_ID, cifer, MESSAGE, block_number=700, updated=True)
    read_client = FakeReadClient(logs={log.topics[0]: [log]})

    data = fetch(read_client, 700)

    assert data.cifer == cifer
    assert len(read_client.log_queries) == 2
    assert read_client.log_queries[1].topics[0] == cifer_encrypted.cifer_data_updated_topic()


def test_highest_log_index_wins_within_block():
    first = cifer_data_log(DATA_ID, make_cifer(0x01), MESSAGE, block_number=500, log_index=2)
    last = cifer_data_log(DATA_ID, make_cifer(0x02), MESSAGE, block_number=500, log_index=7)
    read_client = FakeReadClient(logs={first.topics[0]: [first, last]})

    data = fetch(read_client, 500)

    assert data.cifer == make_cifer(0x02)


def test_no_event_at_block_is_not_found():
    log = cifer_data_log(DATA_ID, make_cifer(), MESSAGE, block_number=501)
    read_client = FakeReadClient(logs={log.topics[0]: [log]})

    with pytest.raises(CommitmentNotFoundError) as info:
        fetch(read_client, 500)
    assert DATA_ID in str(info.value)


def test_read_failure_is_commitments_error():

    class BrokenReadClient(FakeReadClient):
        async def get_logs(self, chain_id, log_filter):
            raise ConnectionError("rpc down")

    with pytest.raises(CommitmentsError):
        fetch(BrokenReadClient(), 500)


# =============================================================================
# Widened Lookup
# =============================================================================

def test_widened_lookup_prefers_exact_block():
    exact = cifer_data_log(DATA_ID, make_cifer(0x01), MESSAGE, block_number=500, log_index=1)
    later = cifer_data_log(DATA_ID, make_cifer(0x02), MESSAGE, block_number=503, log_index=9)
    read_client = FakeReadClient(logs={exact.topics[0]: [exact, later]})

    data = asyncio.run(fetch_commitment_with_retry(
        chain_id=CHAIN_ID,
        contract_address=APP_CONTRACT,
        data_id=DATA_ID,
        stored_at_block=500,
        read_client=read_client,
    ))

    assert data.cifer == make_cifer(0x01)


def test_widened_lookup_finds_nearby_block():
    nearby = cifer_data_log(DATA_ID, make_cifer(0x03), MESSAGE, block_number=502, updated=True)
    read_client = FakeReadClient(logs={nearby.topics[0]: [nearby]})

    data = asyncio.run(fetch_commitment_with_retry(
        chain_id=CHAIN_ID,
        contract_address=APP_CONTRACT,
        data_id=DATA_ID,
        stored_at_block=500,
        read_client=read_client,
    ))

    assert data.cifer == make_cifer(0x03)
    assert (read_client.log_queries[0].from_block, read_client.log_queries[0].to_block) == (500, 505)


def test_select_closest_log_tie_takes_earlier_block():
    before = cifer_data_log(DATA_ID, make_cifer(0x01), MESSAGE, block_number=498)
    after = cifer_data_log(DATA_ID, make_cifer(0x02), MESSAGE, block_number=502)

    assert select_closest_log([after, before], 500) is before


# =============================================================================
# Log Parsing
# =============================================================================

def test_is_cifer_data_event():
    log = cifer_data_log(DATA_ID, make_cifer(), MESSAGE, block_number=1)
    assert is_cifer_data_event(log)
    log.topics[0] = "0x" + "00" * 32
    assert not is_cifer_data_event(log)


def test_parse_log_with_missing_topics():
    log = cifer_data_log(DATA_ID, make_cifer(), MESSAGE, block_number=1)
    log.topics = log.topics[:1]
    with pytest.raises(CommitmentsError):
        parse_commitment_log(log)


# =============================================================================
# Integrity
# =============================================================================

def commitment(cifer, message=MESSAGE):
    return CommitmentData(
        cifer=cifer,
        encrypted_message=message,
        cifer_hash=keccak256(cifer),
        encrypted_message_hash=keccak256(message),
    )


def metadata_for(cifer, message=MESSAGE):
    return CIFERMetadata(
        secret_id=42,
        stored_at_block=500,
        cifer_hash=keccak256(cifer),
        encrypted_message_hash=keccak256(message),
    )


def test_integrity_passes_on_matching_hashes():
    cifer = make_cifer()
    assert_commitment_integrity(commitment(cifer), metadata_for(cifer))
    assert verify_commitment_integrity(commitment(cifer), metadata_for(cifer)).valid


def test_integrity_detects_cifer_hash_mismatch():
    cifer = make_cifer()
    metadata = metadata_for(make_cifer(0x99))

    with pytest.raises(IntegrityError) as info:
        assert_commitment_integrity(commitment(cifer), metadata)
    assert info.value.field == "cifer"

    result = verify_commitment_integrity(commitment(cifer), metadata)
    assert not result.valid
    assert not result.cifer_hash.valid
    assert result.encrypted_message_hash.valid


def test_integrity_detects_message_hash_mismatch():
    cifer = make_cifer()
    metadata = metadata_for(cifer, "0x" + "01" * 64)

    with pytest.raises(IntegrityError) as info:
        assert_commitment_integrity(commitment(cifer), metadata)
    assert info.value.field == "encryptedMessage"


def test_integrity_recomputes_hashes_rather_than_trusting_the_event():
    cifer = make_cifer()
    tampered = commitment(cifer)
    tampered.cifer = make_cifer(0x77)

    with pytest.raises(IntegrityError):
        assert_commitment_integrity(tampered, metadata_for(cifer))


def test_integrity_rejects_wrong_cifer_size():
    short = make_cifer(size=CIFER_ENVELOPE_BYTES - 1)
    with pytest.raises(InvalidCiferSizeError):
        assert_commitment_integrity(commitment(short))


def test_validate_for_storage_limits():
    validate_for_storage(make_cifer(), "0x" + "00" * MAX_PAYLOAD_BYTES)

    with pytest.raises(InvalidCiferSizeError):
        validate_for_storage(make_cifer(size=100), MESSAGE)
    with pytest.raises(CommitmentsError):
        validate_for_storage(make_cifer(), "0x")
    with pytest.raises(PayloadTooLargeError):
        validate_for_storage(make_cifer(), "0x" + "00" * (MAX_PAYLOAD_BYTES + 1))


# =============================================================================
# Metadata
# =============================================================================

def test_get_cifer_metadata():
    cifer = make_cifer()
    read_client = FakeReadClient(calls={
        selector(cifer_encrypted.GET_CIFER_METADATA): metadata_result(42, 500, cifer, MESSAGE),
    })
    params = CommitmentReadParams(chain_id=CHAIN_ID, contract_address=APP_CONTRACT, read_client=read_client)

    metadata = asyncio.run(get_cifer_metadata(params, DATA_ID))

    assert metadata.secret_id == 42
    assert metadata.stored_at_block == 500
    assert metadata.cifer_hash == keccak256(cifer)


def test_get_cifer_metadata_not_stored():
    read_client = FakeReadClient(calls={
        selector(cifer_encrypted.GET_CIFER_METADATA): abi_result(
            ["uint256", "uint64", "bytes32", "bytes32"], [0, 0, b"\x00" * 32, b"\x00" * 32],
        ),
    })
    params = CommitmentReadParams(chain_id=CHAIN_ID, contract_address=APP_CONTRACT, read_client=read_client)

    with pytest.raises(CommitmentNotFoundError):
        asyncio.run(get_cifer_metadata(params, DATA_ID))


def test_cifer_data_exists():
    read_client = FakeReadClient(calls={
        selector(cifer_encrypted.CIFER_DATA_EXISTS): abi_result(["bool"], [True]),
    })
    params = CommitmentReadParams(chain_id=CHAIN_ID, contract_address=APP_CONTRACT, read_client=read_client)

    assert asyncio.run(cifer_data_exists(params, DATA_ID)) is True


# =============================================================================
# Store Transaction
# =============================================================================

def test_build_store_commitment_tx():
    cifer = make_cifer()
    intent = build_store_commitment_tx(
        chain_id=CHAIN_ID,
        contract_address=APP_CONTRACT,
        store_function=COMMON_STORE_FUNCTIONS["storeWithKey"],
        args=StoreCommitmentArgs(key=DATA_ID, secret_id=42, encrypted_message=MESSAGE, cifer=cifer),
    )

    assert intent.to == APP_CONTRACT
    assert intent.chain_id == CHAIN_ID
    assert intent.data.startswith(selector("store(bytes32,bytes,bytes)"))
    assert intent.args["ciferLength"] == CIFER_ENVELOPE_BYTES
    assert intent.args["encryptedMessageLength"] == 64


def test_build_store_commitment_tx_validates_sizes():
    with pytest.raises(InvalidCiferSizeError):
        build_store_commitment_tx(
            chain_id=CHAIN_ID,
            contract_address=APP_CONTRACT,
            store_function=COMMON_STORE_FUNCTIONS["storeWithSecretId"],
            args=StoreCommitmentArgs(key=DATA_ID, secret_id=42, encrypted_message=MESSAGE, cifer="0x00"),
        )
