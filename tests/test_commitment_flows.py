# tests/test_commitment_flows.py
"""
encrypt_then_prepare_commit_tx and retrieve_from_logs_then_decrypt.
"""

import asyncio

from cifer_sdk.abi import cifer_encrypted
from cifer_sdk.errors import (
    CommitmentNotFoundError,
    FlowAbortedError,
    InvalidCiferSizeError,
    IntegrityError,
)
from cifer_sdk.flows import (
    EncryptThenCommitParams,
    FlowMode,
    FlowOptions,
    RetrieveAndDecryptParams,
    StepStatus,
    StepType,
    encrypt_then_prepare_commit_tx,
    retrieve_from_logs_then_decrypt,
)
from cifer_sdk.transport import HTTPResponse

from conftest import (
    APP_CONTRACT,
    CHAIN_ID,
    FakeReadClient,
    cifer_data_log,
    make_cifer,
    metadata_result,
    selector,
)


DATA_ID = "0x" + "cd" * 32
MESSAGE = "0x" + "e1" * 48
METADATA_SELECTOR = selector(cifer_encrypted.GET_CIFER_METADATA)


def encrypted_response(cifer=None, message=MESSAGE):
    return HTTPResponse.from_json({
        "success": True,
        "cifer": cifer or make_cifer(),
        "encryptedMessage": message,
        "chainId": CHAIN_ID,
        "secretId": 42,
        "outputFormat": "hex",
    })


def commit_params():
    return EncryptThenCommitParams(
        secret_id=42, plaintext="launch codes", key=DATA_ID, commitment_contract=APP_CONTRACT,
    )


# =============================================================================
# Encrypt Then Commit
# =============================================================================

def test_encrypt_then_prepare_commit_tx(make_ctx, transport, signer):
    transport.add_route("POST", "/encrypt-payload", encrypted_response())

    result = asyncio.run(encrypt_then_prepare_commit_tx(make_ctx(), commit_params()))

    assert result.success, result.error
    assert result.data.cifer == make_cifer()
    assert result.data.encrypted_message == MESSAGE
    intent = result.data.tx_intent
    assert intent.to == APP_CONTRACT
    assert intent.data.startswith(selector("store(bytes32,bytes,bytes)"))
    assert result.plan.steps[2].tx_intent is intent

    body = transport.requests_to("/encrypt-payload")[0].json
    address = asyncio.run(signer.get_address())
    assert body["data"] == f"{CHAIN_ID}_42_{address}_1000_launch codes"
    assert body["outputFormat"] == "hex"


def test_wrong_cifer_size_fails_validate_step(make_ctx, transport):
    transport.add_route("POST", "/encrypt-payload", encrypted_response(cifer="0x" + "11" * 1000))

    result = asyncio.run(encrypt_then_prepare_commit_tx(make_ctx(), commit_params()))

    assert not result.success
    assert isinstance(result.error, InvalidCiferSizeError)
    assert [step.status for step in result.plan.steps] == [
        StepStatus.COMPLETED, StepStatus.FAILED, StepStatus.PENDING,
    ]


def test_stale_block_is_retried_transparently(make_ctx, transport):
    transport.add_route("POST", "/encrypt-payload", [
        HTTPResponse.from_json(
            {"error": "Block number 1000 is too old (current: 1200, max window: 100)"}, 401,
        ),
        encrypted_response(),
    ])
    read_client = FakeReadClient(block_numbers=[1000, 1199])

    result = asyncio.run(encrypt_then_prepare_commit_tx(make_ctx(read_client=read_client), commit_params()))

    assert result.success, result.error
    requests = transport.requests_to("/encrypt-payload")
    assert len(requests) == 2
    assert "_1000_" in requests[0].json["data"]
    assert "_1199_" in requests[1].json["data"]


def test_abort_during_stale_block_retry(make_ctx, transport):
    transport.add_route("POST", "/encrypt-payload", HTTPResponse.from_json(
        {"error": "Block number 1000 is too old (current: 1200, max window: 100)"}, 401,
    ))

    async def scenario():
        abort = asyncio.Event()
        asyncio.get_running_loop().call_later(0.01, abort.set)
        return await encrypt_then_prepare_commit_tx(make_ctx(abort_signal=abort), commit_params())

    result = asyncio.run(scenario())

    assert isinstance(result.error, FlowAbortedError)
    assert result.error.step_name == "encrypt"
    assert result.plan.steps[0].status is StepStatus.FAILED
    assert len(transport.requests_to("/encrypt-payload")) == 1


# =============================================================================
# Retrieve From Logs Then Decrypt
# =============================================================================

def stored_commitment(block_number=500):
    cifer = make_cifer(0x33)
    log = cifer_data_log(DATA_ID, cifer, MESSAGE, block_number=block_number)
    read_client = FakeReadClient(
        logs={log.topics[0]: [log]},
        calls={METADATA_SELECTOR: metadata_result(42, block_number, cifer, MESSAGE)},
    )
    return cifer, read_client


def test_retrieve_and_decrypt_reads_metadata_first(make_ctx, transport):
    cifer, read_client = stored_commitment()
    transport.add_route("POST", "/decrypt-payload", HTTPResponse.from_json(
        {"success": True, "decryptedMessage": "launch codes"},
    ))

    result = asyncio.run(retrieve_from_logs_then_decrypt(
        make_ctx(read_client=read_client),
        RetrieveAndDecryptParams(secret_id=42, data_id=DATA_ID, commitment_contract=APP_CONTRACT),
    ))

    assert result.success, result.error
    assert result.data.decrypted_message == "launch codes"
    assert result.data.stored_at_block == 500
    assert [step.id for step in result.plan.steps] == [
        "read_metadata", "fetch_logs", "verify_integrity", "decrypt",
    ]
    body = transport.requests_to("/decrypt-payload")[0].json
    assert body["cifer"] == cifer
    assert body["data"].endswith(MESSAGE)
    assert len(read_client.call_requests) == 1


def test_known_block_and_skipped_integrity_trim_the_plan(make_ctx, transport):
    _, read_client = stored_commitment(block_number=812)
    transport.add_route("POST", "/decrypt-payload", HTTPResponse.from_json(
        {"success": True, "decryptedMessage": "ok"},
    ))

    result = asyncio.run(retrieve_from_logs_then_decrypt(
        make_ctx(read_client=read_client),
        RetrieveAndDecryptParams(
            secret_id=42,
            data_id=DATA_ID,
            commitment_contract=APP_CONTRACT,
            stored_at_block=812,
            skip_integrity_check=True,
        ),
    ))

    assert result.success, result.error
    assert [step.id for step in result.plan.steps] == ["fetch_logs", "decrypt"]
    assert read_client.call_requests == []


def test_tampered_log_fails_integrity_and_skips_decrypt(make_ctx, transport):
    log = cifer_data_log(DATA_ID, make_cifer(0x33), MESSAGE, block_number=500)
    read_client = FakeReadClient(
        logs={log.topics[0]: [log]},
        calls={METADATA_SELECTOR: metadata_result(42, 500, make_cifer(0x44), MESSAGE)},
    )

    result = asyncio.run(retrieve_from_logs_then_decrypt(
        make_ctx(read_client=read_client),
        RetrieveAndDecryptParams(secret_id=42, data_id=DATA_ID, commitment_contract=APP_CONTRACT),
    ))

    assert isinstance(result.error, IntegrityError)
    assert result.plan.step("verify_integrity").status is StepStatus.FAILED
    assert result.plan.step("decrypt").status is StepStatus.PENDING
    assert transport.requests == []


def test_missing_log_is_commitment_not_found(make_ctx, transport):
    _, read_client = stored_commitment(block_number=500)

    result = asyncio.run(retrieve_from_logs_then_decrypt(
        make_ctx(read_client=read_client),
        RetrieveAndDecryptParams(
            secret_id=42, data_id=DATA_ID, commitment_contract=APP_CONTRACT, stored_at_block=499,
        ),
    ))

    assert isinstance(result.error, CommitmentNotFoundError)
    assert result.plan.step("fetch_logs").status is StepStatus.FAILED


def test_retrieve_plan_mode(make_ctx):
    result = asyncio.run(retrieve_from_logs_then_decrypt(
        make_ctx(),
        RetrieveAndDecryptParams(
            secret_id=42, data_id=DATA_ID, commitment_contract=APP_CONTRACT, skip_integrity_check=True,
        ),
        FlowOptions(mode=FlowMode.PLAN),
    ))

    assert [step.id for step in result.plan.steps] == ["read_metadata", "fetch_logs", "decrypt"]


def test_integrity_step_type_follows_metadata_source(make_ctx):

    def plan_for(stored_at_block):
        return asyncio.run(retrieve_from_logs_then_decrypt(
            make_ctx(),
            RetrieveAndDecryptParams(
                secret_id=42, data_id=DATA_ID, commitment_contract=APP_CONTRACT, stored_at_block=stored_at_block,
            ),
            FlowOptions(mode=FlowMode.PLAN),
        )).plan

    assert plan_for(None).step("verify_integrity").type is StepType.COMPUTE
    assert plan_for(812).step("verify_integrity").type is StepType.READ
