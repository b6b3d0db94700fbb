# tests/test_file_job_flows.py
"""
File job flows: upload / create_job → poll → download.
"""

import asyncio

from cifer_sdk.errors import FlowError, FlowTimeoutError
from cifer_sdk.flows import (
    DecryptExistingFileParams,
    DecryptFileParams,
    EncryptFileParams,
    FlowMode,
    FlowOptions,
    StepStatus,
    decrypt_existing_file_job_flow,
    decrypt_file_job_flow,
    encrypt_file_job_flow,
)
from cifer_sdk.transport import HTTPResponse

from conftest import CHAIN_ID, job_response


def accepted(job_id):
    return HTTPResponse.from_json({"success": True, "jobId": job_id, "message": "Job created"})


def test_encrypt_file_flow(make_ctx, transport, signer):
    transport.add_route("POST", "/encrypt-file", accepted("enc-1"))
    transport.add_route("GET", "/jobs/enc-1/status", [
        job_response("enc-1", "processing", 30),
        job_response("enc-1", "completed", 100),
    ])
    transport.add_route("POST", "/jobs/enc-1/download", HTTPResponse(200, b"CIFER-BLOB"))

    result = asyncio.run(encrypt_file_job_flow(
        make_ctx(), EncryptFileParams(secret_id=42, file=b"hello file", filename="hello.txt"),
    ))

    assert result.success, result.error
    assert result.data.job_id == "enc-1"
    assert result.data.content == b"CIFER-BLOB"
    assert [step.status for step in result.plan.steps] == [StepStatus.COMPLETED] * 3

    upload = transport.requests_to("/encrypt-file")[0]
    assert upload.data["secretId"] == "42"
    assert upload.files["file"][0] == "hello.txt"
    assert upload.files["file"][1] == b"hello file"
    address = asyncio.run(signer.get_address())
    assert upload.data["data"] == f"{CHAIN_ID}_42_{address}_1000"
    assert transport.requests_to("/download")[0].json == {}


def test_failed_job_carries_error_verbatim(make_ctx, transport):
    transport.add_route("POST", "/encrypt-file", accepted("enc-2"))
    transport.add_route("GET", "/status", job_response("enc-2", "failed", 60, error="Disk quota exceeded"))

    result = asyncio.run(encrypt_file_job_flow(make_ctx(), EncryptFileParams(secret_id=42, file=b"x")))

    assert not result.success
    assert isinstance(result.error, FlowError)
    assert "Disk quota exceeded" in result.error.message
    assert result.error.step_name == "poll"
    assert [step.status for step in result.plan.steps] == [
        StepStatus.COMPLETED, StepStatus.FAILED, StepStatus.PENDING,
    ]
    assert transport.requests_to("/download") == []


def test_expired_job_fails_flow(make_ctx, transport):
    transport.add_route("POST", "/encrypt-file", accepted("enc-3"))
    transport.add_route("GET", "/status", job_response("enc-3", "expired"))

    result = asyncio.run(encrypt_file_job_flow(make_ctx(), EncryptFileParams(secret_id=42, file=b"x")))

    assert not result.success
    assert "expired" in result.error.message


def test_poll_budget_exhausted_is_timeout(make_ctx, transport):
    transport.add_route("POST", "/encrypt-file", accepted("enc-4"))
    transport.add_route("GET", "/status", job_response("enc-4", "processing", 10))

    result = asyncio.run(encrypt_file_job_flow(make_ctx(), EncryptFileParams(secret_id=42, file=b"x")))

    assert isinstance(result.error, FlowTimeoutError)
    assert result.error.step_name == "poll"
    assert len(transport.requests_to("/status")) == 5


def test_decrypt_file_flow_signs_download(make_ctx, transport, signer):
    transport.add_route("POST", "/decrypt-file", accepted("dec-1"))
    transport.add_route("GET", "/status", job_response("dec-1", "completed", 100, job_type="decrypt"))
    transport.add_route("POST", "/jobs/dec-1/download", HTTPResponse(200, b"plaintext"))

    result = asyncio.run(decrypt_file_job_flow(
        make_ctx(), DecryptFileParams(secret_id=42, file=b"CIFER-BLOB"),
    ))

    assert result.success, result.error
    assert result.data.content == b"plaintext"
    body = transport.requests_to("/download")[0].json
    assert body["data"].endswith("_dec-1_download")
    assert body["signature"].startswith("0x")


def test_decrypt_existing_file_flow(make_ctx, transport):
    transport.add_route("POST", "/decrypt-existing-file", accepted("dec-2"))
    transport.add_route("GET", "/status", job_response("dec-2", "completed", 100, job_type="decrypt"))
    transport.add_route("POST", "/download", HTTPResponse(200, b"plaintext"))

    result = asyncio.run(decrypt_existing_file_job_flow(
        make_ctx(), DecryptExistingFileParams(secret_id=42, encrypt_job_id="enc-1"),
    ))

    assert result.success, result.error
    assert [step.id for step in result.plan.steps] == ["create_job", "poll", "download"]
    assert transport.requests_to("/decrypt-existing-file")[0].json["encryptJobId"] == "enc-1"


def test_upload_rejection_fails_first_step(make_ctx, transport):
    transport.add_route(
        "POST", "/encrypt-file", HTTPResponse.from_json({"error": "Secret 42 is syncing"}, 400),
    )

    result = asyncio.run(encrypt_file_job_flow(make_ctx(), EncryptFileParams(secret_id=42, file=b"x")))

    assert not result.success
    assert result.plan.steps[0].status is StepStatus.FAILED
    assert transport.requests_to("/status") == []


def test_file_flow_plan_mode(make_ctx, transport):
    result = asyncio.run(decrypt_file_job_flow(
        make_ctx(), DecryptFileParams(secret_id=42, file=b"x"), FlowOptions(mode=FlowMode.PLAN),
    ))

    assert result.success
    assert [step.id for step in result.plan.steps] == ["upload", "poll", "download"]
    assert transport.requests == []
