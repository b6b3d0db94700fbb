# cifer_sdk/blackbox/files.py
"""
CIFER SDK Blackbox: File Jobs

Files are processed asynchronously. Each call here only submits the job
and returns its id; use jobs.poll_until_complete and jobs.download to
collect the result.

Usage:
    job = await encrypt_file(
        chain_id=752025,
        secret_id=42,
        file=open("report.pdf", "rb"),
        filename="report.pdf",
        signer=signer,
        read_client=read_client,
        blackbox_url=url,
    )
    print(job.job_id)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union, BinaryIO, Dict, Any

from ..adapters.base import SignerAdapter, ReadClient
from ..auth import (
    build_file_operation_data_string,
    sign_data_string,
    with_block_fresh_retry,
    DEFAULT_MAX_RETRIES,
)
from ..common import AbortSignal
from ..errors import EncryptionError, DecryptionError
from ..transport import HTTPTransport, HTTPResponse
from .common import (
    JSON_HEADERS,
    endpoint_url,
    raise_for_response,
    resolve_transport,
    signed_body,
)


ENCRYPT_FILE_PATH = "/encrypt-file"
DECRYPT_FILE_PATH = "/decrypt-file"
DECRYPT_EXISTING_FILE_PATH = "/decrypt-existing-file"

FileInput = Union[bytes, bytearray, BinaryIO]


@dataclass
class FileJobResult:
    """Submitted job handle."""
    job_id: str
    message: str


def read_file_input(file: FileInput) -> bytes:
    if isinstance(file, (bytes, bytearray)):
        return bytes(file)
    return file.read()


def _job_result(response: HTTPResponse, failure: type, failure_message: str) -> FileJobResult:
    result = response.json()
    if not result.get("success"):
        raise failure(failure_message, response.status_code)
    return FileJobResult(job_id=str(result["jobId"]), message=result.get("message", ""))


async def _submit_file(
    path: str,
    failure: type,
    failure_message: str,
    *,
    chain_id: int,
    secret_id: int,
    file: FileInput,
    filename: str,
    signer: SignerAdapter,
    read_client: ReadClient,
    blackbox_url: str,
    transport: Optional[HTTPTransport],
    abort_signal: Optional[AbortSignal],
    max_retries: int,
) -> FileJobResult:
    http = resolve_transport(transport)
    url = endpoint_url(blackbox_url, path)
    content = read_file_input(file)

    async def attempt(get_fresh_block) -> FileJobResult:
        block_number = await get_fresh_block()
        signer_address = await signer.get_address()
        data = build_file_operation_data_string(chain_id, secret_id, signer_address, block_number)
        signed = await sign_data_string(data, signer)

        form: Dict[str, Any] = {
            "secretId": str(secret_id),
            "data": signed.data,
            "signature": signed.signature,
        }
        response = await http.request(
            "POST",
            url,
            data=form,
            files={"file": (filename, content, "application/octet-stream")},
        )
        raise_for_response(response, path)
        return _job_result(response, failure, failure_message)

    return await with_block_fresh_retry(
        attempt, read_client, chain_id, max_retries=max_retries, abort_signal=abort_signal,
    )


async def encrypt_file(
    *,
    chain_id: int,
    secret_id: int,
    file: FileInput,
    signer: SignerAdapter,
    read_client: ReadClient,
    blackbox_url: str,
    filename: str = "file",
    transport: Optional[HTTPTransport] = None,
    abort_signal: Optional[AbortSignal] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> FileJobResult:
    """Submit a file encryption job (multipart POST /encrypt-file)."""
    return await _submit_file(
        ENCRYPT_FILE_PATH,
        EncryptionError,
        "File encryption failed: server returned success=false",
        chain_id=chain_id,
        secret_id=secret_id,
        file=file,
        filename=filename,
        signer=signer,
        read_client=read_client,
        blackbox_url=blackbox_url,
        transport=transport,
        abort_signal=abort_signal,
        max_retries=max_retries,
    )


async def decrypt_file(
    *,
    chain_id: int,
    secret_id: int,
    file: FileInput,
    signer: SignerAdapter,
    read_client: ReadClient,
    blackbox_url: str,
    filename: str = "file.cifer",
    transport: Optional[HTTPTransport] = None,
    abort_signal: Optional[AbortSignal] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> FileJobResult:
    """Submit a decryption job for an uploaded .cifer file."""
    return await _submit_file(
        DECRYPT_FILE_PATH,
        DecryptionError,
        "File decryption failed: server returned success=false",
        chain_id=chain_id,
        secret_id=secret_id,
        file=file,
        filename=filename,
        signer=signer,
        read_client=read_client,
        blackbox_url=blackbox_url,
        transport=transport,
        abort_signal=abort_signal,
        max_retries=max_retries,
    )


async def decrypt_existing_file(
    *,
    chain_id: int,
    secret_id: int,
    encrypt_job_id: str,
    signer: SignerAdapter,
    read_client: ReadClient,
    blackbox_url: str,
    transport: Optional[HTTPTransport] = None,
    abort_signal: Optional[AbortSignal] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> FileJobResult:
    """Decrypt the output of a previous encrypt job without re-uploading it."""
    http = resolve_transport(transport)
    url = endpoint_url(blackbox_url, DECRYPT_EXISTING_FILE_PATH)

    async def attempt(get_fresh_block) -> FileJobResult:
        block_number = await get_fresh_block()
        signer_address = await signer.get_address()
        data = build_file_operation_data_string(chain_id, secret_id, signer_address, block_number)
        signed = await sign_data_string(data, signer)

        response = await http.request(
            "POST",
            url,
            json=signed_body(signed.data, signed.signature, encryptJobId=encrypt_job_id),
            headers=JSON_HEADERS,
        )
        raise_for_response(response, DECRYPT_EXISTING_FILE_PATH)
        return _job_result(
            response, DecryptionError, "Decrypt existing file failed: server returned success=false",
        )

    return await with_block_fresh_retry(
        attempt, read_client, chain_id, max_retries=max_retries, abort_signal=abort_signal,
    )
