# cifer_sdk/blackbox/payload.py
"""
CIFER SDK Blackbox: Payload Encryption

Short messages are encrypted and decrypted synchronously by the Blackbox.
The result is a fixed-size cifer (KEM envelope) plus the symmetric
ciphertext, ready to be committed on chain.

Usage:
    result = await encrypt_payload(
        chain_id=752025,
        secret_id=42,
        plaintext="hello",
        signer=signer,
        read_client=read_client,
        blackbox_url="https://blackbox.example",
    )
    plain = await decrypt_payload(
        chain_id=752025,
        secret_id=42,
        encrypted_message=result.encrypted_message,
        cifer=result.cifer,
        signer=signer,
        read_client=read_client,
        blackbox_url="https://blackbox.example",
    )

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..adapters.base import SignerAdapter, ReadClient
from ..auth import (
    build_encrypt_payload_data_string,
    build_decrypt_payload_data_string,
    sign_data_string,
    with_block_fresh_retry,
    DEFAULT_MAX_RETRIES,
)
from ..common import AbortSignal
from ..errors import EncryptionError, DecryptionError
from ..transport import HTTPTransport
from .common import (
    JSON_HEADERS,
    endpoint_url,
    raise_for_response,
    resolve_transport,
    signed_body,
)


ENCRYPT_PAYLOAD_PATH = "/encrypt-payload"
DECRYPT_PAYLOAD_PATH = "/decrypt-payload"


@dataclass
class EncryptPayloadResult:
    cifer: str
    encrypted_message: str
    chain_id: int
    secret_id: int
    output_format: str


@dataclass
class DecryptPayloadResult:
    decrypted_message: str


async def encrypt_payload(
    *,
    chain_id: int,
    secret_id: int,
    plaintext: str,
    signer: SignerAdapter,
    read_client: ReadClient,
    blackbox_url: str,
    output_format: str = "hex",
    transport: Optional[HTTPTransport] = None,
    abort_signal: Optional[AbortSignal] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> EncryptPayloadResult:
    """
    Encrypt a plaintext under a secret.

    Args:
        output_format: "hex" or "base64"

    Raises:
        EncryptionError: If the service reports success=false
        BlockStaleError: If freshness retries are exhausted
        BlackboxError: On other service errors
    """
    http = resolve_transport(transport)
    url = endpoint_url(blackbox_url, ENCRYPT_PAYLOAD_PATH)

    async def attempt(get_fresh_block) -> EncryptPayloadResult:
        block_number = await get_fresh_block()
        signer_address = await signer.get_address()
        data = build_encrypt_payload_data_string(
            chain_id, secret_id, signer_address, block_number, plaintext,
        )
        signed = await sign_data_string(data, signer)

        response = await http.request(
            "POST",
            url,
            json=signed_body(signed.data, signed.signature, outputFormat=output_format),
            headers=JSON_HEADERS,
        )
        raise_for_response(response, ENCRYPT_PAYLOAD_PATH)

        result = response.json()
        if not result.get("success"):
            raise EncryptionError("Encryption failed: server returned success=false", response.status_code)

        return EncryptPayloadResult(
            cifer=result["cifer"],
            encrypted_message=result["encryptedMessage"],
            chain_id=int(result.get("chainId", chain_id)),
            secret_id=int(result.get("secretId", secret_id)),
            output_format=result.get("outputFormat", output_format),
        )

    return await with_block_fresh_retry(
        attempt, read_client, chain_id, max_retries=max_retries, abort_signal=abort_signal,
    )


async def decrypt_payload(
    *,
    chain_id: int,
    secret_id: int,
    encrypted_message: str,
    cifer: str,
    signer: SignerAdapter,
    read_client: ReadClient,
    blackbox_url: str,
    input_format: str = "hex",
    transport: Optional[HTTPTransport] = None,
    abort_signal: Optional[AbortSignal] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> DecryptPayloadResult:
    """
    Decrypt a cifer + encrypted message pair.

    The signature covers the encrypted message, so only the owner or
    delegate of the secret can decrypt.

    Raises:
        DecryptionError: If the service reports success=false
    """
    http = resolve_transport(transport)
    url = endpoint_url(blackbox_url, DECRYPT_PAYLOAD_PATH)

    async def attempt(get_fresh_block) -> DecryptPayloadResult:
        block_number = await get_fresh_block()
        signer_address = await signer.get_address()
        data = build_decrypt_payload_data_string(
            chain_id, secret_id, signer_address, block_number, encrypted_message,
        )
        signed = await sign_data_string(data, signer)

        response = await http.request(
            "POST",
            url,
            json=signed_body(signed.data, signed.signature, cifer=cifer, inputFormat=input_format),
            headers=JSON_HEADERS,
        )
        raise_for_response(response, DECRYPT_PAYLOAD_PATH)

        result = response.json()
        if not result.get("success"):
            raise DecryptionError("Decryption failed: server returned success=false", response.status_code)

        return DecryptPayloadResult(decrypted_message=result["decryptedMessage"])

    return await with_block_fresh_retry(
        attempt, read_client, chain_id, max_retries=max_retries, abort_signal=abort_signal,
    )
