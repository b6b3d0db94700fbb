# cifer_sdk/auth/data_string.py
"""
CIFER SDK Auth: Data Strings

The Blackbox authenticates a request by the signature over an
underscore-joined string:

    chainId_secretId_signer_blockNumber[_payload...]

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from typing import Iterable, Union


def build_data_string(parts: Iterable[Union[str, int]]) -> str:
    return "_".join(str(part) for part in parts)


def build_encrypt_payload_data_string(
    chain_id: int, secret_id: int, signer: str, block_number: int, plaintext: str,
) -> str:
    return build_data_string([chain_id, secret_id, signer, block_number, plaintext])


def build_decrypt_payload_data_string(
    chain_id: int, secret_id: int, signer: str, block_number: int, encrypted_message: str,
) -> str:
    return build_data_string([chain_id, secret_id, signer, block_number, encrypted_message])


def build_file_operation_data_string(
    chain_id: int, secret_id: int, signer: str, block_number: int,
) -> str:
    """Used for encrypt-file, decrypt-file and decrypt-existing-file."""
    return build_data_string([chain_id, secret_id, signer, block_number])


def build_job_download_data_string(
    chain_id: int, secret_id: int, signer: str, block_number: int, job_id: str,
) -> str:
    return build_data_string([chain_id, secret_id, signer, block_number, job_id, "download"])


def build_job_delete_data_string(
    chain_id: int, secret_id: int, signer: str, block_number: int, job_id: str,
) -> str:
    return build_data_string([chain_id, secret_id, signer, block_number, job_id, "delete"])


def build_jobs_list_data_string(chain_id: int, signer: str, block_number: int) -> str:
    """Jobs list and data consumption; the server ignores the secret id slot."""
    return build_data_string([chain_id, 0, signer, block_number])
