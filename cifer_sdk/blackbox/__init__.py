# cifer_sdk/blackbox/__init__.py
"""
CIFER SDK Blackbox Client

Authenticated calls to the remote encryption service:
    payload  - synchronous encrypt/decrypt of short messages
    files    - asynchronous file encryption/decryption jobs
    jobs     - status, polling, download, delete, listing

Updated: 2025-01-20
Version: 0.1.0
"""

from . import payload
from . import files
from . import jobs

from .common import parse_blackbox_error_response

from .payload import (
    encrypt_payload,
    decrypt_payload,
    EncryptPayloadResult,
    DecryptPayloadResult,
)

from .files import (
    encrypt_file,
    decrypt_file,
    decrypt_existing_file,
    FileJobResult,
)

from .jobs import (
    get_status,
    poll_until_complete,
    download,
    delete_job,
    list_jobs,
    get_data_consumption,
    is_job_terminal,
    ListJobsResult,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_POLL_MAX_ATTEMPTS,
)


__all__ = [
    "payload",
    "files",
    "jobs",
    "parse_blackbox_error_response",
    # Payload
    "encrypt_payload",
    "decrypt_payload",
    "EncryptPayloadResult",
    "DecryptPayloadResult",
    # Files
    "encrypt_file",
    "decrypt_file",
    "decrypt_existing_file",
    "FileJobResult",
    # Jobs
    "get_status",
    "poll_until_complete",
    "download",
    "delete_job",
    "list_jobs",
    "get_data_consumption",
    "is_job_terminal",
    "ListJobsResult",
    "DEFAULT_POLL_INTERVAL_MS",
    "DEFAULT_POLL_MAX_ATTEMPTS",
]
