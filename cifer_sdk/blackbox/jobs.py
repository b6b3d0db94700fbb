# cifer_sdk/blackbox/jobs.py
"""
CIFER SDK Blackbox: Jobs

Job status, polling, download, deletion and listing.

The poller is a small state machine over JobStatus. pending/processing
are non-terminal; completed/failed/expired are terminal and final. Each
iteration fetches, reports progress, returns on a terminal status, and
otherwise sleeps racing the abort signal.

Usage:
    job = await poll_until_complete(
        job_id,
        blackbox_url,
        interval_ms=2000,
        max_attempts=60,
        on_progress=lambda j: print(j.progress),
    )
    if job.status is JobStatus.COMPLETED:
        blob = await download(job_id, blackbox_url=blackbox_url)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Callable, List
from urllib.parse import quote

from ..adapters.base import SignerAdapter, ReadClient
from ..auth import (
    build_job_download_data_string,
    build_job_delete_data_string,
    build_jobs_list_data_string,
    sign_data_string,
    with_block_fresh_retry,
    DEFAULT_MAX_RETRIES,
)
from ..common import AbortSignal, check_aborted, sleep_with_abort
from ..errors import BlackboxError, JobError, JobTimeoutError
from ..transport import HTTPTransport
from ..types import JobInfo, JobStatus, DataConsumption
from .common import (
    JSON_HEADERS,
    endpoint_url,
    error_message,
    raise_for_response,
    resolve_transport,
    signed_body,
)


logger = logging.getLogger(__name__)


DEFAULT_POLL_INTERVAL_MS = 2000
DEFAULT_POLL_MAX_ATTEMPTS = 60


def _job_path(job_id: str, action: str) -> str:
    return f"/jobs/{quote(job_id, safe='')}/{action}"


def is_job_terminal(job: JobInfo) -> bool:
    return job.status.is_terminal


def _parse_job(raw: Any, endpoint: str) -> JobInfo:
    try:
        return JobInfo.from_dict(raw)
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise BlackboxError(f"Malformed job in response: {e!r}", endpoint=endpoint, cause=e) from e


# =============================================================================
# Status / Polling
# =============================================================================

async def get_status(
    job_id: str,
    blackbox_url: str,
    *,
    transport: Optional[HTTPTransport] = None,
) -> JobInfo:
    """
    Fetch a job's status. No authentication required.

    Raises:
        JobError: If the job does not exist or the service reports failure
        BlackboxError: On other service errors or a malformed job object
    """
    http = resolve_transport(transport)
    path = _job_path(job_id, "status")
    response = await http.request(
        "GET", endpoint_url(blackbox_url, path), headers={"Accept": "application/json"},
    )
    if response.status_code == 404:
        raise JobError(f"Job not found: {job_id}", job_id, 404)
    raise_for_response(response, path)

    body = response.json_or_empty()
    if not isinstance(body, dict) or body.get("success") is False or body.get("job") is None:
        raise JobError(error_message(body, response.status_code), job_id, response.status_code)
    return _parse_job(body["job"], path)


def next_poll_delay(
    interval_ms: float,
    attempt: int,
    backoff_multiplier: float = 1,
    max_interval_ms: Optional[float] = None,
) -> float:
    """Delay before the poll following attempt (1-based)."""
    delay = interval_ms * (backoff_multiplier ** (attempt - 1))
    if max_interval_ms is not None:
        delay = min(delay, max_interval_ms)
    return delay


async def poll_until_complete(
    job_id: str,
    blackbox_url: str,
    *,
    interval_ms: float = DEFAULT_POLL_INTERVAL_MS,
    max_attempts: int = DEFAULT_POLL_MAX_ATTEMPTS,
    backoff_multiplier: float = 1,
    max_interval_ms: Optional[float] = None,
    on_progress: Optional[Callable[[JobInfo], None]] = None,
    abort_signal: Optional[AbortSignal] = None,
    transport: Optional[HTTPTransport] = None,
) -> JobInfo:
    """
    Poll a job until it reaches a terminal status.

    A job that is terminal on the first fetch returns after exactly one
    request. A failed or expired job is returned, not raised; its error
    field is left verbatim for the caller.

    Args:
        job_id: Job to poll
        blackbox_url: Blackbox base URL
        interval_ms: Delay between fetches
        max_attempts: Total fetch budget
        backoff_multiplier: Delay growth factor per attempt (1 = fixed)
        max_interval_ms: Cap on the grown delay
        on_progress: Called with every fetched job, terminal included
        abort_signal: Cancels promptly, including mid-sleep
        transport: HTTP transport

    Returns:
        The terminal JobInfo

    Raises:
        JobTimeoutError: After max_attempts non-terminal fetches
        AbortedError: If the abort signal fires
    """
    attempts = 0
    while True:
        check_aborted(abort_signal, f"Polling of job {job_id} aborted")
        job = await get_status(job_id, blackbox_url, transport=transport)
        if on_progress is not None:
            on_progress(job)

        if job.status.is_terminal:
            logger.debug("Job %s reached %s after %d fetches", job_id, job.status.value, attempts + 1)
            return job

        attempts += 1
        if attempts >= max_attempts:
            raise JobTimeoutError(job_id, max_attempts)

        delay = next_poll_delay(interval_ms, attempts, backoff_multiplier, max_interval_ms)
        logger.debug("Job %s %s (%d%%), next poll in %dms", job_id, job.status.value, job.progress, delay)
        await sleep_with_abort(delay, abort_signal, f"Polling of job {job_id} aborted")


# =============================================================================
# Download / Delete
# =============================================================================

async def download(
    job_id: str,
    *,
    blackbox_url: str,
    chain_id: Optional[int] = None,
    secret_id: Optional[int] = None,
    signer: Optional[SignerAdapter] = None,
    read_client: Optional[ReadClient] = None,
    transport: Optional[HTTPTransport] = None,
    abort_signal: Optional[AbortSignal] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> bytes:
    """
    Download a completed job's output.

    Encrypt jobs download anonymously. Decrypt jobs require chain_id,
    secret_id, signer and read_client; when all four are given the
    request is signed.

    Raises:
        JobError: If the job needs authentication and none was provided
    """
    http = resolve_transport(transport)
    path = _job_path(job_id, "download")
    url = endpoint_url(blackbox_url, path)

    needs_auth = (
        signer is not None
        and read_client is not None
        and chain_id is not None
        and secret_id is not None
    )
    if not needs_auth:
        response = await http.request("POST", url, json={}, headers=JSON_HEADERS)
        if response.status_code == 401:
            raise JobError(
                "Authentication required for decrypt job download. "
                "Provide chain_id, secret_id, signer and read_client.",
                job_id,
                401,
            )
        raise_for_response(response, path)
        return response.content

    async def attempt(get_fresh_block) -> bytes:
        block_number = await get_fresh_block()
        signer_address = await signer.get_address()
        data = build_job_download_data_string(
            chain_id, secret_id, signer_address, block_number, job_id,
        )
        signed = await sign_data_string(data, signer)
        response = await http.request(
            "POST", url, json=signed_body(signed.data, signed.signature), headers=JSON_HEADERS,
        )
        raise_for_response(response, path)
        return response.content

    return await with_block_fresh_retry(
        attempt, read_client, chain_id, max_retries=max_retries, abort_signal=abort_signal,
    )


async def delete_job(
    job_id: str,
    *,
    chain_id: int,
    secret_id: int,
    signer: SignerAdapter,
    read_client: ReadClient,
    blackbox_url: str,
    transport: Optional[HTTPTransport] = None,
    abort_signal: Optional[AbortSignal] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> None:
    """Delete a job and its stored output."""
    http = resolve_transport(transport)
    path = _job_path(job_id, "delete")
    url = endpoint_url(blackbox_url, path)

    async def attempt(get_fresh_block) -> None:
        block_number = await get_fresh_block()
        signer_address = await signer.get_address()
        data = build_job_delete_data_string(
            chain_id, secret_id, signer_address, block_number, job_id,
        )
        signed = await sign_data_string(data, signer)
        response = await http.request(
            "POST", url, json=signed_body(signed.data, signed.signature), headers=JSON_HEADERS,
        )
        raise_for_response(response, path)

    await with_block_fresh_retry(
        attempt, read_client, chain_id, max_retries=max_retries, abort_signal=abort_signal,
    )


# =============================================================================
# Listing / Usage
# =============================================================================

@dataclass
class ListJobsResult:
    jobs: List[JobInfo]
    count: int
    include_expired: bool


async def list_jobs(
    *,
    chain_id: int,
    signer: SignerAdapter,
    read_client: ReadClient,
    blackbox_url: str,
    include_expired: bool = False,
    transport: Optional[HTTPTransport] = None,
    abort_signal: Optional[AbortSignal] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> ListJobsResult:
    """List the signer's jobs."""
    http = resolve_transport(transport)
    url = endpoint_url(blackbox_url, f"/jobs?includeExpired={'true' if include_expired else 'false'}")

    async def attempt(get_fresh_block) -> ListJobsResult:
        block_number = await get_fresh_block()
        signer_address = await signer.get_address()
        data = build_jobs_list_data_string(chain_id, signer_address, block_number)
        signed = await sign_data_string(data, signer)
        response = await http.request(
            "POST", url, json=signed_body(signed.data, signed.signature), headers=JSON_HEADERS,
        )
        raise_for_response(response, "/jobs")
        result = response.json_or_empty()
        if not isinstance(result, dict) or not isinstance(result.get("jobs", []), list):
            raise BlackboxError("Malformed job list in response", response.status_code, "/jobs")
        jobs = [_parse_job(raw, "/jobs") for raw in result.get("jobs", [])]
        return ListJobsResult(
            jobs=jobs,
            count=int(result.get("count", len(jobs))),
            include_expired=bool(result.get("includeExpired", include_expired)),
        )

    return await with_block_fresh_retry(
        attempt, read_client, chain_id, max_retries=max_retries, abort_signal=abort_signal,
    )


async def get_data_consumption(
    *,
    chain_id: int,
    signer: SignerAdapter,
    read_client: ReadClient,
    blackbox_url: str,
    transport: Optional[HTTPTransport] = None,
    abort_signal: Optional[AbortSignal] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> DataConsumption:
    """Encryption/decryption byte usage for the signer's wallet."""
    http = resolve_transport(transport)
    path = "/jobs/dataConsumption"
    url = endpoint_url(blackbox_url, path)

    async def attempt(get_fresh_block) -> DataConsumption:
        block_number = await get_fresh_block()
        signer_address = await signer.get_address()
        data = build_jobs_list_data_string(chain_id, signer_address, block_number)
        signed = await sign_data_string(data, signer)
        response = await http.request(
            "POST", url, json=signed_body(signed.data, signed.signature), headers=JSON_HEADERS,
        )
        raise_for_response(response, path)
        result = response.json_or_empty()
        try:
            return DataConsumption.from_dict(result)
        except (ValueError, TypeError, AttributeError) as e:
            raise BlackboxError(
                f"Malformed data consumption in response: {e!r}", response.status_code, path, e,
            ) from e

    return await with_block_fresh_retry(
        attempt, read_client, chain_id, max_retries=max_retries, abort_signal=abort_signal,
    )
