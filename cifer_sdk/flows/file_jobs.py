# cifer_sdk/flows/file_jobs.py
"""
CIFER SDK Flows: File Jobs

Submit a Blackbox file job, wait for it, download the output.

    upload / create_job ──► poll ──► download

Encrypt job output downloads anonymously. Decrypt job output is only
released to a signed request, so the decrypt flows sign the download.

Usage:
    result = await encrypt_file_job_flow(
        ctx, EncryptFileParams(secret_id=42, file=open("a.pdf", "rb"), filename="a.pdf"),
    )
    if result.success:
        Path("a.pdf.cifer").write_bytes(result.data.content)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..blackbox import (
    encrypt_file,
    decrypt_file,
    decrypt_existing_file,
    poll_until_complete,
    download,
    FileJobResult,
)
from ..blackbox.files import FileInput
from ..errors import FlowError
from ..types import JobInfo, JobStatus
from .engine import StepTracker, run_flow
from .types import FlowContext, FlowOptions, FlowPlan, FlowResult, FlowStep, StepType


# =============================================================================
# Params / Results
# =============================================================================

@dataclass
class EncryptFileParams:
    secret_id: int
    file: FileInput
    filename: str = "file"


@dataclass
class DecryptFileParams:
    secret_id: int
    file: FileInput
    filename: str = "file.cifer"


@dataclass
class DecryptExistingFileParams:
    secret_id: int
    encrypt_job_id: str


@dataclass
class FileJobFlowResult:
    """Completed job and its downloaded output."""
    job_id: str
    job: JobInfo
    content: bytes


# =============================================================================
# Plans
# =============================================================================

def _file_job_plan(name: str, description: str, submit_id: str, submit_desc: str, noun: str) -> FlowPlan:
    return FlowPlan(
        name=name,
        description=description,
        steps=[
            FlowStep(submit_id, submit_desc, StepType.API_CALL),
            FlowStep("poll", f"Wait for {noun} to complete", StepType.POLL),
            FlowStep("download", f"Download {noun} result", StepType.API_CALL),
        ],
    )


def encrypt_file_plan() -> FlowPlan:
    return _file_job_plan(
        "encryptFileJobFlow",
        "Encrypt a file and download the encrypted result",
        "upload",
        "Upload file for encryption",
        "encryption",
    )


def decrypt_file_plan() -> FlowPlan:
    return _file_job_plan(
        "decryptFileJobFlow",
        "Decrypt a .cifer file and download the plaintext",
        "upload",
        "Upload encrypted file for decryption",
        "decryption",
    )


def decrypt_existing_file_plan() -> FlowPlan:
    return _file_job_plan(
        "decryptExistingFileJobFlow",
        "Decrypt the output of an earlier encrypt job and download the plaintext",
        "create_job",
        "Create decrypt job from the encrypt job",
        "decryption",
    )


# =============================================================================
# Shared Steps
# =============================================================================

async def _wait_for_job(
    ctx: FlowContext,
    tracker: StepTracker,
    submitted: FileJobResult,
    job_kind: str,
) -> JobInfo:
    polling = ctx.polling
    log = ctx.log

    def report(job: JobInfo) -> None:
        log.debug("Job %s %s: %d%%", job.id, job.status.value, job.progress)

    with tracker.step("poll") as step:
        job = await poll_until_complete(
            submitted.job_id,
            ctx.blackbox_url,
            interval_ms=polling.interval_ms,
            max_attempts=polling.max_attempts,
            backoff_multiplier=polling.backoff_multiplier,
            max_interval_ms=polling.max_interval_ms,
            on_progress=report,
            abort_signal=ctx.abort_signal,
            transport=ctx.transport,
        )
        if job.status is not JobStatus.COMPLETED:
            message = f"{job_kind} job {job.status.value}"
            if job.error:
                message = f"{message}: {job.error}"
            raise FlowError(message, tracker.plan.name, "poll")
        step.result = job
    return job


async def _download_output(
    ctx: FlowContext,
    tracker: StepTracker,
    job_id: str,
    secret_id: Optional[int],
) -> bytes:
    with tracker.step("download") as step:
        if secret_id is None:
            content = await download(job_id, blackbox_url=ctx.blackbox_url, transport=ctx.transport)
        else:
            content = await download(
                job_id,
                blackbox_url=ctx.blackbox_url,
                chain_id=ctx.chain_id,
                secret_id=secret_id,
                signer=ctx.signer,
                read_client=ctx.read_client,
                transport=ctx.transport,
                abort_signal=ctx.abort_signal,
            )
        step.result = {"size": len(content)}
    ctx.log.info("Downloaded %d bytes for job %s", len(content), job_id)
    return content


# =============================================================================
# Flows
# =============================================================================

async def encrypt_file_job_flow(
    ctx: FlowContext,
    params: EncryptFileParams,
    options: Optional[FlowOptions] = None,
) -> FlowResult:
    """Encrypt a file through a Blackbox job and download the .cifer output."""
    plan = encrypt_file_plan()

    async def body(tracker: StepTracker) -> FileJobFlowResult:
        with tracker.step("upload") as step:
            submitted = await encrypt_file(
                chain_id=ctx.chain_id,
                secret_id=params.secret_id,
                file=params.file,
                filename=params.filename,
                signer=ctx.signer,
                read_client=ctx.read_client,
                blackbox_url=ctx.blackbox_url,
                transport=ctx.transport,
                abort_signal=ctx.abort_signal,
            )
            step.result = submitted
        ctx.log.info("Encrypt job started: %s", submitted.job_id)

        job = await _wait_for_job(ctx, tracker, submitted, "Encryption")
        content = await _download_output(ctx, tracker, submitted.job_id, None)
        return FileJobFlowResult(job_id=submitted.job_id, job=job, content=content)

    return await run_flow(ctx, plan, body, options)


async def decrypt_file_job_flow(
    ctx: FlowContext,
    params: DecryptFileParams,
    options: Optional[FlowOptions] = None,
) -> FlowResult:
    """Decrypt an uploaded .cifer file and download the plaintext (signed)."""
    plan = decrypt_file_plan()

    async def body(tracker: StepTracker) -> FileJobFlowResult:
        with tracker.step("upload") as step:
            submitted = await decrypt_file(
                chain_id=ctx.chain_id,
                secret_id=params.secret_id,
                file=params.file,
                filename=params.filename,
                signer=ctx.signer,
                read_client=ctx.read_client,
                blackbox_url=ctx.blackbox_url,
                transport=ctx.transport,
                abort_signal=ctx.abort_signal,
            )
            step.result = submitted
        ctx.log.info("Decrypt job started: %s", submitted.job_id)

        job = await _wait_for_job(ctx, tracker, submitted, "Decryption")
        content = await _download_output(ctx, tracker, submitted.job_id, params.secret_id)
        return FileJobFlowResult(job_id=submitted.job_id, job=job, content=content)

    return await run_flow(ctx, plan, body, options)


async def decrypt_existing_file_job_flow(
    ctx: FlowContext,
    params: DecryptExistingFileParams,
    options: Optional[FlowOptions] = None,
) -> FlowResult:
    """Decrypt a previous encrypt job's output without re-uploading it."""
    plan = decrypt_existing_file_plan()

    async def body(tracker: StepTracker) -> FileJobFlowResult:
        with tracker.step("create_job") as step:
            submitted = await decrypt_existing_file(
                chain_id=ctx.chain_id,
                secret_id=params.secret_id,
                encrypt_job_id=params.encrypt_job_id,
                signer=ctx.signer,
                read_client=ctx.read_client,
                blackbox_url=ctx.blackbox_url,
                transport=ctx.transport,
                abort_signal=ctx.abort_signal,
            )
            step.result = submitted
        ctx.log.info(
            "Decrypt job %s started from encrypt job %s", submitted.job_id, params.encrypt_job_id,
        )

        job = await _wait_for_job(ctx, tracker, submitted, "Decryption")
        content = await _download_output(ctx, tracker, submitted.job_id, params.secret_id)
        return FileJobFlowResult(job_id=submitted.job_id, job=job, content=content)

    return await run_flow(ctx, plan, body, options)
