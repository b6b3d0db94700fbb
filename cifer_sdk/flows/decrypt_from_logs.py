# cifer_sdk/flows/decrypt_from_logs.py
"""
CIFER SDK Flows: Retrieve From Logs Then Decrypt

    [read_metadata] ──► fetch_logs ──► [verify_integrity] ──► decrypt

read_metadata is planned only when stored_at_block is unknown;
verify_integrity is dropped when skip_integrity_check is set, and is a
READ step when stored_at_block is known since it then fetches the metadata.

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..blackbox import decrypt_payload
from ..commitments import (
    CommitmentReadParams,
    get_cifer_metadata,
    fetch_commitment_from_logs,
    assert_commitment_integrity,
)
from ..types import Address, Bytes32, CIFERMetadata
from .engine import StepTracker, run_flow
from .types import FlowContext, FlowOptions, FlowPlan, FlowResult, FlowStep, StepType


@dataclass
class RetrieveAndDecryptParams:
    secret_id: int
    data_id: Bytes32
    commitment_contract: Address
    stored_at_block: Optional[int] = None
    skip_integrity_check: bool = False


@dataclass
class RetrieveAndDecryptResult:
    decrypted_message: str
    secret_id: int
    stored_at_block: int


def decrypt_from_logs_plan(params: RetrieveAndDecryptParams) -> FlowPlan:
    steps = []
    if not params.stored_at_block:
        steps.append(FlowStep("read_metadata", "Read commitment metadata", StepType.READ))
    steps.append(FlowStep("fetch_logs", "Fetch encrypted data from logs", StepType.READ))
    if not params.skip_integrity_check:
        if params.stored_at_block:
            steps.append(FlowStep("verify_integrity", "Read metadata and verify data integrity", StepType.READ))
        else:
            steps.append(FlowStep("verify_integrity", "Verify data integrity", StepType.COMPUTE))
    steps.append(FlowStep("decrypt", "Decrypt data via blackbox", StepType.API_CALL))

    return FlowPlan(
        name="retrieveFromLogsThenDecrypt",
        description="Retrieve encrypted data from on-chain logs and decrypt it",
        steps=steps,
        estimated_duration_ms=10000,
    )


async def retrieve_from_logs_then_decrypt(
    ctx: FlowContext,
    params: RetrieveAndDecryptParams,
    options: Optional[FlowOptions] = None,
) -> FlowResult:
    """
    Recover a commitment from its event log and decrypt it.

    Returns:
        FlowResult[RetrieveAndDecryptResult]
    """
    plan = decrypt_from_logs_plan(params)
    read_params = CommitmentReadParams(
        chain_id=ctx.chain_id,
        contract_address=params.commitment_contract,
        read_client=ctx.read_client,
    )

    async def body(tracker: StepTracker) -> RetrieveAndDecryptResult:
        stored_at_block = params.stored_at_block
        metadata: Optional[CIFERMetadata] = None

        if not stored_at_block:
            with tracker.step("read_metadata") as step:
                metadata = await get_cifer_metadata(read_params, params.data_id)
                stored_at_block = metadata.stored_at_block
                step.result = metadata
            ctx.log.info("Commitment %s stored at block %d", params.data_id, stored_at_block)

        with tracker.step("fetch_logs") as step:
            commitment = await fetch_commitment_from_logs(
                chain_id=ctx.chain_id,
                contract_address=params.commitment_contract,
                data_id=params.data_id,
                stored_at_block=stored_at_block,
                read_client=ctx.read_client,
            )
            step.result = commitment

        if not params.skip_integrity_check:
            with tracker.step("verify_integrity"):
                if metadata is None:
                    metadata = await get_cifer_metadata(read_params, params.data_id)
                assert_commitment_integrity(commitment, metadata)
            ctx.log.debug("Integrity verified for %s", params.data_id)

        with tracker.step("decrypt") as step:
            decrypted = await decrypt_payload(
                chain_id=ctx.chain_id,
                secret_id=params.secret_id,
                encrypted_message=commitment.encrypted_message,
                cifer=commitment.cifer,
                signer=ctx.signer,
                read_client=ctx.read_client,
                blackbox_url=ctx.blackbox_url,
                input_format="hex",
                transport=ctx.transport,
                abort_signal=ctx.abort_signal,
            )
            step.result = decrypted

        return RetrieveAndDecryptResult(
            decrypted_message=decrypted.decrypted_message,
            secret_id=params.secret_id,
            stored_at_block=stored_at_block,
        )

    return await run_flow(ctx, plan, body, options)
