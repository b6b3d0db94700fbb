# cifer_sdk/flows/create_secret.py
"""
CIFER SDK Flows: Create Secret

Creates a secret on the SecretsController and waits until the enclave
cluster has finished key generation.

    read_fee ──► create_secret_tx ──► wait_sync

Usage:
    result = await create_secret_and_wait_ready(ctx)
    if result.success:
        print(result.data.secret_id, result.data.state.public_key_cid)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common import check_aborted, sleep_with_abort
from ..errors import FlowError, FlowTimeoutError
from ..key_management import (
    ReadParams,
    get_secret_creation_fee,
    get_secret,
    build_create_secret_tx,
    extract_secret_id_from_receipt,
)
from ..types import SecretState
from .engine import StepTracker, run_flow
from .types import FlowContext, FlowOptions, FlowPlan, FlowResult, FlowStep, StepType


FLOW_NAME = "createSecretAndWaitReady"


@dataclass
class CreateSecretResult:
    secret_id: int
    state: SecretState


def create_secret_plan() -> FlowPlan:
    return FlowPlan(
        name=FLOW_NAME,
        description="Create a new CIFER secret and wait for it to be ready",
        steps=[
            FlowStep("read_fee", "Read secret creation fee", StepType.READ),
            FlowStep("create_secret_tx", "Submit createSecret transaction", StepType.TRANSACTION),
            FlowStep("wait_sync", "Wait for key generation to finish", StepType.POLL),
        ],
        estimated_duration_ms=60000,
    )


async def create_secret_and_wait_ready(
    ctx: FlowContext,
    options: Optional[FlowOptions] = None,
) -> FlowResult:
    """
    Create a secret and wait until it is no longer syncing.

    Requires ctx.tx_executor and ctx.controller_address in execute mode.

    Returns:
        FlowResult[CreateSecretResult] with the createSecret receipt
    """
    plan = create_secret_plan()

    async def body(tracker: StepTracker) -> CreateSecretResult:
        params = ReadParams(
            chain_id=ctx.chain_id,
            controller_address=ctx.controller_address,
            read_client=ctx.read_client,
        )

        with tracker.step("read_fee") as step:
            fee = await get_secret_creation_fee(params)
            step.result = fee
        ctx.log.info("Secret creation fee: %d wei", fee)

        with tracker.step("create_secret_tx") as step:
            intent = build_create_secret_tx(ctx.chain_id, ctx.controller_address, fee)
            step.tx_intent = intent
            tracker.notify(step)

            submitted = await ctx.tx_executor(intent)
            ctx.log.info("createSecret submitted: %s", submitted.hash)
            receipt = await submitted.wait_receipt()
            tracker.receipts.append(receipt)
            if receipt.status != 1:
                raise FlowError(
                    f"Create secret transaction failed: {receipt.transaction_hash}",
                    FLOW_NAME,
                    "create_secret_tx",
                )
            secret_id = extract_secret_id_from_receipt(receipt.logs)
            step.result = {"secret_id": secret_id, "receipt": receipt}

        with tracker.step("wait_sync") as step:
            polling = ctx.polling
            for attempt in range(1, polling.max_attempts + 1):
                check_aborted(ctx.abort_signal, f"Flow {FLOW_NAME} aborted")
                state = await get_secret(params, secret_id)
                if not state.is_syncing:
                    break
                ctx.log.debug("Secret %d still syncing (attempt %d)", secret_id, attempt)
                if attempt < polling.max_attempts:
                    await sleep_with_abort(
                        polling.interval_ms, ctx.abort_signal, f"Flow {FLOW_NAME} aborted",
                    )
            else:
                raise FlowTimeoutError(FLOW_NAME, polling.budget_ms, "wait_sync")
            step.result = state

        ctx.log.info("Secret %d is ready", secret_id)
        return CreateSecretResult(secret_id=secret_id, state=state)

    return await run_flow(
        ctx, plan, body, options, requires_tx_executor=True, requires_controller=True,
    )
