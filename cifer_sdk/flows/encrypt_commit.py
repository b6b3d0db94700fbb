# cifer_sdk/flows/encrypt_commit.py
"""
CIFER SDK Flows: Encrypt Then Commit

Encrypts a short message and prepares (does not send) the transaction
that stores it on an application contract.

    encrypt ──► validate ──► build_tx

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..blackbox import encrypt_payload
from ..commitments import (
    StoreFunction,
    StoreCommitmentArgs,
    COMMON_STORE_FUNCTIONS,
    build_store_commitment_tx,
    validate_for_storage,
)
from ..types import Address, Bytes32, Hex, TxIntentWithMeta
from .engine import StepTracker, run_flow
from .types import FlowContext, FlowOptions, FlowPlan, FlowResult, FlowStep, StepType


DEFAULT_STORE_FUNCTION = COMMON_STORE_FUNCTIONS["storeWithKey"]


@dataclass
class EncryptThenCommitParams:
    secret_id: int
    plaintext: str
    key: Bytes32
    commitment_contract: Address
    store_function: Optional[StoreFunction] = None


@dataclass
class EncryptThenCommitResult:
    cifer: Hex
    encrypted_message: Hex
    tx_intent: TxIntentWithMeta


def encrypt_commit_plan() -> FlowPlan:
    return FlowPlan(
        name="encryptThenPrepareCommitTx",
        description="Encrypt data and prepare a transaction to store it on-chain",
        steps=[
            FlowStep("encrypt", "Encrypt plaintext via blackbox", StepType.API_CALL),
            FlowStep("validate", "Validate encrypted data sizes", StepType.COMPUTE),
            FlowStep("build_tx", "Build store commitment transaction", StepType.COMPUTE),
        ],
        estimated_duration_ms=5000,
    )


async def encrypt_then_prepare_commit_tx(
    ctx: FlowContext,
    params: EncryptThenCommitParams,
    options: Optional[FlowOptions] = None,
) -> FlowResult:
    """
    Encrypt params.plaintext and build the store transaction.

    The returned TxIntent is for the caller's wallet; this flow never
    broadcasts, so no tx_executor is needed.

    Returns:
        FlowResult[EncryptThenCommitResult]
    """
    plan = encrypt_commit_plan()

    async def body(tracker: StepTracker) -> EncryptThenCommitResult:
        with tracker.step("encrypt") as step:
            encrypted = await encrypt_payload(
                chain_id=ctx.chain_id,
                secret_id=params.secret_id,
                plaintext=params.plaintext,
                signer=ctx.signer,
                read_client=ctx.read_client,
                blackbox_url=ctx.blackbox_url,
                output_format="hex",
                transport=ctx.transport,
                abort_signal=ctx.abort_signal,
            )
            step.result = encrypted

        with tracker.step("validate"):
            validate_for_storage(encrypted.cifer, encrypted.encrypted_message)

        with tracker.step("build_tx") as step:
            intent = build_store_commitment_tx(
                chain_id=ctx.chain_id,
                contract_address=params.commitment_contract,
                store_function=params.store_function or DEFAULT_STORE_FUNCTION,
                args=StoreCommitmentArgs(
                    key=params.key,
                    secret_id=params.secret_id,
                    encrypted_message=encrypted.encrypted_message,
                    cifer=encrypted.cifer,
                ),
                validate=False,
            )
            step.tx_intent = intent
            step.result = intent
        ctx.log.info("Store transaction prepared for %s", params.commitment_contract)

        return EncryptThenCommitResult(
            cifer=encrypted.cifer,
            encrypted_message=encrypted.encrypted_message,
            tx_intent=intent,
        )

    return await run_flow(ctx, plan, body, options)
