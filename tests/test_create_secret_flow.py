# tests/test_create_secret_flow.py
"""
create_secret_and_wait_ready: read_fee → create_secret_tx → wait_sync.
"""

import asyncio

from cifer_sdk.abi import secrets_controller
from cifer_sdk.errors import ConfigError, FlowAbortedError, FlowError, FlowTimeoutError
from cifer_sdk.flows import (
    FlowMode,
    FlowOptions,
    StepStatus,
    StepType,
    create_secret_and_wait_ready,
)

from conftest import (
    CHAIN_ID,
    CONTROLLER,
    FakeReadClient,
    FakeTxExecutor,
    abi_result,
    receipt,
    secret_created_log,
    secret_state_result,
    selector,
)


FEE_SELECTOR = selector(secrets_controller.SECRET_CREATION_FEE)
STATE_SELECTOR = selector(secrets_controller.GET_SECRET_STATE)


def controller_reads(*states):
    return FakeReadClient(calls={
        FEE_SELECTOR: abi_result(["uint256"], [1000]),
        STATE_SELECTOR: [secret_state_result(syncing) for syncing in states],
    })


def test_plan_mode_lists_steps_without_calls(make_ctx):
    read_client = controller_reads(False)
    executor = FakeTxExecutor(receipt())

    result = asyncio.run(create_secret_and_wait_ready(
        make_ctx(read_client=read_client, tx_executor=executor),
        FlowOptions(mode=FlowMode.PLAN),
    ))

    assert result.success
    assert [step.id for step in result.plan.steps] == ["read_fee", "create_secret_tx", "wait_sync"]
    assert [step.type for step in result.plan.steps] == [StepType.READ, StepType.TRANSACTION, StepType.POLL]
    assert read_client.call_requests == []
    assert executor.intents == []


def test_creates_secret_and_waits_until_synced(make_ctx):
    read_client = controller_reads(True, True, False)
    executor = FakeTxExecutor(receipt(logs=[secret_created_log(42)]))
    progress = []

    result = asyncio.run(create_secret_and_wait_ready(
        make_ctx(read_client=read_client, tx_executor=executor),
        FlowOptions(on_step_progress=lambda step: progress.append((step.id, step.status))),
    ))

    assert result.success, result.error
    assert result.data.secret_id == 42
    assert result.data.state.is_syncing is False
    assert result.data.state.public_key_cid == "bafkreipk"
    assert len(result.receipts) == 1

    intent = executor.intents[0]
    assert intent.value == 1000
    assert intent.to == CONTROLLER
    assert intent.chain_id == CHAIN_ID
    assert intent.data == selector(secrets_controller.CREATE_SECRET)

    state_reads = [r for r in read_client.call_requests if r.data.startswith(STATE_SELECTOR)]
    assert len(state_reads) == 3
    assert all(step.status is StepStatus.COMPLETED for step in result.plan.steps)
    assert ("create_secret_tx", StepStatus.IN_PROGRESS) in progress
    assert result.plan.steps[1].tx_intent is intent


def test_reverted_transaction_fails_flow(make_ctx):
    executor = FakeTxExecutor(receipt(status=0))

    result = asyncio.run(create_secret_and_wait_ready(
        make_ctx(read_client=controller_reads(False), tx_executor=executor),
    ))

    assert not result.success
    assert isinstance(result.error, FlowError)
    assert result.error.step_name == "create_secret_tx"
    assert result.plan.steps[1].status is StepStatus.FAILED
    assert result.plan.steps[2].status is StepStatus.PENDING
    assert len(result.receipts) == 1


def test_receipt_without_secret_created_event_fails(make_ctx):
    executor = FakeTxExecutor(receipt(logs=[]))

    result = asyncio.run(create_secret_and_wait_ready(
        make_ctx(read_client=controller_reads(False), tx_executor=executor),
    ))

    assert not result.success
    assert "SecretCreated" in str(result.error)


def test_secret_that_never_syncs_times_out(make_ctx):
    executor = FakeTxExecutor(receipt(logs=[secret_created_log(7)]))

    result = asyncio.run(create_secret_and_wait_ready(
        make_ctx(read_client=controller_reads(True), tx_executor=executor),
    ))

    assert not result.success
    assert isinstance(result.error, FlowTimeoutError)
    assert result.error.step_name == "wait_sync"
    assert result.plan.steps[2].status is StepStatus.FAILED


def test_abort_while_waiting_for_sync(make_ctx):
    executor = FakeTxExecutor(receipt(logs=[secret_created_log(7)]))

    async def scenario():
        abort = asyncio.Event()
        read_client = controller_reads(True)
        original_call = read_client.call

        async def call_then_abort(chain_id, request):
            if request.data.startswith(STATE_SELECTOR):
                abort.set()
            return await original_call(chain_id, request)

        read_client.call = call_then_abort
        return await create_secret_and_wait_ready(
            make_ctx(read_client=read_client, tx_executor=executor, abort_signal=abort),
        )

    result = asyncio.run(scenario())

    assert isinstance(result.error, FlowAbortedError)
    assert result.error.step_name == "wait_sync"


def test_requires_tx_executor(make_ctx):
    result = asyncio.run(create_secret_and_wait_ready(make_ctx(read_client=controller_reads(False))))

    assert not result.success
    assert isinstance(result.error, ConfigError)
    assert all(step.status is StepStatus.PENDING for step in result.plan.steps)
