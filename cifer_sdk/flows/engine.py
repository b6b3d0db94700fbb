# cifer_sdk/flows/engine.py
"""
CIFER SDK Flows: Engine

Runs a flow body against its plan. The body drives steps through a
StepTracker; the engine owns everything around it:

    plan mode     → return the plan, touch nothing
    execute mode  → validate context → body(tracker) → FlowResult

Any exception escaping the body is recorded on the step in progress and
returned as FlowResult.error. Flow invocations never raise. A body that
returns None is a programming error in the flow, not a step failure: the
result carries a FlowError with no step_name and the plan's step
statuses are left as the body set them.

Usage:
    async def body(tracker: StepTracker) -> int:
        with tracker.step("read_fee") as step:
            step.result = await get_secret_creation_fee(params)
        return step.result

    result = await run_flow(ctx, plan, body, options)

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Optional, Any, Awaitable, Callable, Iterator, List

from ..common import AbortSignal, check_aborted
from ..errors import (
    AbortedError,
    ConfigError,
    FlowError,
    FlowAbortedError,
    FlowTimeoutError,
    JobTimeoutError,
)
from ..types import TransactionReceipt
from .types import (
    FlowContext,
    FlowMode,
    FlowOptions,
    FlowPlan,
    FlowResult,
    FlowStep,
    StepStatus,
    validate_execution_context,
)


# =============================================================================
# Step Tracker
# =============================================================================

class StepTracker:
    """
    Drives plan.steps through their lifecycle and reports every change.

    Only one step may be in progress at a time; begin() on a second step
    while another is running is a programming error.
    """

    def __init__(
        self,
        plan: FlowPlan,
        on_step_progress: Optional[Callable[[FlowStep], None]] = None,
        abort_signal: Optional[AbortSignal] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.plan = plan
        self.on_step_progress = on_step_progress
        self.abort_signal = abort_signal
        self.logger = logger or logging.getLogger("cifer_sdk.flows")
        self.receipts: List[TransactionReceipt] = []

    @property
    def current(self) -> Optional[FlowStep]:
        """The step in progress, if any."""
        for step in self.plan.steps:
            if step.status is StepStatus.IN_PROGRESS:
                return step
        return None

    def notify(self, step: FlowStep) -> None:
        if self.on_step_progress is not None:
            self.on_step_progress(step)

    def begin(self, step_id: str) -> FlowStep:
        """
        Mark a step in progress.

        The abort signal is checked after the transition so a cancelled
        flow fails on the step it was about to run.
        """
        running = self.current
        if running is not None:
            raise FlowError(
                f"Cannot start step {step_id} while {running.id} is in progress",
                self.plan.name,
                running.id,
            )
        step = self.plan.step(step_id)
        step.transition(StepStatus.IN_PROGRESS)
        self.logger.debug("[%s] %s: %s", self.plan.name, step.id, step.description)
        self.notify(step)
        check_aborted(self.abort_signal, f"Flow {self.plan.name} aborted")
        return step

    def complete(self, step_id: str, result: Any = None) -> FlowStep:
        step = self.plan.step(step_id)
        if result is not None:
            step.result = result
        step.transition(StepStatus.COMPLETED)
        self.notify(step)
        return step

    def skip(self, step_id: str) -> FlowStep:
        step = self.plan.step(step_id)
        step.transition(StepStatus.SKIPPED)
        self.notify(step)
        return step

    def fail(self, error: BaseException) -> Optional[FlowStep]:
        """Mark the running step failed. Returns None if nothing was running."""
        step = self.current
        if step is None:
            return None
        step.error = error
        step.transition(StepStatus.FAILED)
        self.notify(step)
        return step

    @contextmanager
    def step(self, step_id: str) -> Iterator[FlowStep]:
        """Begin a step and complete it when the block exits cleanly."""
        step = self.begin(step_id)
        yield step
        self.complete(step_id)


# =============================================================================
# Runner
# =============================================================================

FlowBody = Callable[[StepTracker], Awaitable[Any]]


def _as_flow_failure(
    error: Exception,
    ctx: FlowContext,
    flow_name: str,
    step_id: Optional[str],
) -> Exception:
    if isinstance(error, FlowError):
        if error.step_name is None:
            error.step_name = step_id
        return error
    if isinstance(error, AbortedError):
        return FlowAbortedError(flow_name, step_id, error)
    if isinstance(error, JobTimeoutError):
        return FlowTimeoutError(flow_name, ctx.polling.budget_ms, step_id, error)
    return error


async def run_flow(
    ctx: FlowContext,
    plan: FlowPlan,
    body: FlowBody,
    options: Optional[FlowOptions] = None,
    *,
    requires_tx_executor: bool = False,
    requires_controller: bool = False,
) -> FlowResult:
    """
    Run a flow in plan or execute mode.

    Args:
        ctx: Flow dependencies
        plan: Fresh plan for this invocation
        body: Coroutine function performing the steps
        options: Mode and progress callback
        requires_tx_executor: Flow submits transactions
        requires_controller: Flow reads the SecretsController

    Returns:
        FlowResult; success is False with error set on any failure.
        A body returning None yields a FlowError without failing any step.
    """
    options = options or FlowOptions()
    if options.mode is FlowMode.PLAN:
        return FlowResult(success=True, plan=plan)

    log = ctx.log
    try:
        validate_execution_context(
            ctx,
            requires_tx_executor=requires_tx_executor,
            requires_controller=requires_controller,
        )
    except ConfigError as e:
        log.warning("Flow %s not started: %s", plan.name, e.message)
        return FlowResult(success=False, plan=plan, error=e)

    tracker = StepTracker(plan, options.on_step_progress, ctx.abort_signal, log)
    log.info("Starting flow %s (%d steps)", plan.name, len(plan.steps))

    try:
        data = await body(tracker)
        if data is None:
            raise FlowError(f"Flow {plan.name} produced no result", plan.name)
    except Exception as e:
        running = tracker.current
        error = _as_flow_failure(e, ctx, plan.name, running.id if running else None)
        tracker.fail(error)
        log.warning(
            "Flow %s failed at step %s: %s",
            plan.name,
            running.id if running else "-",
            error,
        )
        return FlowResult(
            success=False,
            plan=plan,
            error=error,
            receipts=tracker.receipts or None,
        )

    log.info("Flow %s completed", plan.name)
    return FlowResult(
        success=True,
        plan=plan,
        data=data,
        receipts=tracker.receipts or None,
    )
