# cifer_sdk/flows/types.py
"""
CIFER SDK Flows: Types

A flow is a fixed, ordered list of steps. The same step objects serve as
the plan-mode preview and as the live progress record in execute mode.

Step lifecycle (forward only):

    pending ──► in_progress ──► completed
       │                  └──► failed
       └──► skipped

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Any, Callable, Dict, Generic, List, TypeVar

from ..adapters.base import SignerAdapter, ReadClient
from ..common import AbortSignal
from ..errors import ConfigError
from ..transport import HTTPTransport
from ..types import (
    Address,
    PollingStrategy,
    TransactionReceipt,
    TxExecutor,
    TxIntent,
)


T = TypeVar("T")

DEFAULT_POLLING_STRATEGY = PollingStrategy(interval_ms=2000, max_attempts=60, backoff_multiplier=1)


# =============================================================================
# Enums
# =============================================================================

class FlowMode(str, Enum):
    PLAN = "plan"
    EXECUTE = "execute"


class StepType(str, Enum):
    """What a step does to the outside world."""
    TRANSACTION = "transaction"
    API_CALL = "api_call"
    POLL = "poll"
    READ = "read"
    COMPUTE = "compute"

    @property
    def has_side_effects(self) -> bool:
        """Side-effecting steps run exactly once per invocation."""
        if self is StepType.TRANSACTION:
            return True
        elif self is StepType.API_CALL:
            return True
        elif self is StepType.POLL:
            return False
        elif self is StepType.READ:
            return False
        elif self is StepType.COMPUTE:
            return False
        raise AssertionError(f"Unhandled step type: {self}")


class StepStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


_ALLOWED_TRANSITIONS: Dict[StepStatus, tuple] = {
    StepStatus.PENDING: (StepStatus.IN_PROGRESS, StepStatus.SKIPPED),
    StepStatus.IN_PROGRESS: (StepStatus.COMPLETED, StepStatus.FAILED),
    StepStatus.COMPLETED: (),
    StepStatus.FAILED: (),
    StepStatus.SKIPPED: (),
}


# =============================================================================
# Plan
# =============================================================================

@dataclass
class FlowStep:
    """One step of a flow."""
    id: str
    description: str
    type: StepType
    status: StepStatus = StepStatus.PENDING
    tx_intent: Optional[TxIntent] = None
    result: Any = None
    error: Optional[BaseException] = None

    def transition(self, status: StepStatus) -> None:
        """
        Move to status.

        Raises:
            ValueError: If the move is not forward
        """
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise ValueError(
                f"Step {self.id} cannot move from {self.status.value} to {status.value}"
            )
        self.status = status


@dataclass
class FlowPlan:
    name: str
    description: str
    steps: List[FlowStep]
    estimated_duration_ms: Optional[int] = None

    def step(self, step_id: str) -> FlowStep:
        for step in self.steps:
            if step.id == step_id:
                return step
        raise KeyError(step_id)

    @property
    def step_ids(self) -> List[str]:
        return [step.id for step in self.steps]


# =============================================================================
# Context / Options / Result
# =============================================================================

@dataclass(frozen=True)
class FlowContext:
    """
    Dependencies for one or more flow invocations. Never mutated by flows.

    tx_executor is needed only by flows that submit transactions.
    transport and logger default to HttpxTransport and the
    "cifer_sdk.flows" logger.
    """
    signer: SignerAdapter
    read_client: ReadClient
    blackbox_url: str
    chain_id: int
    controller_address: Optional[Address] = None
    tx_executor: Optional[TxExecutor] = None
    polling_strategy: Optional[PollingStrategy] = None
    logger: Optional[logging.Logger] = None
    abort_signal: Optional[AbortSignal] = None
    transport: Optional[HTTPTransport] = None

    @property
    def polling(self) -> PollingStrategy:
        return self.polling_strategy or DEFAULT_POLLING_STRATEGY

    @property
    def log(self) -> logging.Logger:
        return self.logger or logging.getLogger("cifer_sdk.flows")


@dataclass
class FlowOptions:
    mode: FlowMode = FlowMode.EXECUTE
    on_step_progress: Optional[Callable[[FlowStep], None]] = None


@dataclass
class FlowResult(Generic[T]):
    """
    Flow outcome.

    success is True only with data present. On failure, error is set and
    the failing step in plan.steps is marked failed.
    """
    success: bool
    plan: FlowPlan
    data: Optional[T] = None
    error: Optional[BaseException] = None
    receipts: Optional[List[TransactionReceipt]] = None


def validate_execution_context(
    ctx: FlowContext,
    *,
    requires_tx_executor: bool = False,
    requires_controller: bool = False,
) -> None:
    """
    Fail fast on a context that cannot run the flow.

    Raises:
        ConfigError: Missing dependency
    """
    if ctx.signer is None:
        raise ConfigError("signer is required for execute mode")
    if ctx.read_client is None:
        raise ConfigError("read_client is required for execute mode")
    if not ctx.blackbox_url:
        raise ConfigError("blackbox_url is required for execute mode")
    if requires_tx_executor and ctx.tx_executor is None:
        raise ConfigError(
            "tx_executor is required for execute mode. "
            "Provide a callback that broadcasts transactions."
        )
    if requires_controller and not ctx.controller_address:
        raise ConfigError("controller_address is required for this flow")
