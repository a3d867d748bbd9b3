"""Declarative step pipelines.

An action is an ordered tuple of ``Step``. Each step has a name, a
function that takes the current ``FlowState`` and returns the next one, and
a condition over ``(FlowConfig, FlowState)`` deciding whether it runs at
all. ``run_pipeline`` walks the steps strictly in order and stops at the
first error: the steps already done stay done.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from gitflow.core.config import FlowConfig
from gitflow.core.result import Err, Result
from gitflow.flow.errors import FlowError
from gitflow.flow.executor import BuildTool, Prompter, VersionControl
from gitflow.flow.state import FlowState
from gitflow.flow.validation import validate_config
from gitflow.flow.version import VersionPolicy, policy_for
from gitflow.output.console import ConsoleProtocol, Style

__all__ = [
    "Condition",
    "FlowContext",
    "Step",
    "StepRun",
    "WorkflowResult",
    "always",
    "run_pipeline",
]


@dataclass(frozen=True, slots=True)
class FlowContext:
    """Collaborators and configuration shared by every step of an action."""

    config: FlowConfig
    vcs: VersionControl
    build: BuildTool
    prompter: Prompter
    console: ConsoleProtocol

    @property
    def policy(self) -> VersionPolicy:
        return policy_for(self.config.version_digit_to_increment)


StepRun = Callable[[FlowContext, FlowState], Result[FlowState, FlowError]]
Condition = Callable[[FlowConfig, FlowState], bool]


def always(config: FlowConfig, state: FlowState) -> bool:
    return True


@dataclass(frozen=True, slots=True)
class Step:
    name: str
    run: StepRun
    when: Condition = always


@dataclass(frozen=True, slots=True)
class WorkflowResult:
    """Outcome of one action.

    Attributes:
        action: Action name, e.g. ``feature-finish``.
        executed: Steps that ran to completion, in order.
        skipped: Steps whose condition was false.
        failed_step: Step that returned an error, if any.
        error: The error that aborted the action.
        state: State after the last completed step.
    """

    action: str
    executed: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()
    failed_step: str | None = None
    error: FlowError | None = None
    state: FlowState | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    def describe(self) -> str:
        if self.error is None:
            return f"{self.action} completed"
        return f"{self.action} failed at {self.failed_step}: {self.error.message}"


def run_pipeline(
    action: str,
    steps: Sequence[Step],
    ctx: FlowContext,
    state: FlowState,
) -> WorkflowResult:
    """Run ``steps`` in order against ``state``.

    The configuration is validated first, so an invalid configuration fails
    without a single external command being issued.
    """
    validated = validate_config(ctx.config)
    if isinstance(validated, Err):
        return WorkflowResult(
            action=action,
            failed_step="validate-config",
            error=validated.error,
            state=state,
        )

    ctx.console.header(action)
    executed: list[str] = []
    skipped: list[str] = []
    current = state

    for step in steps:
        if not step.when(ctx.config, current):
            skipped.append(step.name)
            continue

        ctx.console.print(f"> {step.name}", Style.INFO)
        outcome = step.run(ctx, current)
        if isinstance(outcome, Err):
            return WorkflowResult(
                action=action,
                executed=tuple(executed),
                skipped=tuple(skipped),
                failed_step=step.name,
                error=outcome.error,
                state=current,
            )
        current = outcome.value
        executed.append(step.name)

    return WorkflowResult(
        action=action,
        executed=tuple(executed),
        skipped=tuple(skipped),
        state=current,
    )
