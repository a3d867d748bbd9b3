"""Error presentation.

Formatting of workflow failures and their mapping to process exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from gitflow.core.config import ConfigError
from gitflow.core.errors import ErrorCode
from gitflow.flow.errors import (
    CommandFailure,
    ConfigurationError,
    DivergedRemoteError,
    FlowError,
    InvalidVersion,
    ResolutionError,
    UncommittedChanges,
    UserCancelled,
)
from gitflow.output.console import Style

if TYPE_CHECKING:
    from gitflow.flow.pipeline import WorkflowResult
    from gitflow.output.console import ConsoleProtocol

__all__ = [
    "flow_error_exit_code",
    "print_config_error",
    "print_flow_error",
    "print_workflow_result",
]


def print_flow_error(error: FlowError, console: ConsoleProtocol) -> None:
    """Print a workflow error with its hint."""
    match error:
        case CommandFailure(tool=tool):
            console.error(f"{tool}: {error.message}")
        case DivergedRemoteError(branch=branch):
            console.error(f"{branch}: {error.message}")
        case _:
            console.error(error.message)
    hint = error.hint
    if hint:
        console.print(f"hint: {hint}", Style.DIM)


def print_workflow_result(result: WorkflowResult, console: ConsoleProtocol) -> None:
    if result.error is None:
        console.success(result.describe())
        return
    print_flow_error(result.error, console)
    console.print(result.describe(), Style.DIM)


def print_config_error(error: ConfigError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.path is not None:
        console.print(f"config: {error.path}", Style.DIM)


def flow_error_exit_code(error: FlowError) -> int:
    """Get exit code for a workflow error."""
    match error:
        case UncommittedChanges() | ResolutionError() | InvalidVersion():
            return int(ErrorCode.USER_ERROR)
        case ConfigurationError():
            return int(ErrorCode.CONFIG_ERROR)
        case CommandFailure():
            return int(ErrorCode.COMMAND_ERROR)
        case DivergedRemoteError():
            return int(ErrorCode.REMOTE_ERROR)
        case UserCancelled():
            return int(ErrorCode.CANCELLED)
        case _:
            assert_never(error)
