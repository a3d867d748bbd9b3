"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from gitflow.output.errors import flow_error_exit_code, print_workflow_result

if TYPE_CHECKING:
    from gitflow.flow.pipeline import WorkflowResult
    from gitflow.output.console import ConsoleProtocol


def report(result: WorkflowResult, console: ConsoleProtocol) -> None:
    """Print the outcome of an action and exit non-zero if it failed."""
    print_workflow_result(result, console)
    if result.error is not None:
        raise typer.Exit(code=flow_error_exit_code(result.error))
