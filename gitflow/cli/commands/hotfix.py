"""``gitflow hotfix start|finish``."""

from __future__ import annotations

from dataclasses import replace

import typer

from gitflow.cli.commands._helpers import report
from gitflow.cli.context import build_context, global_options
from gitflow.core.config import FlowConfig

hotfix_app = typer.Typer(add_completion=False, no_args_is_help=True)


@hotfix_app.command("start")
def start(
    ctx: typer.Context,
    version: str | None = typer.Option(
        None, "--version", help="Hotfix version (default: next production version)"
    ),
) -> None:
    """Create a hotfix branch from production."""
    cli = build_context(global_options(ctx))
    report(cli.engine.hotfix_start(version=version), cli.console)


@hotfix_app.command("finish")
def finish(
    ctx: typer.Context,
    name: str | None = typer.Argument(None, help="Hotfix name without prefix"),
    branch: str | None = typer.Option(None, "--branch", help="Full branch name"),
    keep_branch: bool = typer.Option(False, "--keep-branch", help="Keep the hotfix branch"),
    skip_test: bool = typer.Option(False, "--skip-test", help="Skip mvn clean test"),
    skip_tag: bool = typer.Option(False, "--skip-tag", help="Do not tag the hotfix"),
) -> None:
    """Merge a hotfix into production and back into release or development."""

    def adjust(config: FlowConfig) -> FlowConfig:
        hotfix = config.hotfix
        if keep_branch:
            hotfix = replace(hotfix, keep_branch=True)
        if skip_test:
            hotfix = replace(hotfix, skip_test=True)
        if skip_tag:
            hotfix = replace(hotfix, skip_tag=True)
        return replace(config, hotfix=hotfix)

    cli = build_context(global_options(ctx), adjust)
    report(cli.engine.hotfix_finish(branch=branch, name=name), cli.console)
