"""``gitflow support start``."""

from __future__ import annotations

from dataclasses import replace

import typer

from gitflow.cli.commands._helpers import report
from gitflow.cli.context import build_context, global_options
from gitflow.core.config import FlowConfig

support_app = typer.Typer(add_completion=False, no_args_is_help=True)


@support_app.command("start")
def start(
    ctx: typer.Context,
    tag: str | None = typer.Option(None, "--tag", help="Tag to branch from (default: last tag)"),
    name: str | None = typer.Option(None, "--name", help="Branch name (default: the tag)"),
    use_snapshot: bool = typer.Option(
        False, "--use-snapshot", help="Move the support branch to a snapshot version"
    ),
) -> None:
    """Create a support branch from a tag."""

    def adjust(config: FlowConfig) -> FlowConfig:
        if use_snapshot:
            return replace(config, support=replace(config.support, use_snapshot=True))
        return config

    cli = build_context(global_options(ctx), adjust)
    report(cli.engine.support_start(tag=tag, branch_name=name), cli.console)
