"""``gitflow release start|finish``."""

from __future__ import annotations

from dataclasses import replace

import typer

from gitflow.cli.commands._helpers import report
from gitflow.cli.context import build_context, global_options
from gitflow.core.config import FlowConfig

release_app = typer.Typer(add_completion=False, no_args_is_help=True)


@release_app.command("start")
def start(
    ctx: typer.Context,
    version: str | None = typer.Option(
        None, "--version", help="Release version (default: development version without snapshot)"
    ),
) -> None:
    """Cut a release branch from development."""
    cli = build_context(global_options(ctx))
    report(cli.engine.release_start(version=version), cli.console)


@release_app.command("finish")
def finish(
    ctx: typer.Context,
    name: str | None = typer.Argument(None, help="Release name without prefix"),
    branch: str | None = typer.Option(None, "--branch", help="Full branch name"),
    keep_branch: bool = typer.Option(False, "--keep-branch", help="Keep the release branch"),
    skip_test: bool = typer.Option(False, "--skip-test", help="Skip mvn clean test"),
    skip_tag: bool = typer.Option(False, "--skip-tag", help="Do not tag the release"),
) -> None:
    """Merge a release into production and development, and tag it."""

    def adjust(config: FlowConfig) -> FlowConfig:
        release = config.release
        if keep_branch:
            release = replace(release, keep_branch=True)
        if skip_test:
            release = replace(release, skip_test=True)
        if skip_tag:
            release = replace(release, skip_tag=True)
        return replace(config, release=release)

    cli = build_context(global_options(ctx), adjust)
    report(cli.engine.release_finish(branch=branch, name=name), cli.console)
