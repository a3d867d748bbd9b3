"""``gitflow feature start|finish``."""

from __future__ import annotations

from dataclasses import replace

import typer

from gitflow.cli.commands._helpers import report
from gitflow.cli.context import build_context, global_options
from gitflow.core.config import FlowConfig

feature_app = typer.Typer(add_completion=False, no_args_is_help=True)


@feature_app.command("start")
def start(
    ctx: typer.Context,
    name: str | None = typer.Argument(None, help="Feature name (prefix is added)"),
    skip_feature_version: bool = typer.Option(
        False, "--skip-feature-version", help="Do not qualify the pom version with the name"
    ),
) -> None:
    """Create a feature branch from development."""

    def adjust(config: FlowConfig) -> FlowConfig:
        if skip_feature_version:
            return replace(config, feature=replace(config.feature, skip_feature_version=True))
        return config

    cli = build_context(global_options(ctx), adjust)
    report(cli.engine.feature_start(name=name), cli.console)


@feature_app.command("finish")
def finish(
    ctx: typer.Context,
    name: str | None = typer.Argument(None, help="Feature name without prefix"),
    branch: str | None = typer.Option(None, "--branch", help="Full branch name"),
    keep_branch: bool = typer.Option(False, "--keep-branch", help="Keep the feature branch"),
    squash: bool = typer.Option(False, "--squash", help="Squash-merge into development"),
    skip_test: bool = typer.Option(False, "--skip-test", help="Skip mvn clean test"),
    increment_version: bool = typer.Option(
        False, "--increment-version", help="Bump the development version before merging"
    ),
) -> None:
    """Merge a feature branch into development."""

    def adjust(config: FlowConfig) -> FlowConfig:
        feature = config.feature
        if keep_branch:
            feature = replace(feature, keep_branch=True)
        if squash:
            feature = replace(feature, squash=True)
        if skip_test:
            feature = replace(feature, skip_test=True)
        if increment_version:
            feature = replace(feature, increment_version_at_finish=True)
        return replace(config, feature=feature)

    cli = build_context(global_options(ctx), adjust)
    report(cli.engine.feature_finish(branch=branch, name=name), cli.console)
