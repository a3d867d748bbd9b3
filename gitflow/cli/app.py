from __future__ import annotations

from pathlib import Path

import typer

from gitflow import __version__
from gitflow.cli.commands.feature import feature_app
from gitflow.cli.commands.hotfix import hotfix_app
from gitflow.cli.commands.release import release_app
from gitflow.cli.commands.support import support_app
from gitflow.cli.context import GlobalOptions

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Git branching workflow for Maven projects.",
)

app.add_typer(feature_app, name="feature", help="Feature branches")
app.add_typer(release_app, name="release", help="Release branches")
app.add_typer(hotfix_app, name="hotfix", help="Hotfix branches")
app.add_typer(support_app, name="support", help="Support branches")


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    repo: Path | None = typer.Option(
        None, "--repo", help="Repository root (default: current directory)"
    ),
    config: Path | None = typer.Option(
        None, "--config", help="Config file (default: <repo>/.gitflow.toml)"
    ),
    batch_mode: bool = typer.Option(
        False, "--batch-mode", "-B", help="Never prompt; fail when input is missing."
    ),
    no_push: bool = typer.Option(False, "--no-push", help="Do not push to the remote."),
    no_fetch: bool = typer.Option(
        False, "--no-fetch", help="Do not compare branches with the remote."
    ),
    install: bool = typer.Option(False, "--install", help="Run mvn clean install."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    ctx.obj = GlobalOptions(
        repo=repo,
        config=config,
        batch_mode=batch_mode,
        no_push=no_push,
        no_fetch=no_fetch,
        install=install,
    )


def main() -> None:
    app()
