from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path

import typer

from gitflow.cli.prompt import TerminalPrompter
from gitflow.core.config import CONFIG_FILENAME, FlowConfig, load_config, load_config_or_default
from gitflow.core.errors import ErrorCode
from gitflow.core.result import Err
from gitflow.flow.engine import WorkflowEngine
from gitflow.git.repository import GitRepository
from gitflow.maven.project import MavenProject
from gitflow.output.console import ConsoleProtocol, RichConsole
from gitflow.output.errors import print_config_error


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options given before the command group (``gitflow -B feature finish``)."""

    repo: Path | None = None
    config: Path | None = None
    batch_mode: bool = False
    no_push: bool = False
    no_fetch: bool = False
    install: bool = False

    def apply(self, config: FlowConfig) -> FlowConfig:
        if self.batch_mode:
            config = replace(config, interactive=False)
        if self.no_push:
            config = replace(config, push_remote=False)
        if self.no_fetch:
            config = replace(config, fetch_remote=False)
        if self.install:
            config = replace(config, install_project=True)
        return config


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: FlowConfig
    console: ConsoleProtocol
    engine: WorkflowEngine


def global_options(ctx: typer.Context) -> GlobalOptions:
    obj = ctx.obj
    if isinstance(obj, GlobalOptions):
        return obj
    return GlobalOptions()


def build_context(
    options: GlobalOptions,
    adjust: Callable[[FlowConfig], FlowConfig] | None = None,
) -> CLIContext:
    """Load configuration and wire the engine to git and Maven in the repo root.

    ``adjust`` applies per-command flags after the global ones.
    """
    console = RichConsole()

    try:
        root = (options.repo or Path.cwd()).expanduser().resolve()
    except OSError as e:
        console.error(f"invalid --repo: {e}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    probe = GitRepository(root)
    if not root.is_dir() or not probe.exists():
        console.error(f"not a git repository: {root}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if options.config is not None:
        loaded = load_config(options.config.expanduser())
    else:
        loaded = load_config_or_default(root / CONFIG_FILENAME)
    if isinstance(loaded, Err):
        print_config_error(loaded.error, console)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    config = options.apply(loaded.value)
    if adjust is not None:
        config = adjust(config)

    engine = WorkflowEngine(
        config,
        vcs=GitRepository(root, remote=config.branches.remote, console=console),
        build=MavenProject(
            root,
            executable=config.maven.executable,
            extra_args=config.maven.args,
            console=console,
        ),
        prompter=TerminalPrompter(),
        console=console,
    )
    return CLIContext(root=root, config=config, console=console, engine=engine)
