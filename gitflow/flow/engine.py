"""Workflow engine: one method per action.

The engine owns nothing but its collaborators and an immutable
configuration. Each call builds a fresh ``FlowState`` from the request and
hands the action's step list to ``run_pipeline``.
"""

from __future__ import annotations

from gitflow.core.config import FlowConfig
from gitflow.flow.actions import ACTIONS
from gitflow.flow.executor import BuildTool, Prompter, VersionControl
from gitflow.flow.pipeline import FlowContext, WorkflowResult, run_pipeline
from gitflow.flow.state import FlowRequest, FlowState
from gitflow.output.console import ConsoleProtocol

__all__ = ["WorkflowEngine"]


class WorkflowEngine:
    """Runs workflow actions against a repository and its Maven project.

    Usage:
        engine = WorkflowEngine(config, vcs=GitRepository(root), build=MavenProject(root),
                                prompter=TerminalPrompter(), console=RichConsole())
        result = engine.feature_finish(name="login")
        if not result.success:
            print(result.describe())
    """

    def __init__(
        self,
        config: FlowConfig,
        *,
        vcs: VersionControl,
        build: BuildTool,
        prompter: Prompter,
        console: ConsoleProtocol,
    ) -> None:
        self._ctx = FlowContext(
            config=config, vcs=vcs, build=build, prompter=prompter, console=console
        )

    @property
    def config(self) -> FlowConfig:
        return self._ctx.config

    def run(self, action: str, request: FlowRequest | None = None) -> WorkflowResult:
        """Run ``action`` by name (``feature-finish``, ``support-start``, ...)."""
        steps = ACTIONS.get(action)
        if steps is None:
            raise KeyError(f"unknown action: {action}")
        state = FlowState(request=request or FlowRequest())
        return run_pipeline(action, steps, self._ctx, state)

    def feature_start(self, name: str | None = None) -> WorkflowResult:
        return self.run("feature-start", FlowRequest(name=name))

    def feature_finish(
        self, branch: str | None = None, name: str | None = None
    ) -> WorkflowResult:
        return self.run("feature-finish", FlowRequest(branch=branch, name=name))

    def release_start(self, version: str | None = None) -> WorkflowResult:
        return self.run("release-start", FlowRequest(version=version))

    def release_finish(
        self, branch: str | None = None, name: str | None = None
    ) -> WorkflowResult:
        return self.run("release-finish", FlowRequest(branch=branch, name=name))

    def hotfix_start(self, version: str | None = None) -> WorkflowResult:
        return self.run("hotfix-start", FlowRequest(version=version))

    def hotfix_finish(
        self, branch: str | None = None, name: str | None = None
    ) -> WorkflowResult:
        return self.run("hotfix-finish", FlowRequest(branch=branch, name=name))

    def support_start(
        self, tag: str | None = None, branch_name: str | None = None
    ) -> WorkflowResult:
        """Start ``support/<branch_name or tag>`` from ``tag``."""
        return self.run("support-start", FlowRequest(tag=tag, name=branch_name))
