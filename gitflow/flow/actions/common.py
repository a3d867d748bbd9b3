"""Steps shared by several actions.

Most steps here are factories: they take a selector telling them which
branch (or which goal string) to act on and return a ``StepRun``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import replace

from gitflow.core.config import FlowConfig
from gitflow.core.result import Err, Ok, Result
from gitflow.flow.commit import CommitProperties, render_message
from gitflow.flow.errors import FlowError, UncommittedChanges
from gitflow.flow.pipeline import Condition, FlowContext, StepRun
from gitflow.flow.state import FlowState
from gitflow.flow.version import VersionString

BranchSelector = Callable[[FlowConfig, FlowState], str]
GoalSelector = Callable[[FlowConfig], str | None]


# -- selectors ---------------------------------------------------------------


def topic(config: FlowConfig, state: FlowState) -> str:
    """The branch the action starts or finishes."""
    return state.require_branch().name


def development(config: FlowConfig, state: FlowState) -> str:
    return config.branches.development


def production(config: FlowConfig, state: FlowState) -> str:
    return config.branches.production


def merge_target(config: FlowConfig, state: FlowState) -> str:
    """Where a hotfix goes back to: an open release branch, else development."""
    return state.merge_target or config.branches.development


# -- conditions --------------------------------------------------------------


def fetch_enabled(config: FlowConfig, state: FlowState) -> bool:
    return config.fetch_remote


def push_enabled(config: FlowConfig, state: FlowState) -> bool:
    return config.push_remote


def install_enabled(config: FlowConfig, state: FlowState) -> bool:
    return config.install_project


def has_goals(goals: GoalSelector) -> Condition:
    def condition(config: FlowConfig, state: FlowState) -> bool:
        value = goals(config)
        return bool(value and value.strip())

    return condition


def version_changes(config: FlowConfig, state: FlowState) -> bool:
    """The computed target version differs from the version in the pom."""
    return state.target_version is not None and state.target_version != state.version


# -- steps -------------------------------------------------------------------


def done(result: Result[object, FlowError], state: FlowState) -> Result[FlowState, FlowError]:
    """Carry ``state`` forward when a side-effect-only call succeeded."""
    if isinstance(result, Err):
        return result
    return Ok(state)


def check_clean(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    dirty = ctx.vcs.has_uncommitted_changes()
    if isinstance(dirty, Err):
        return dirty
    if dirty.value:
        return Err(UncommittedChanges())
    return Ok(state)


def compare_remote(*branches: BranchSelector) -> StepRun:
    """Fail if any of ``branches`` is behind its remote counterpart."""

    def step(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
        for select in branches:
            compared = ctx.vcs.compare_with_remote(select(ctx.config, state))
            if isinstance(compared, Err):
                return compared
        return Ok(state)

    return step


def checkout(branch: BranchSelector) -> StepRun:
    def step(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
        return done(ctx.vcs.checkout(branch(ctx.config, state)), state)

    return step


def clean_test(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    return done(ctx.build.clean_test(), state)


def clean_install(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    return done(ctx.build.clean_install(), state)


def run_goals(goals: GoalSelector) -> StepRun:
    def step(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
        value = goals(ctx.config)
        if not value:
            return Ok(state)
        return done(ctx.build.run_goals(value), state)

    return step


def read_version(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    """Read the pom version of the checked-out branch into ``state.version``."""
    current = ctx.build.current_version()
    if isinstance(current, Err):
        return current
    ctx.console.print(f"current version: {current.value}")
    return Ok(replace(state, version=current.value))


def set_version_and_commit(
    ctx: FlowContext,
    version: VersionString,
    template: str,
    properties: Mapping[str, str] | None = None,
) -> Result[None, FlowError]:
    """``mvn versions:set`` followed by a templated commit."""
    updated = ctx.build.set_versions(version)
    if isinstance(updated, Err):
        return updated
    props = properties if properties is not None else CommitProperties(version=str(version))
    return ctx.vcs.commit(template, props)


def commit_target_version(template: Callable[[FlowConfig], str]) -> StepRun:
    """Set ``state.target_version`` in the pom and commit it."""

    def step(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
        target = state.require_target_version()
        committed = set_version_and_commit(ctx, target, template(ctx.config))
        if isinstance(committed, Err):
            return committed
        return Ok(replace(state, version=target))

    return step


def merge_no_ff(
    branch: BranchSelector,
    template: Callable[[FlowConfig], str],
    properties: Callable[[FlowState], Mapping[str, str]] | None = None,
) -> StepRun:
    """Merge ``branch`` into the current branch with a merge commit.

    An empty template leaves the message to git.
    """

    def step(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
        props = properties(state) if properties is not None else None
        message = render_message(template(ctx.config), props).strip() or None
        return done(ctx.vcs.merge_no_ff(branch(ctx.config, state), message), state)

    return step


def create_tag(template: Callable[[FlowConfig], str]) -> StepRun:
    """Tag the current commit ``<version_tag_prefix><target_version>``."""

    def step(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
        version = state.require_target_version()
        name = f"{ctx.config.version_tag_prefix}{version}"
        message = render_message(template(ctx.config), CommitProperties(version=str(version)))
        tagged = ctx.vcs.tag(name, message)
        if isinstance(tagged, Err):
            return tagged
        return Ok(replace(state, tag=name))

    return step


def push(branch: BranchSelector, *, follow_tags: bool = False) -> StepRun:
    def step(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
        return done(ctx.vcs.push(branch(ctx.config, state), follow_tags=follow_tags), state)

    return step


def delete_remote(branch: BranchSelector) -> StepRun:
    def step(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
        return done(ctx.vcs.delete_branch_remote(branch(ctx.config, state)), state)

    return step


def delete_local(branch: BranchSelector, *, force: Condition | None = None) -> StepRun:
    """Delete a local branch, with ``-D`` when ``force`` holds."""

    def step(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
        forced = force(ctx.config, state) if force is not None else False
        return done(ctx.vcs.delete_branch_local(branch(ctx.config, state), force=forced), state)

    return step
