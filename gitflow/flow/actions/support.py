"""Support branches: long-lived maintenance lines started from a release tag."""

from __future__ import annotations

from dataclasses import replace

from gitflow.core.config import FlowConfig
from gitflow.core.result import Err, Ok, Result
from gitflow.flow.actions.common import (
    check_clean,
    clean_install,
    install_enabled,
    push,
    push_enabled,
    read_version,
    set_version_and_commit,
    topic,
)
from gitflow.flow.branches import BranchCategory, resolve_new_branch
from gitflow.flow.commit import CommitProperties
from gitflow.flow.errors import FlowError, ResolutionError
from gitflow.flow.pipeline import FlowContext, Step
from gitflow.flow.state import FlowState

__all__ = ["SUPPORT_START"]


def _resolve_tag(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    """Explicit tag, else a choice among all tags, else the most recent tag."""
    requested = (state.request.tag or "").strip()

    if requested:
        exists = ctx.vcs.tag_exists(requested)
        if isinstance(exists, Err):
            return exists
        if not exists.value:
            return Err(
                ResolutionError(
                    f"The tag '{requested}' doesn't exist.",
                    hint="Run: git tag --list",
                )
            )
        return Ok(replace(state, tag=requested))

    if ctx.config.interactive:
        listed = ctx.vcs.list_tags()
        if isinstance(listed, Err):
            return listed
        tags = listed.value
        if not tags:
            return Err(ResolutionError("There are no tags."))
        chosen = ""
        while chosen not in tags:
            answer = ctx.prompter.choose("Choose tag to start support branch", tags)
            if isinstance(answer, Err):
                return answer
            chosen = answer.value.strip()
        return Ok(replace(state, tag=chosen))

    last = ctx.vcs.last_tag()
    if isinstance(last, Err):
        return last
    if not last.value:
        return Err(ResolutionError("Tag is blank.", hint="Pass --tag or create a tag first."))
    ctx.console.print(f"tag name is blank, using the last tag: {last.value}")
    return Ok(replace(state, tag=last.value))


def _resolve_support_branch(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    name = state.request.name if state.request.name and state.request.name.strip() else state.tag
    resolved = resolve_new_branch(
        BranchCategory.SUPPORT, ctx.config.branches.support, name, ctx.vcs
    )
    if isinstance(resolved, Err):
        return resolved
    return Ok(replace(state, branch=resolved.value))


def _create_support_branch(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    base = state.tag
    if base is None:
        raise AssertionError("tag not resolved yet")
    created = ctx.vcs.create_and_checkout(state.require_branch().name, base)
    if isinstance(created, Err):
        return created
    return Ok(replace(state, base_ref=base))


def _snapshot_version(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    version = state.require_version()
    if version.is_snapshot:
        return Ok(state)
    target = version.snapshot_version()
    committed = set_version_and_commit(
        ctx,
        target,
        ctx.config.messages.support_start,
        CommitProperties(version=str(target)),
    )
    if isinstance(committed, Err):
        return committed
    return Ok(replace(state, version=target, target_version=target))


def _use_snapshot(config: FlowConfig, state: FlowState) -> bool:
    return config.support.use_snapshot


SUPPORT_START: tuple[Step, ...] = (
    Step("check-clean", check_clean),
    Step("resolve-tag", _resolve_tag),
    Step("resolve-branch", _resolve_support_branch),
    Step("create-branch", _create_support_branch),
    Step("read-version", read_version, when=_use_snapshot),
    Step("snapshot-version", _snapshot_version, when=_use_snapshot),
    Step("install", clean_install, when=install_enabled),
    Step("push-branch", push(topic), when=push_enabled),
)
