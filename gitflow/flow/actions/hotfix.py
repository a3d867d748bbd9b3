"""Hotfix branch lifecycle.

Hotfixes branch off production with the next patch-level version and go
back into production (tagged) and into the open release branch, or
development when no release is in progress.
"""

from __future__ import annotations

from dataclasses import replace

from gitflow.core.config import FlowConfig
from gitflow.core.result import Err, Ok, Result
from gitflow.flow.actions.common import (
    check_clean,
    checkout,
    clean_install,
    clean_test,
    commit_target_version,
    compare_remote,
    create_tag,
    delete_local,
    delete_remote,
    development,
    fetch_enabled,
    has_goals,
    install_enabled,
    merge_no_ff,
    merge_target,
    production,
    push,
    push_enabled,
    read_version,
    run_goals,
    set_version_and_commit,
    topic,
    version_changes,
)
from gitflow.flow.branches import (
    BranchCategory,
    ExistingBranchQuery,
    resolve_existing_branch,
    resolve_new_branch,
)
from gitflow.flow.commit import CommitProperties
from gitflow.flow.errors import FlowError
from gitflow.flow.pipeline import FlowContext, Step
from gitflow.flow.state import FlowState
from gitflow.flow.version import VersionString

__all__ = ["HOTFIX_FINISH", "HOTFIX_START"]


# -- hotfix-start ------------------------------------------------------------


def _choose_hotfix_version(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    """Explicit version, else ask (defaulting to the next release version)."""
    default = state.require_version().next_release_version(ctx.policy)
    raw = state.request.version
    while not (raw and raw.strip()):
        if not ctx.config.interactive:
            raw = str(default)
            break
        asked = ctx.prompter.ask("What is the hotfix version?", str(default))
        if isinstance(asked, Err):
            return asked
        raw = asked.value

    parsed = VersionString.parse(raw)
    if isinstance(parsed, Err):
        return parsed
    resolved = resolve_new_branch(
        BranchCategory.HOTFIX, ctx.config.branches.hotfix, str(parsed.value), ctx.vcs
    )
    if isinstance(resolved, Err):
        return resolved
    return Ok(replace(state, branch=resolved.value, target_version=parsed.value))


def _create_hotfix_branch(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    base = ctx.config.branches.production
    created = ctx.vcs.create_and_checkout(state.require_branch().name, base)
    if isinstance(created, Err):
        return created
    return Ok(replace(state, base_ref=base))


HOTFIX_START: tuple[Step, ...] = (
    Step("check-clean", check_clean),
    Step("compare-remote", compare_remote(production), when=fetch_enabled),
    Step("checkout-production", checkout(production)),
    Step("read-version", read_version),
    Step("resolve-branch", _choose_hotfix_version),
    Step("create-branch", _create_hotfix_branch),
    Step(
        "set-hotfix-version",
        commit_target_version(lambda c: c.messages.hotfix_start),
        when=version_changes,
    ),
    Step("install", clean_install, when=install_enabled),
    Step("push-branch", push(topic), when=push_enabled),
)


# -- hotfix-finish -----------------------------------------------------------


def _resolve_hotfix_to_finish(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    query = ExistingBranchQuery(
        category=BranchCategory.HOTFIX,
        prefix=ctx.config.branches.hotfix,
        interactive=ctx.config.interactive,
        branch=state.request.branch,
        name=state.request.name,
    )
    resolved = resolve_existing_branch(query, ctx.vcs, ctx.prompter)
    if isinstance(resolved, Err):
        return resolved
    return Ok(replace(state, branch=resolved.value))


def _hotfix_version(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    return Ok(replace(state, target_version=state.require_version().release_version()))


def _find_merge_target(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    """Prefer an open release branch over development."""
    listed = ctx.vcs.list_branches(ctx.config.branches.release)
    if isinstance(listed, Err):
        return listed
    target = listed.value[0] if listed.value else ctx.config.branches.development
    return Ok(replace(state, merge_target=target))


def _align_target_version(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    """Move the merge target onto the hotfix version so the pom merges cleanly.

    Remembers the target's own version so it can be put back afterwards.
    """
    current = ctx.build.current_version()
    if isinstance(current, Err):
        return current
    hotfix = state.require_target_version()
    if current.value == hotfix:
        return Ok(replace(state, restore_version=None))

    committed = set_version_and_commit(
        ctx,
        hotfix,
        ctx.config.messages.update_dev_to_avoid_conflicts,
        CommitProperties(version=str(hotfix)),
    )
    if isinstance(committed, Err):
        return committed
    return Ok(replace(state, restore_version=current.value))


def _restore_target_version(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    restore = state.restore_version
    if restore is None:
        return Ok(state)
    committed = set_version_and_commit(
        ctx,
        restore,
        ctx.config.messages.update_dev_back_pre_merge_state,
        CommitProperties(version=str(restore)),
    )
    if isinstance(committed, Err):
        return committed
    return Ok(state)


def _hotfix_properties(state: FlowState) -> CommitProperties:
    return CommitProperties(version=str(state.require_target_version()))


def _test_enabled(config: FlowConfig, state: FlowState) -> bool:
    return not config.hotfix.skip_test


def _tag_enabled(config: FlowConfig, state: FlowState) -> bool:
    return not config.hotfix.skip_tag


def _push_kept(config: FlowConfig, state: FlowState) -> bool:
    return config.push_remote and config.hotfix.keep_branch


def _push_discarded(config: FlowConfig, state: FlowState) -> bool:
    return config.push_remote and not config.hotfix.keep_branch


def _discard(config: FlowConfig, state: FlowState) -> bool:
    return not config.hotfix.keep_branch


def _pre_goals(config: FlowConfig) -> str | None:
    return config.hotfix.pre_finish_goals


def _post_goals(config: FlowConfig) -> str | None:
    return config.hotfix.post_finish_goals


HOTFIX_FINISH: tuple[Step, ...] = (
    Step("check-clean", check_clean),
    Step("resolve-branch", _resolve_hotfix_to_finish),
    Step("compare-remote", compare_remote(topic, production, development), when=fetch_enabled),
    Step("checkout-branch", checkout(topic)),
    Step("test", clean_test, when=_test_enabled),
    Step("pre-finish-goals", run_goals(_pre_goals), when=has_goals(_pre_goals)),
    Step("read-version", read_version),
    Step("hotfix-version", _hotfix_version),
    Step("checkout-production", checkout(production)),
    Step(
        "merge-production",
        merge_no_ff(topic, lambda c: c.messages.hotfix_merge, _hotfix_properties),
    ),
    Step("tag", create_tag(lambda c: c.messages.tag_hotfix), when=_tag_enabled),
    Step("find-merge-target", _find_merge_target),
    Step("checkout-merge-target", checkout(merge_target)),
    Step("align-version", _align_target_version),
    Step(
        "merge-back",
        merge_no_ff(topic, lambda c: c.messages.hotfix_dev_merge, _hotfix_properties),
    ),
    Step("restore-version", _restore_target_version),
    Step("post-finish-goals", run_goals(_post_goals), when=has_goals(_post_goals)),
    Step("install", clean_install, when=install_enabled),
    Step("push-production", push(production, follow_tags=True), when=push_enabled),
    Step("push-merge-target", push(merge_target), when=push_enabled),
    Step("push-branch", push(topic), when=_push_kept),
    Step("delete-remote-branch", delete_remote(topic), when=_push_discarded),
    Step("delete-branch", delete_local(topic), when=_discard),
)
