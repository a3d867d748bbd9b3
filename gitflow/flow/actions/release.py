"""Release branch lifecycle.

``release-start`` cuts ``release/<version>`` from development with the
snapshot marker removed. ``release-finish`` merges it into production,
tags it, merges it back into development and moves development to the
next snapshot version.
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
from gitflow.flow.errors import FlowError, ResolutionError
from gitflow.flow.pipeline import FlowContext, Step
from gitflow.flow.state import FlowState
from gitflow.flow.version import VersionString

__all__ = ["RELEASE_FINISH", "RELEASE_START"]


# -- release-start -----------------------------------------------------------


def _ensure_no_release(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    listed = ctx.vcs.list_branches(ctx.config.branches.release)
    if isinstance(listed, Err):
        return listed
    if listed.value:
        return Err(
            ResolutionError(
                "Release branch already exists. Cannot start release.",
                hint=f"Finish {listed.value[0]} first.",
            )
        )
    return Ok(state)


def _choose_release_version(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    """Explicit version, else ask (defaulting to the version without snapshot)."""
    default = state.require_version().release_version()
    raw = state.request.version
    while not (raw and raw.strip()):
        if not ctx.config.interactive:
            raw = str(default)
            break
        asked = ctx.prompter.ask("What is release version?", str(default))
        if isinstance(asked, Err):
            return asked
        raw = asked.value

    parsed = VersionString.parse(raw)
    if isinstance(parsed, Err):
        return parsed
    resolved = resolve_new_branch(
        BranchCategory.RELEASE, ctx.config.branches.release, str(parsed.value), ctx.vcs
    )
    if isinstance(resolved, Err):
        return resolved
    return Ok(replace(state, branch=resolved.value, target_version=parsed.value))


def _create_release_branch(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    base = ctx.config.branches.development
    created = ctx.vcs.create_and_checkout(state.require_branch().name, base)
    if isinstance(created, Err):
        return created
    return Ok(replace(state, base_ref=base))


RELEASE_START: tuple[Step, ...] = (
    Step("check-clean", check_clean),
    Step("ensure-no-release", _ensure_no_release),
    Step("compare-remote", compare_remote(development), when=fetch_enabled),
    Step("checkout-development", checkout(development)),
    Step("read-version", read_version),
    Step("resolve-branch", _choose_release_version),
    Step("create-branch", _create_release_branch),
    Step(
        "set-release-version",
        commit_target_version(lambda c: c.messages.release_start),
        when=version_changes,
    ),
    Step("install", clean_install, when=install_enabled),
    Step("push-branch", push(topic), when=push_enabled),
)


# -- release-finish ----------------------------------------------------------


def _resolve_release_to_finish(
    ctx: FlowContext, state: FlowState
) -> Result[FlowState, FlowError]:
    query = ExistingBranchQuery(
        category=BranchCategory.RELEASE,
        prefix=ctx.config.branches.release,
        interactive=ctx.config.interactive,
        branch=state.request.branch,
        name=state.request.name,
    )
    resolved = resolve_existing_branch(query, ctx.vcs, ctx.prompter)
    if isinstance(resolved, Err):
        return resolved
    return Ok(replace(state, branch=resolved.value))


def _release_version(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    return Ok(replace(state, target_version=state.require_version().release_version()))


def _next_development_version(
    ctx: FlowContext, state: FlowState
) -> Result[FlowState, FlowError]:
    released = state.require_target_version()
    following = released.next_development_version(ctx.policy)
    committed = set_version_and_commit(
        ctx,
        following,
        ctx.config.messages.release_finish,
        CommitProperties(version=str(following)),
    )
    if isinstance(committed, Err):
        return committed
    return Ok(state)


def _release_properties(state: FlowState) -> CommitProperties:
    return CommitProperties(version=str(state.require_target_version()))


def _test_enabled(config: FlowConfig, state: FlowState) -> bool:
    return not config.release.skip_test


def _tag_enabled(config: FlowConfig, state: FlowState) -> bool:
    return not config.release.skip_tag


def _push_kept(config: FlowConfig, state: FlowState) -> bool:
    return config.push_remote and config.release.keep_branch


def _push_discarded(config: FlowConfig, state: FlowState) -> bool:
    return config.push_remote and not config.release.keep_branch


def _discard(config: FlowConfig, state: FlowState) -> bool:
    return not config.release.keep_branch


def _pre_goals(config: FlowConfig) -> str | None:
    return config.release.pre_finish_goals


def _post_goals(config: FlowConfig) -> str | None:
    return config.release.post_finish_goals


RELEASE_FINISH: tuple[Step, ...] = (
    Step("check-clean", check_clean),
    Step("resolve-branch", _resolve_release_to_finish),
    Step("compare-remote", compare_remote(topic, development, production), when=fetch_enabled),
    Step("checkout-branch", checkout(topic)),
    Step("test", clean_test, when=_test_enabled),
    Step("pre-finish-goals", run_goals(_pre_goals), when=has_goals(_pre_goals)),
    Step("read-version", read_version),
    Step("release-version", _release_version),
    Step("checkout-production", checkout(production)),
    Step(
        "merge-production",
        merge_no_ff(topic, lambda c: c.messages.release_merge, _release_properties),
    ),
    Step("tag", create_tag(lambda c: c.messages.tag_release), when=_tag_enabled),
    Step("post-finish-goals", run_goals(_post_goals), when=has_goals(_post_goals)),
    Step("install", clean_install, when=install_enabled),
    Step("checkout-development", checkout(development)),
    Step(
        "merge-development",
        merge_no_ff(topic, lambda c: c.messages.release_dev_merge, _release_properties),
    ),
    Step("next-development-version", _next_development_version),
    Step("push-production", push(production, follow_tags=True), when=push_enabled),
    Step("push-development", push(development), when=push_enabled),
    Step("push-branch", push(topic), when=_push_kept),
    Step("delete-remote-branch", delete_remote(topic), when=_push_discarded),
    Step("delete-branch", delete_local(topic), when=_discard),
)
