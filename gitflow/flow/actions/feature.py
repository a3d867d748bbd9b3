"""Feature branch lifecycle: start from development, finish back into it."""

from __future__ import annotations

from dataclasses import replace

from gitflow.core.config import FlowConfig
from gitflow.core.result import Err, Ok, Result
from gitflow.flow.actions.common import (
    check_clean,
    checkout,
    clean_install,
    clean_test,
    compare_remote,
    delete_local,
    delete_remote,
    development,
    fetch_enabled,
    has_goals,
    install_enabled,
    merge_no_ff,
    push,
    push_enabled,
    read_version,
    run_goals,
    set_version_and_commit,
    topic,
)
from gitflow.flow.branches import (
    BranchCategory,
    ExistingBranchQuery,
    prompt_new_name,
    resolve_existing_branch,
    resolve_new_branch,
)
from gitflow.flow.commit import CommitProperties, render_message
from gitflow.flow.errors import FlowError
from gitflow.flow.pipeline import FlowContext, Step
from gitflow.flow.state import FlowState

__all__ = ["FEATURE_FINISH", "FEATURE_START"]


def _feature_properties(state: FlowState) -> CommitProperties:
    version = state.target_version or state.require_version()
    return CommitProperties(version=str(version), featureName=state.require_branch().local_name)


# -- feature-start -----------------------------------------------------------


def _resolve_new_feature(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    prefix = ctx.config.branches.feature
    name = state.request.name
    if not (name and name.strip()) and ctx.config.interactive:
        asked = prompt_new_name(
            f"What is a name of feature branch? {prefix}", prefix, ctx.vcs, ctx.prompter
        )
        if isinstance(asked, Err):
            return asked
        name = asked.value

    resolved = resolve_new_branch(BranchCategory.FEATURE, prefix, name, ctx.vcs)
    if isinstance(resolved, Err):
        return resolved
    return Ok(replace(state, branch=resolved.value))


def _create_feature_branch(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    base = ctx.config.branches.development
    created = ctx.vcs.create_and_checkout(state.require_branch().name, base)
    if isinstance(created, Err):
        return created
    return Ok(replace(state, base_ref=base))


def _set_feature_version(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    name = state.require_branch().local_name
    version = state.require_version()
    if version.has_feature_qualifier(name):
        ctx.console.print(f"version {version} already carries '{name}'")
        return Ok(state)

    target = version.feature_version(name)
    committed = set_version_and_commit(
        ctx,
        target,
        ctx.config.messages.feature_start,
        CommitProperties(version=str(target), featureName=name),
    )
    if isinstance(committed, Err):
        return committed
    return Ok(replace(state, version=target, target_version=target))


def _feature_version_enabled(config: FlowConfig, state: FlowState) -> bool:
    return not config.feature.skip_feature_version


FEATURE_START: tuple[Step, ...] = (
    Step("check-clean", check_clean),
    Step("resolve-branch", _resolve_new_feature),
    Step("compare-remote", compare_remote(development), when=fetch_enabled),
    Step("create-branch", _create_feature_branch),
    Step("read-version", read_version, when=_feature_version_enabled),
    Step("set-feature-version", _set_feature_version, when=_feature_version_enabled),
    Step("install", clean_install, when=install_enabled),
    Step("push-branch", push(topic), when=push_enabled),
)


# -- feature-finish ----------------------------------------------------------


def _resolve_feature_to_finish(
    ctx: FlowContext, state: FlowState
) -> Result[FlowState, FlowError]:
    query = ExistingBranchQuery(
        category=BranchCategory.FEATURE,
        prefix=ctx.config.branches.feature,
        interactive=ctx.config.interactive,
        branch=state.request.branch,
        name=state.request.name,
    )
    resolved = resolve_existing_branch(query, ctx.vcs, ctx.prompter)
    if isinstance(resolved, Err):
        return resolved
    return Ok(replace(state, branch=resolved.value))


def _increment_feature_version(
    ctx: FlowContext, state: FlowState
) -> Result[FlowState, FlowError]:
    """Bump the development version on the feature branch before merging.

    The feature name is stripped first so digits in it are never
    incremented, then re-applied to the bumped version.
    """
    name = state.require_branch().local_name
    plain = state.require_version().strip_feature_qualifier(name)
    bumped = plain.next_development_version(ctx.policy).feature_version(name)
    committed = set_version_and_commit(
        ctx,
        bumped,
        ctx.config.messages.feature_increment_version,
        CommitProperties(version=str(bumped), featureName=name),
    )
    if isinstance(committed, Err):
        return committed
    return Ok(replace(state, version=bumped))


def _strip_feature_version(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    name = state.require_branch().local_name
    target = state.require_version().strip_feature_qualifier(name)
    committed = set_version_and_commit(
        ctx,
        target,
        ctx.config.messages.feature_finish,
        CommitProperties(version=str(target), featureName=name),
    )
    if isinstance(committed, Err):
        return committed
    return Ok(replace(state, target_version=target))


def _squash_merge(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    branch = state.require_branch()
    merged = ctx.vcs.merge_squash(branch.name)
    if isinstance(merged, Err):
        return merged
    template = ctx.config.messages.feature_squash
    message = render_message(template, _feature_properties(state)) if template.strip() else ""
    committed = ctx.vcs.commit(message or branch.name)
    if isinstance(committed, Err):
        return committed
    return Ok(state)


def _restore_feature_version(ctx: FlowContext, state: FlowState) -> Result[FlowState, FlowError]:
    """Put the kept feature branch back on its feature-qualified version."""
    branch = state.require_branch()
    kept = state.require_version()
    checked_out = ctx.vcs.checkout(branch.name)
    if isinstance(checked_out, Err):
        return checked_out
    committed = set_version_and_commit(
        ctx,
        kept,
        ctx.config.messages.feature_update_back,
        CommitProperties(version=str(kept), featureName=branch.local_name),
    )
    if isinstance(committed, Err):
        return committed
    return Ok(state)


def _has_feature_qualifier(config: FlowConfig, state: FlowState) -> bool:
    version = state.require_version()
    return version.has_feature_qualifier(state.require_branch().local_name)


def _test_enabled(config: FlowConfig, state: FlowState) -> bool:
    return not config.feature.skip_test


def _increment_enabled(config: FlowConfig, state: FlowState) -> bool:
    return config.feature.increment_version_at_finish


def _squash(config: FlowConfig, state: FlowState) -> bool:
    return config.feature.squash


def _no_squash(config: FlowConfig, state: FlowState) -> bool:
    return not config.feature.squash


def _keep(config: FlowConfig, state: FlowState) -> bool:
    return config.feature.keep_branch


def _discard(config: FlowConfig, state: FlowState) -> bool:
    return not config.feature.keep_branch


def _push_kept(config: FlowConfig, state: FlowState) -> bool:
    return config.push_remote and config.feature.keep_branch


def _push_discarded(config: FlowConfig, state: FlowState) -> bool:
    return config.push_remote and not config.feature.keep_branch


def _pre_goals(config: FlowConfig) -> str | None:
    return config.feature.pre_finish_goals


def _post_goals(config: FlowConfig) -> str | None:
    return config.feature.post_finish_goals


FEATURE_FINISH: tuple[Step, ...] = (
    Step("check-clean", check_clean),
    Step("resolve-branch", _resolve_feature_to_finish),
    Step("compare-remote", compare_remote(topic, development), when=fetch_enabled),
    Step("checkout-branch", checkout(topic)),
    Step("test", clean_test, when=_test_enabled),
    Step("pre-finish-goals", run_goals(_pre_goals), when=has_goals(_pre_goals)),
    Step("read-version", read_version),
    Step("increment-version", _increment_feature_version, when=_increment_enabled),
    Step("strip-feature-version", _strip_feature_version, when=_has_feature_qualifier),
    Step("checkout-development", checkout(development)),
    Step("squash-merge", _squash_merge, when=_squash),
    Step(
        "merge",
        merge_no_ff(topic, lambda c: c.messages.feature_dev_merge, _feature_properties),
        when=_no_squash,
    ),
    Step("post-finish-goals", run_goals(_post_goals), when=has_goals(_post_goals)),
    Step("install", clean_install, when=install_enabled),
    Step("restore-feature-version", _restore_feature_version, when=_keep),
    Step("push-development", push(development), when=push_enabled),
    Step("push-branch", push(topic), when=_push_kept),
    Step("delete-remote-branch", delete_remote(topic), when=_push_discarded),
    Step("delete-branch", delete_local(topic, force=_squash), when=_discard),
)
