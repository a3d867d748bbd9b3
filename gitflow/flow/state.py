"""Per-invocation request and pipeline state."""

from __future__ import annotations

from dataclasses import dataclass, field

from gitflow.flow.branches import BranchRef
from gitflow.flow.version import VersionString

__all__ = ["FlowRequest", "FlowState"]


@dataclass(frozen=True, slots=True)
class FlowRequest:
    """What the operator asked for on the command line.

    Attributes:
        branch: Full branch name to finish.
        name: Short branch name (finish) or new name (start).
        tag: Tag to start a support branch from.
        version: Release or hotfix version to start.
    """

    branch: str | None = None
    name: str | None = None
    tag: str | None = None
    version: str | None = None


@dataclass(frozen=True, slots=True)
class FlowState:
    """Values accumulated by the steps of one action.

    Each step returns a new state via ``dataclasses.replace``.

    Attributes:
        branch: The topic branch being started or finished.
        base_ref: Ref a new branch is created from.
        version: Version read from the topic branch (kept for restoring it).
        target_version: Version the action sets or tags.
        restore_version: Merge target version to restore after a hotfix merge.
        merge_target: Branch a hotfix is merged back into.
        tag: Tag created by the action.
    """

    request: FlowRequest = field(default_factory=FlowRequest)
    branch: BranchRef | None = None
    base_ref: str | None = None
    version: VersionString | None = None
    target_version: VersionString | None = None
    restore_version: VersionString | None = None
    merge_target: str | None = None
    tag: str | None = None

    def require_branch(self) -> BranchRef:
        if self.branch is None:
            raise AssertionError("branch not resolved yet")
        return self.branch

    def require_version(self) -> VersionString:
        if self.version is None:
            raise AssertionError("version not read yet")
        return self.version

    def require_target_version(self) -> VersionString:
        if self.target_version is None:
            raise AssertionError("target version not computed yet")
        return self.target_version
