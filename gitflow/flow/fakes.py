"""In-memory collaborators for driving the engine without git or Maven.

``FakeVersionControl`` keeps branches, tags and a linear commit log in
dictionaries; ``FakeBuildTool`` keeps one pom version per ref on the same
object so that checkouts, branch creation and merges carry versions around
the way a real working tree would. Every call, queries included, is
appended to ``FakeVersionControl.calls`` in order.

Usage:
    vcs = FakeVersionControl(branches={"develop": "1.2.0-SNAPSHOT"}, current="develop")
    build = FakeBuildTool(vcs)
    prompter = ScriptedPrompter(["login"])
    engine = WorkflowEngine(config, vcs=vcs, build=build, prompter=prompter,
                            console=MockConsole())
    engine.feature_start()
    assert vcs.current == "feature/login"
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from gitflow.core.result import Err, Ok, Result
from gitflow.flow.commit import render_message
from gitflow.flow.errors import (
    CommandFailure,
    DivergedRemoteError,
    InvalidVersion,
    UserCancelled,
)
from gitflow.flow.version import VersionString

__all__ = ["FakeBuildTool", "FakeCommit", "FakeVersionControl", "ScriptedPrompter"]

Call = tuple[str, ...]

_INVALID_REF_RE = re.compile(r"(\.\.|[\s~^:?*\[\\]|@\{|//|/$|\.lock$|^/|^-|\.$)")


@dataclass(frozen=True, slots=True)
class FakeCommit:
    id: str
    branch: str
    message: str


class FakeVersionControl:
    """Version control held in memory.

    Attributes:
        heads: Branch name -> commit id.
        tags: Tag name -> commit id, in creation order.
        versions: Ref name (branch or tag) -> pom version of that tree.
        current: Checked-out branch.
        dirty: Whether the working tree has uncommitted changes.
        behind: Branch name -> commits the remote has that the local lacks.
        remote_branches: Branches present on the remote.
        fail_on: Operation name -> diagnostic text of a simulated failure.
        calls: Journal of every call made.
        commits: Commits created during the test.
    """

    def __init__(
        self,
        *,
        branches: Mapping[str, str] | None = None,
        tags: Mapping[str, str] | None = None,
        current: str | None = None,
        dirty: bool = False,
        remote: str = "origin",
    ) -> None:
        """Create a repository whose branches and tags carry the given pom versions.

        Each branch and tag gets its own initial commit.
        """
        self.heads: dict[str, str] = {}
        self.tags: dict[str, str] = {}
        self.versions: dict[str, str] = {}
        self.current = current
        self.dirty = dirty
        self.behind: dict[str, int] = {}
        self.remote_branches: set[str] = set()
        self.fail_on: dict[str, str] = {}
        self.calls: list[Call] = []
        self.commits: list[FakeCommit] = []
        self.remote = remote
        self._merged: set[str] = set()
        for name, version in (branches or {}).items():
            self.heads[name] = f"init-{name}"
            self.versions[name] = version
        for name, version in (tags or {}).items():
            self.tags[name] = f"init-{name}"
            self.versions[name] = version

    # -- helpers -------------------------------------------------------------

    def _record(self, *call: str) -> Result[None, CommandFailure]:
        self.calls.append(call)
        diagnostic = self.fail_on.get(call[0])
        if diagnostic is not None:
            return Err(
                CommandFailure(
                    tool="git",
                    command="git " + " ".join(call),
                    returncode=1,
                    output=diagnostic,
                )
            )
        return Ok(None)

    def _new_commit(self, message: str) -> None:
        branch = self.current or "HEAD"
        commit = FakeCommit(id=f"c{len(self.commits) + 1}", branch=branch, message=message)
        self.commits.append(commit)
        if self.current is not None:
            self.heads[self.current] = commit.id

    def _resolve(self, ref: str) -> str | None:
        if ref in self.heads:
            return self.heads[ref]
        return self.tags.get(ref)

    def commits_on(self, branch: str) -> list[str]:
        """Messages of commits created on ``branch``, oldest first."""
        return [c.message for c in self.commits if c.branch == branch]

    def names(self) -> list[str]:
        """Operation names from the journal, in call order."""
        return [call[0] for call in self.calls]

    # -- queries -------------------------------------------------------------

    def has_uncommitted_changes(self) -> Result[bool, CommandFailure]:
        recorded = self._record("has-uncommitted-changes")
        if isinstance(recorded, Err):
            return recorded
        return Ok(self.dirty)

    def branch_exists(self, name: str) -> Result[bool, CommandFailure]:
        recorded = self._record("branch-exists", name)
        if isinstance(recorded, Err):
            return recorded
        return Ok(name in self.heads)

    def tag_exists(self, name: str) -> Result[bool, CommandFailure]:
        recorded = self._record("tag-exists", name)
        if isinstance(recorded, Err):
            return recorded
        return Ok(name in self.tags)

    def is_valid_branch_name(self, name: str) -> bool:
        self.calls.append(("check-ref-format", name))
        return bool(name) and _INVALID_REF_RE.search(name) is None

    def list_branches(self, prefix: str) -> Result[list[str], CommandFailure]:
        recorded = self._record("list-branches", prefix)
        if isinstance(recorded, Err):
            return recorded
        return Ok(sorted(b for b in self.heads if b.startswith(prefix)))

    def list_tags(self) -> Result[list[str], CommandFailure]:
        recorded = self._record("list-tags")
        if isinstance(recorded, Err):
            return recorded
        return Ok(list(self.tags))

    def last_tag(self) -> Result[str | None, CommandFailure]:
        recorded = self._record("last-tag")
        if isinstance(recorded, Err):
            return recorded
        return Ok(next(reversed(self.tags), None))

    def current_branch(self) -> Result[str | None, CommandFailure]:
        recorded = self._record("current-branch")
        if isinstance(recorded, Err):
            return recorded
        return Ok(self.current)

    def compare_with_remote(self, name: str) -> Result[None, CommandFailure | DivergedRemoteError]:
        recorded = self._record("compare-with-remote", name)
        if isinstance(recorded, Err):
            return recorded
        behind = self.behind.get(name, 0)
        if behind > 0:
            return Err(DivergedRemoteError(branch=name, remote=self.remote, behind=behind))
        return Ok(None)

    # -- mutations -----------------------------------------------------------

    def create_and_checkout(self, new_name: str, from_ref: str) -> Result[None, CommandFailure]:
        recorded = self._record("create-and-checkout", new_name, from_ref)
        if isinstance(recorded, Err):
            return recorded
        head = self._resolve(from_ref)
        if head is None:
            return Err(
                CommandFailure(
                    tool="git",
                    command=f"git checkout -b {new_name} {from_ref}",
                    returncode=128,
                    output=f"fatal: '{from_ref}' is not a commit",
                )
            )
        self.heads[new_name] = head
        if from_ref in self.versions:
            self.versions[new_name] = self.versions[from_ref]
        self.current = new_name
        return Ok(None)

    def checkout(self, name: str) -> Result[None, CommandFailure]:
        recorded = self._record("checkout", name)
        if isinstance(recorded, Err):
            return recorded
        if name not in self.heads:
            return Err(
                CommandFailure(
                    tool="git",
                    command=f"git checkout {name}",
                    returncode=1,
                    output=f"error: pathspec '{name}' did not match any file(s) known to git",
                )
            )
        self.current = name
        return Ok(None)

    def merge_no_ff(self, name: str, message: str | None = None) -> Result[None, CommandFailure]:
        recorded = self._record("merge-no-ff", name, message or "")
        if isinstance(recorded, Err):
            return recorded
        self._take_version(name)
        self._new_commit(message or f"Merge branch '{name}'")
        self._merged.add(name)
        return Ok(None)

    def merge_squash(self, name: str) -> Result[None, CommandFailure]:
        recorded = self._record("merge-squash", name)
        if isinstance(recorded, Err):
            return recorded
        self._take_version(name)
        return Ok(None)

    def _take_version(self, source: str) -> None:
        if self.current is not None and source in self.versions:
            self.versions[self.current] = self.versions[source]

    def commit(
        self, message: str, properties: Mapping[str, str] | None = None
    ) -> Result[None, CommandFailure]:
        rendered = render_message(message, properties)
        recorded = self._record("commit", rendered)
        if isinstance(recorded, Err):
            return recorded
        self._new_commit(rendered)
        self.dirty = False
        return Ok(None)

    def tag(self, name: str, message: str) -> Result[None, CommandFailure]:
        recorded = self._record("tag", name, message)
        if isinstance(recorded, Err):
            return recorded
        if self.current is not None:
            self.tags[name] = self.heads[self.current]
            if self.current in self.versions:
                self.versions[name] = self.versions[self.current]
        return Ok(None)

    def delete_branch_local(self, name: str, force: bool = False) -> Result[None, CommandFailure]:
        recorded = self._record("delete-branch-local", name, "force" if force else "safe")
        if isinstance(recorded, Err):
            return recorded
        flag = "-D" if force else "-d"
        if name == self.current:
            return Err(
                CommandFailure(
                    tool="git",
                    command=f"git branch {flag} {name}",
                    returncode=1,
                    output=f"error: Cannot delete branch '{name}' checked out",
                )
            )
        if not force and name not in self._merged:
            return Err(
                CommandFailure(
                    tool="git",
                    command=f"git branch {flag} {name}",
                    returncode=1,
                    output=f"error: The branch '{name}' is not fully merged.",
                )
            )
        self.heads.pop(name, None)
        self.versions.pop(name, None)
        return Ok(None)

    def delete_branch_remote(self, name: str) -> Result[None, CommandFailure]:
        recorded = self._record("delete-branch-remote", name)
        if isinstance(recorded, Err):
            return recorded
        self.remote_branches.discard(name)
        return Ok(None)

    def push(
        self, name: str, force: bool = False, follow_tags: bool = False
    ) -> Result[None, CommandFailure]:
        options = [opt for opt, on in (("force", force), ("follow-tags", follow_tags)) if on]
        recorded = self._record("push", name, *options)
        if isinstance(recorded, Err):
            return recorded
        self.remote_branches.add(name)
        return Ok(None)


class FakeBuildTool:
    """Maven stand-in reading and writing ``vcs.versions[vcs.current]``."""

    def __init__(self, vcs: FakeVersionControl) -> None:
        self._vcs = vcs

    def _record(self, *call: str) -> Result[None, CommandFailure]:
        self._vcs.calls.append(call)
        diagnostic = self._vcs.fail_on.get(call[0])
        if diagnostic is not None:
            return Err(
                CommandFailure(
                    tool="mvn",
                    command="mvn " + " ".join(call),
                    returncode=1,
                    output=diagnostic,
                )
            )
        return Ok(None)

    def current_version(self) -> Result[VersionString, CommandFailure | InvalidVersion]:
        recorded = self._record("current-version")
        if isinstance(recorded, Err):
            return recorded
        current = self._vcs.current
        raw = self._vcs.versions.get(current) if current is not None else None
        if raw is None:
            return Err(
                CommandFailure(
                    tool="mvn",
                    command="mvn help:evaluate -Dexpression=project.version",
                    returncode=1,
                    output="[ERROR] The goal you specified requires a project to execute",
                )
            )
        return VersionString.parse(raw)

    def set_versions(self, version: VersionString) -> Result[None, CommandFailure]:
        recorded = self._record("set-versions", str(version))
        if isinstance(recorded, Err):
            return recorded
        if self._vcs.current is not None:
            self._vcs.versions[self._vcs.current] = str(version)
            self._vcs.dirty = True
        return Ok(None)

    def run_goals(self, goals: str) -> Result[None, CommandFailure]:
        return self._record("run-goals", goals)

    def clean_test(self) -> Result[None, CommandFailure]:
        return self._record("clean-test")

    def clean_install(self) -> Result[None, CommandFailure]:
        return self._record("clean-install")


class ScriptedPrompter:
    """Answers prompts from a fixed list, in order.

    A blank answer falls back to the prompt's default. Running out of
    answers is reported as a cancelled prompt.
    """

    def __init__(self, answers: Sequence[str] = ()) -> None:
        self._answers = list(answers)
        self.questions: list[str] = []

    def _next(self, message: str, default: str | None) -> Result[str, UserCancelled]:
        self.questions.append(message)
        if not self._answers:
            return Err(UserCancelled("no scripted answer left"))
        answer = self._answers.pop(0)
        if not answer.strip() and default is not None:
            return Ok(default)
        return Ok(answer)

    def choose(
        self, message: str, options: Sequence[str], default: str | None = None
    ) -> Result[str, UserCancelled]:
        return self._next(message, default)

    def ask(self, message: str, default: str | None = None) -> Result[str, UserCancelled]:
        return self._next(message, default)
