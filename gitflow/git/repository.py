"""Git repository adapter.

Implements the ``VersionControl`` capability by running the ``git`` CLI in
a working tree. Every method returns a Result; a non-zero exit becomes
``CommandFailure`` with git's own diagnostic text.

Usage:
    repo = GitRepository(Path("."), remote="origin")
    match repo.current_branch():
        case Ok(branch):
            print(f"on {branch}")
        case Err(e):
            print(e.message)
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from gitflow.core.result import Err, Ok, Result
from gitflow.flow.commit import render_message
from gitflow.flow.errors import CommandFailure, DivergedRemoteError
from gitflow.output.console import ConsoleProtocol, Style
from gitflow.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 60.0
_GIT_NETWORK_TIMEOUT_SECONDS = 5 * 60.0
_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "ls-remote"})
_NETWORK_ENV = {"GIT_TERMINAL_PROMPT": "0"}

__all__ = ["GitRepository"]


class GitRepository:
    """Git operations on a single working tree.

    Attributes:
        path: Repository root.
        remote: Remote used for fetch, push and remote branch deletion.
    """

    def __init__(
        self,
        path: Path,
        *,
        remote: str = "origin",
        console: ConsoleProtocol | None = None,
    ) -> None:
        self.path = path
        self.remote = remote
        self._console = console

    def exists(self) -> bool:
        """Check if this is a git working tree (.git dir or gitfile)."""
        return (self.path / ".git").exists()

    def has_uncommitted_changes(self) -> Result[bool, CommandFailure]:
        """True if tracked files have staged or unstaged modifications.

        Untracked files do not count.
        """
        unstaged = self._probe(
            ["diff", "--no-ext-diff", "--ignore-submodules", "--quiet", "--exit-code"]
        )
        if isinstance(unstaged, Err):
            return unstaged
        if unstaged.value:
            return Ok(True)
        return self._probe(
            [
                "diff-index",
                "--no-ext-diff",
                "--ignore-submodules",
                "--cached",
                "--quiet",
                "--exit-code",
                "HEAD",
                "--",
            ]
        )

    def branch_exists(self, name: str) -> Result[bool, CommandFailure]:
        return self._ref_exists(f"refs/heads/{name}")

    def tag_exists(self, name: str) -> Result[bool, CommandFailure]:
        return self._ref_exists(f"refs/tags/{name}")

    def remote_branch_exists(self, name: str) -> Result[bool, CommandFailure]:
        """Check the remote-tracking ref (as of the last fetch)."""
        return self._ref_exists(f"refs/remotes/{self.remote}/{name}")

    def is_valid_branch_name(self, name: str) -> bool:
        if not name.strip():
            return False
        result = run_process(
            ["git", "check-ref-format", "--branch", name],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )
        return isinstance(result, Ok)

    def create_and_checkout(self, new_name: str, from_ref: str) -> Result[None, CommandFailure]:
        return self._mutate(["checkout", "-b", new_name, from_ref])

    def checkout(self, name: str) -> Result[None, CommandFailure]:
        return self._mutate(["checkout", name])

    def merge_no_ff(self, name: str, message: str | None = None) -> Result[None, CommandFailure]:
        """Merge ``name`` with a merge commit; git's default message if none given."""
        if message:
            return self._mutate(["merge", "--no-ff", "-m", message, name])
        return self._mutate(["merge", "--no-ff", "--no-edit", name])

    def merge_squash(self, name: str) -> Result[None, CommandFailure]:
        return self._mutate(["merge", "--squash", name])

    def commit(
        self, message: str, properties: Mapping[str, str] | None = None
    ) -> Result[None, CommandFailure]:
        """Commit all tracked changes with a templated message."""
        return self._mutate(["commit", "-a", "-m", render_message(message, properties)])

    def tag(self, name: str, message: str) -> Result[None, CommandFailure]:
        return self._mutate(["tag", "-a", name, "-m", message])

    def delete_branch_local(self, name: str, force: bool = False) -> Result[None, CommandFailure]:
        return self._mutate(["branch", "-D" if force else "-d", name])

    def delete_branch_remote(self, name: str) -> Result[None, CommandFailure]:
        return self._mutate(["push", "--delete", self.remote, name])

    def push(
        self, name: str, force: bool = False, follow_tags: bool = False
    ) -> Result[None, CommandFailure]:
        args = ["push", "--quiet", "-u"]
        if force:
            args.append("--force")
        if follow_tags:
            args.append("--follow-tags")
        args.extend([self.remote, name])
        return self._mutate(args)

    def fetch(self, name: str) -> Result[None, CommandFailure]:
        return self._mutate(["fetch", "--quiet", self.remote, name])

    def list_branches(self, prefix: str) -> Result[list[str], CommandFailure]:
        """Local branches whose name starts with ``prefix``, in ref order."""
        return self._lines(["for-each-ref", "--format=%(refname:short)", f"refs/heads/{prefix}*"])

    def list_tags(self) -> Result[list[str], CommandFailure]:
        """All tags, oldest first."""
        return self._lines(
            ["for-each-ref", "--sort=creatordate", "--format=%(refname:short)", "refs/tags/"]
        )

    def last_tag(self) -> Result[str | None, CommandFailure]:
        """Most recently created tag, or None when there are none."""
        result = self._lines(
            [
                "for-each-ref",
                "--sort=-creatordate",
                "--count=1",
                "--format=%(refname:short)",
                "refs/tags/",
            ]
        )
        match result:
            case Err(_):
                return result
            case Ok(lines):
                return Ok(lines[0] if lines else None)

    def current_branch(self) -> Result[str | None, CommandFailure]:
        """Current branch name, None on a detached HEAD."""
        result = run_process(
            ["git", "symbolic-ref", "-q", "--short", "HEAD"],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )
        match result:
            case Ok(stdout):
                return Ok(stdout.strip() or None)
            case Err(e):
                # exit 1 without output: HEAD is detached
                if e.returncode == 1 and not e.stderr.strip():
                    return Ok(None)
                args = ["symbolic-ref", "-q", "--short", "HEAD"]
                return Err(self._failure(args, e.returncode, e.diagnostic))

    def compare_with_remote(self, name: str) -> Result[None, CommandFailure | DivergedRemoteError]:
        """Fetch ``name`` and fail if the remote has commits the local branch lacks.

        A branch that only exists on the remote is created locally from it.
        A branch that does not exist on the remote passes.
        """
        listing = run_process(
            ["git", "ls-remote", "--heads", self.remote, name],
            cwd=self.path,
            extra_env=_NETWORK_ENV,
            timeout=_GIT_NETWORK_TIMEOUT_SECONDS,
        )
        if isinstance(listing, Err):
            e = listing.error
            args = ["ls-remote", "--heads", self.remote, name]
            return Err(self._failure(args, e.returncode, e.diagnostic))
        if not listing.value.strip():
            self._say(f"{self.remote}/{name} does not exist, skipping comparison")
            return Ok(None)

        fetched = self.fetch(name)
        if isinstance(fetched, Err):
            return fetched

        local = self.branch_exists(name)
        if isinstance(local, Err):
            return local
        if not local.value:
            return self._mutate(["branch", name, f"{self.remote}/{name}"])

        counts = self._run(
            ["rev-list", "--left-right", "--count", f"{name}...{self.remote}/{name}"]
        )
        if isinstance(counts, Err):
            return counts
        ahead, behind = _parse_left_right(counts.value)
        if behind > 0:
            return Err(
                DivergedRemoteError(branch=name, remote=self.remote, ahead=ahead, behind=behind)
            )
        return Ok(None)

    # -- plumbing -----------------------------------------------------------

    def _run(self, args: list[str]) -> Result[str, CommandFailure]:
        if args and args[0] in _NETWORK_COMMANDS:
            result = run_process(
                ["git", *args],
                cwd=self.path,
                extra_env=_NETWORK_ENV,
                timeout=_GIT_NETWORK_TIMEOUT_SECONDS,
            )
        else:
            result = run_process(["git", *args], cwd=self.path, timeout=_GIT_TIMEOUT_SECONDS)
        match result:
            case Ok(stdout):
                return Ok(stdout)
            case Err(e):
                return Err(self._failure(args, e.returncode, e.diagnostic))

    def _mutate(self, args: list[str]) -> Result[None, CommandFailure]:
        self._say(_display(["git", *args]))
        return self._run(args).map(lambda _: None)

    def _lines(self, args: list[str]) -> Result[list[str], CommandFailure]:
        return self._run(args).map(
            lambda out: [ln.strip().strip('"') for ln in out.splitlines() if ln.strip()]
        )

    def _ref_exists(self, ref: str) -> Result[bool, CommandFailure]:
        listed = self._lines(["for-each-ref", "--format=%(refname)", ref])
        return listed.map(lambda refs: ref in refs)

    def _probe(self, args: list[str]) -> Result[bool, CommandFailure]:
        """Run a ``--quiet --exit-code`` command: exit 1 means "yes, differs"."""
        result = run_process(["git", *args], cwd=self.path, timeout=_GIT_TIMEOUT_SECONDS)
        match result:
            case Ok(_):
                return Ok(False)
            case Err(e):
                if e.returncode == 1:
                    return Ok(True)
                return Err(self._failure(args, e.returncode, e.diagnostic))

    def _failure(self, args: list[str], returncode: int, output: str) -> CommandFailure:
        return CommandFailure(
            tool="git", command=_display(["git", *args]), returncode=returncode, output=output
        )

    def _say(self, message: str) -> None:
        if self._console is not None:
            self._console.print(message, Style.DIM)


def _display(cmd: list[str]) -> str:
    return " ".join(f'"{part}"' if " " in part else part for part in cmd)


def _parse_left_right(output: str) -> tuple[int, int]:
    """Parse ``git rev-list --left-right --count`` output into (ahead, behind)."""
    parts = output.split()
    if len(parts) != 2:
        return (0, 0)
    try:
        return (int(parts[0]), int(parts[1]))
    except ValueError:
        return (0, 0)
