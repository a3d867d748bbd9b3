"""Capabilities the workflow engine drives.

The engine never spawns processes itself. It issues ordered calls against
these three protocols: ``GitRepository`` and ``MavenProject`` implement
them for real, ``gitflow.flow.fakes`` implements them in memory.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol

from gitflow.core.result import Result
from gitflow.flow.errors import (
    CommandFailure,
    DivergedRemoteError,
    InvalidVersion,
    UserCancelled,
)
from gitflow.flow.version import VersionString

__all__ = ["BuildTool", "Prompter", "VersionControl"]


class VersionControl(Protocol):
    """Version-control operations.

    Every mutating call returns ``Err(CommandFailure)`` carrying the tool's
    diagnostic text when the command exits non-zero.
    """

    def has_uncommitted_changes(self) -> Result[bool, CommandFailure]: ...

    def branch_exists(self, name: str) -> Result[bool, CommandFailure]: ...

    def tag_exists(self, name: str) -> Result[bool, CommandFailure]: ...

    def is_valid_branch_name(self, name: str) -> bool: ...

    def create_and_checkout(
        self, new_name: str, from_ref: str
    ) -> Result[None, CommandFailure]: ...

    def checkout(self, name: str) -> Result[None, CommandFailure]: ...

    def merge_no_ff(
        self, name: str, message: str | None = None
    ) -> Result[None, CommandFailure]: ...

    def merge_squash(self, name: str) -> Result[None, CommandFailure]: ...

    def commit(
        self, message: str, properties: Mapping[str, str] | None = None
    ) -> Result[None, CommandFailure]: ...

    def tag(self, name: str, message: str) -> Result[None, CommandFailure]: ...

    def delete_branch_local(
        self, name: str, force: bool = False
    ) -> Result[None, CommandFailure]: ...

    def delete_branch_remote(self, name: str) -> Result[None, CommandFailure]: ...

    def push(
        self, name: str, force: bool = False, follow_tags: bool = False
    ) -> Result[None, CommandFailure]: ...

    def list_branches(self, prefix: str) -> Result[list[str], CommandFailure]: ...

    def list_tags(self) -> Result[list[str], CommandFailure]: ...

    def last_tag(self) -> Result[str | None, CommandFailure]: ...

    def current_branch(self) -> Result[str | None, CommandFailure]: ...

    def compare_with_remote(
        self, name: str
    ) -> Result[None, CommandFailure | DivergedRemoteError]: ...


class BuildTool(Protocol):
    """Build-tool operations on the project in the current working tree."""

    def current_version(self) -> Result[VersionString, CommandFailure | InvalidVersion]: ...

    def set_versions(self, version: VersionString) -> Result[None, CommandFailure]: ...

    def run_goals(self, goals: str) -> Result[None, CommandFailure]: ...

    def clean_test(self) -> Result[None, CommandFailure]: ...

    def clean_install(self) -> Result[None, CommandFailure]: ...


class Prompter(Protocol):
    """Blocking question-and-answer with the operator."""

    def choose(
        self, message: str, options: Sequence[str], default: str | None = None
    ) -> Result[str, UserCancelled]:
        """Return one of ``options`` (or "" when nothing was entered and there is no default)."""
        ...

    def ask(self, message: str, default: str | None = None) -> Result[str, UserCancelled]:
        """Return free text ("" when nothing was entered and there is no default)."""
        ...
