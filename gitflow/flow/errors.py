"""Error types for workflow actions.

Every step of a workflow returns ``Result[..., FlowError]``. The first
``Err`` aborts the action; nothing is rolled back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

__all__ = [
    "CommandFailure",
    "ConfigurationError",
    "DivergedRemoteError",
    "FlowError",
    "InvalidVersion",
    "ResolutionError",
    "UncommittedChanges",
    "UserCancelled",
]


@dataclass(frozen=True, slots=True)
class ConfigurationError:
    """Invalid configuration, detected before any external call."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class UncommittedChanges:
    """The working tree has modifications to tracked files."""

    message: str = (
        "You have some uncommitted files. Commit or discard local changes in order to proceed."
    )
    hint: str | None = "Run: git status"


@dataclass(frozen=True, slots=True)
class ResolutionError:
    """A branch or tag cannot be determined, or fails its existence check."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class DivergedRemoteError:
    """The remote branch has commits the local branch does not."""

    branch: str
    remote: str
    ahead: int = 0
    behind: int = 0

    @property
    def message(self) -> str:
        return (
            f"remote branch '{self.remote}/{self.branch}' is ahead of the local branch "
            f"(local ahead {self.ahead}, behind {self.behind})"
        )

    @property
    def hint(self) -> str:
        return f"Run: git checkout {self.branch} && git pull"


@dataclass(frozen=True, slots=True)
class CommandFailure:
    """An external tool exited non-zero.

    Attributes:
        tool: Which collaborator failed.
        command: The command line that was run.
        returncode: Process exit code (-1 if the process could not start).
        output: Raw diagnostic text from the tool.
    """

    tool: Literal["git", "mvn"]
    command: str
    returncode: int
    output: str = ""

    @property
    def message(self) -> str:
        return f"{self.command} failed (exit {self.returncode})"

    @property
    def hint(self) -> str | None:
        text = self.output.strip()
        if not text:
            return None
        lines = text.splitlines()
        # mvn prints a wall of text; the tail carries the error
        return "\n".join(lines[-8:])


@dataclass(frozen=True, slots=True)
class UserCancelled:
    message: str = "prompt cancelled"
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class InvalidVersion:
    """A string that is not a ``major.minor.patch[-qualifier]`` version."""

    value: str

    @property
    def message(self) -> str:
        return f"invalid version: '{self.value}'"

    @property
    def hint(self) -> str:
        return "Expected MAJOR.MINOR.PATCH[-QUALIFIER], e.g. 1.4.0-SNAPSHOT"


FlowError = (
    ConfigurationError
    | UncommittedChanges
    | ResolutionError
    | DivergedRemoteError
    | CommandFailure
    | UserCancelled
    | InvalidVersion
)
