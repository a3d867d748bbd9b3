"""Blocking command execution for the git and Maven adapters.

Every external call of a workflow goes through ``run``. The call blocks
until the tool exits and captures both streams. Anything other than exit 0
comes back as a ``ProcessError`` value, including a tool that never started
or one that outlived its timeout (both reported with return code -1).

Usage:
    result = run(["git", "rev-parse", "HEAD"], cwd=repo)
    match result:
        case Ok(stdout):
            head = stdout.strip()
        case Err(error):
            print(error.diagnostic)
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from gitflow.core.result import Err, Ok, Result

__all__ = ["NOT_STARTED", "ProcessError", "run"]

NOT_STARTED = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that did not exit cleanly.

    Attributes:
        command: argv as issued.
        returncode: Exit status, ``NOT_STARTED`` if the process never ran to completion.
        stdout: Captured standard output.
        stderr: Captured standard error, or the reason the process never ran.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @classmethod
    def not_started(cls, cmd: Sequence[str], reason: str, stdout: str = "") -> ProcessError:
        return cls(command=tuple(cmd), returncode=NOT_STARTED, stdout=stdout, stderr=reason)

    @property
    def diagnostic(self) -> str:
        """Whatever the tool said about the failure, stderr first."""
        return "\n".join(p.strip() for p in (self.stderr, self.stdout) if p.strip())

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def run(
    cmd: Sequence[str],
    cwd: Path,
    *,
    extra_env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` and return its stdout.

    ``extra_env`` is layered over the inherited environment. Without a
    timeout the call blocks until the tool exits.
    """
    env = {**os.environ, **extra_env} if extra_env else None
    try:
        proc = subprocess.run(
            list(cmd),
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return Err(ProcessError.not_started(cmd, f"Command timed out after {timeout}s", partial))
    except OSError as e:
        return Err(ProcessError.not_started(cmd, str(e)))

    if proc.returncode != 0:
        return Err(ProcessError(tuple(cmd), proc.returncode, proc.stdout, proc.stderr))
    return Ok(proc.stdout)
