"""Maven project adapter.

Implements the ``BuildTool`` capability by running ``mvn`` in the project
root. Output is captured so a failing build can be reported with Maven's
own error text.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from gitflow.core.result import Err, Ok, Result
from gitflow.flow.errors import CommandFailure, InvalidVersion
from gitflow.flow.version import VersionString
from gitflow.output.console import ConsoleProtocol, Style
from gitflow.platform.process import run as run_process

__all__ = ["MavenProject"]


class MavenProject:
    """Maven invocations for one project.

    Attributes:
        path: Directory containing the root ``pom.xml``.
        executable: The ``mvn`` binary (or wrapper such as ``./mvnw``).
        extra_args: Arguments appended to every invocation.
    """

    def __init__(
        self,
        path: Path,
        *,
        executable: str = "mvn",
        extra_args: str | None = None,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self.path = path
        self.executable = executable
        self.extra_args: tuple[str, ...] = tuple(shlex.split(extra_args)) if extra_args else ()
        self._console = console

    def current_version(self) -> Result[VersionString, CommandFailure | InvalidVersion]:
        """Evaluate ``project.version`` of the root pom."""
        result = self._mvn(
            [
                "-q",
                "-N",
                "help:evaluate",
                "-Dexpression=project.version",
                "-DforceStdout",
            ],
            announce=False,
        )
        if isinstance(result, Err):
            return result
        lines = [ln.strip() for ln in result.value.splitlines() if ln.strip()]
        if not lines:
            return Err(InvalidVersion(""))
        return VersionString.parse(lines[-1])

    def set_versions(self, version: VersionString) -> Result[None, CommandFailure]:
        result = self._mvn(
            [
                "versions:set",
                f"-DnewVersion={version}",
                "-DgenerateBackupPoms=false",
            ]
        )
        return result.map(lambda _: None)

    def run_goals(self, goals: str) -> Result[None, CommandFailure]:
        """Run a whitespace-separated goal string, e.g. ``"clean verify -Pci"``."""
        return self._mvn(shlex.split(goals)).map(lambda _: None)

    def clean_test(self) -> Result[None, CommandFailure]:
        return self._mvn(["clean", "test"]).map(lambda _: None)

    def clean_install(self) -> Result[None, CommandFailure]:
        return self._mvn(["clean", "install"]).map(lambda _: None)

    def _mvn(self, args: list[str], *, announce: bool = True) -> Result[str, CommandFailure]:
        cmd = [self.executable, *args, *self.extra_args]
        if announce and self._console is not None:
            self._console.print(" ".join(cmd), Style.DIM)
        # builds may legitimately run for a long time: no timeout
        result = run_process(cmd, cwd=self.path)
        match result:
            case Ok(stdout):
                return Ok(stdout)
            case Err(e):
                return Err(
                    CommandFailure(
                        tool="mvn",
                        command=" ".join(cmd),
                        returncode=e.returncode,
                        output=e.diagnostic,
                    )
                )
