"""Terminal prompting behind the ``Prompter`` capability."""

from __future__ import annotations

from collections.abc import Sequence

import typer

from gitflow.core.result import Err, Ok, Result
from gitflow.flow.errors import UserCancelled

__all__ = ["TerminalPrompter"]


class TerminalPrompter:
    """Ask the operator with ``typer.prompt``.

    Ctrl-C and end of input become ``UserCancelled``. An empty answer with
    no default comes back as "" so the caller can ask again.
    """

    def choose(
        self, message: str, options: Sequence[str], default: str | None = None
    ) -> Result[str, UserCancelled]:
        return self._prompt(f"{message} ({'/'.join(options)})", default)

    def ask(self, message: str, default: str | None = None) -> Result[str, UserCancelled]:
        return self._prompt(message, default)

    def _prompt(self, message: str, default: str | None) -> Result[str, UserCancelled]:
        try:
            answer = typer.prompt(
                message,
                default=default if default is not None else "",
                show_default=default is not None,
            )
        except typer.Abort:
            return Err(UserCancelled())
        return Ok(str(answer))
