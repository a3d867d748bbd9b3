"""Console output abstraction.

Workflow steps and tool adapters report progress through
``ConsoleProtocol``. ``RichConsole`` renders to the terminal with Rich;
``MockConsole`` records every line so tests can assert on what an action
reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()  # external commands, skipped steps
    HEADER = auto()  # action banner

    def __str__(self) -> str:
        return self.name.lower()


# Leading word of a status line
_LABELS: dict[Style, str] = {
    Style.SUCCESS: "OK",
    Style.ERROR: "error:",
    Style.WARNING: "warning:",
    Style.INFO: "info:",
}

_RICH_STYLES: dict[Style, str] = {
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.INFO: "cyan",
    Style.DIM: "dim",
    Style.HEADER: "blue bold",
}


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...


class RichConsole:
    """Terminal console backed by Rich.

    Only the label of a status line is colored. Messages are never parsed
    as Rich markup, since branch names and Maven output contain brackets.
    """

    def __init__(self, *, stderr: bool = False) -> None:
        from rich.console import Console

        self._console = Console(stderr=stderr, highlight=False)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._console.print(message, style=_RICH_STYLES.get(style, ""), markup=False)

    def success(self, message: str) -> None:
        self._status(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._status(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._status(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._status(Style.INFO, message)

    def header(self, message: str) -> None:
        self._console.print()
        self.print(message, Style.HEADER)

    def _status(self, style: Style, message: str) -> None:
        from rich.text import Text

        line = Text(_LABELS[style], style=_RICH_STYLES[style])
        line.append(f" {message}")
        self._console.print(line)


@dataclass
class OutputRecord:
    """A single line captured by MockConsole."""

    message: str
    style: Style


@dataclass
class MockConsole:
    """Console that captures output instead of printing it.

    Status lines are stored with their label (``"error: ..."``).
    """

    outputs: list[OutputRecord] = field(default_factory=list[OutputRecord])

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self._status(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._status(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._status(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._status(Style.INFO, message)

    def header(self, message: str) -> None:
        self.print(message, Style.HEADER)

    def _status(self, style: Style, message: str) -> None:
        self.print(f"{_LABELS[style]} {message}", style)

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style is Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """All records whose message contains ``substring``."""
        return [o for o in self.outputs if substring in o.message]

    def styled(self, style: Style) -> list[str]:
        """Messages printed with ``style``, in order."""
        return [o.message for o in self.outputs if o.style is style]
