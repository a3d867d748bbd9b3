"""Tests for gitflow.cli.prompt."""

from __future__ import annotations

import pytest
import typer

from gitflow.cli.prompt import TerminalPrompter
from gitflow.core.result import Err, Ok
from gitflow.flow.errors import UserCancelled


def test_ask_returns_answer(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, object] = {}

    def fake_prompt(text: str, **kwargs: object) -> str:
        seen["text"] = text
        seen.update(kwargs)
        return "1.2.0"

    monkeypatch.setattr(typer, "prompt", fake_prompt)

    assert TerminalPrompter().ask("What is release version?", "1.1.0") == Ok("1.2.0")
    assert seen["text"] == "What is release version?"
    assert seen["default"] == "1.1.0"
    assert seen["show_default"] is True


def test_choose_lists_options(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[str] = []

    def fake_prompt(text: str, **kwargs: object) -> str:
        seen.append(text)
        return "1.1.0"

    monkeypatch.setattr(typer, "prompt", fake_prompt)

    assert TerminalPrompter().choose("Choose tag", ["1.0.0", "1.1.0"]) == Ok("1.1.0")
    assert seen == ["Choose tag (1.0.0/1.1.0)"]


def test_abort_is_cancelled(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_prompt(text: str, **kwargs: object) -> str:
        raise typer.Abort()

    monkeypatch.setattr(typer, "prompt", fake_prompt)

    assert TerminalPrompter().ask("name?") == Err(UserCancelled())
