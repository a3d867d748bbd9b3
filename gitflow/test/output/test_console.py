"""Tests for gitflow.output.console."""

from __future__ import annotations

import pytest

from gitflow.output.console import MockConsole, RichConsole, Style


class TestMockConsole:
    def test_status_lines_carry_labels(self) -> None:
        console = MockConsole()

        console.success("release-finish completed")
        console.error("branch name is blank")
        console.warning("nothing to push")
        console.info("> checkout-development")

        assert console.messages == [
            "OK release-finish completed",
            "error: branch name is blank",
            "warning: nothing to push",
            "info: > checkout-development",
        ]
        assert console.has_error()

    def test_styled_filters_in_order(self) -> None:
        console = MockConsole()

        console.print("git checkout develop", Style.DIM)
        console.header("feature-finish")
        console.print("git merge --no-ff feature/login", Style.DIM)

        assert console.styled(Style.DIM) == [
            "git checkout develop",
            "git merge --no-ff feature/login",
        ]
        assert console.styled(Style.HEADER) == ["feature-finish"]
        assert not console.has_error()

    def test_find(self) -> None:
        console = MockConsole()
        console.print("mvn clean test")
        console.print("mvn clean install")

        assert [r.message for r in console.find("install")] == ["mvn clean install"]


class TestRichConsole:
    def test_brackets_are_not_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()

        console.print("[ERROR] BUILD FAILURE", Style.DIM)
        console.error("cannot merge [feature/login]")

        out = capsys.readouterr().out
        assert "[ERROR] BUILD FAILURE" in out
        assert "error: cannot merge [feature/login]" in out

    def test_header_is_preceded_by_blank_line(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().header("hotfix-start")

        assert capsys.readouterr().out == "\nhotfix-start\n"
