"""Tests for gitflow.platform.process."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from gitflow.core.result import Err, Ok
from gitflow.platform.process import NOT_STARTED, ProcessError, run


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(command=("git", "status"), returncode=1, stdout="", stderr="x")
        assert str(error) == "git status failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("mvn", "-q", "versions:set", "-DnewVersion=1.0"),
            returncode=1,
            stdout="",
            stderr="",
        )
        assert str(error) == "mvn -q versions:set ... failed (exit 1)"

    def test_diagnostic_prefers_stderr(self) -> None:
        error = ProcessError(("git",), 1, stdout="out\n", stderr="err\n")
        assert error.diagnostic == "err\nout"

    def test_diagnostic_falls_back_to_stdout(self) -> None:
        error = ProcessError(("mvn",), 1, stdout="[ERROR] BUILD FAILURE", stderr="  ")
        assert error.diagnostic == "[ERROR] BUILD FAILURE"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    @patch("subprocess.run")
    def test_success_returns_stdout(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess(["git"], 0, "hello\n", "")

        result = run(["git", "status"], cwd=tmp_path)

        assert result == Ok("hello\n")
        kwargs = mock_run.call_args.kwargs
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["capture_output"] is True
        assert kwargs["check"] is False

    @patch("subprocess.run")
    def test_nonzero_exit_is_error(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess(["git"], 128, "", "fatal: nope")

        result = run(["git", "checkout", "x"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 128
        assert result.error.stderr == "fatal: nope"
        assert result.error.command == ("git", "checkout", "x")

    @patch("subprocess.run")
    def test_timeout(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["git", "fetch"], timeout=5)

        result = run(["git", "fetch"], cwd=tmp_path, timeout=5)

        assert isinstance(result, Err)
        assert result.error.returncode == NOT_STARTED
        assert "timed out" in result.error.stderr

    @patch("subprocess.run")
    def test_command_not_found(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = FileNotFoundError("No such file or directory: 'mvn'")

        result = run(["mvn", "clean"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == NOT_STARTED
        assert "mvn" in result.error.stderr

    @patch("subprocess.run")
    def test_inherits_environment_by_default(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess(["git"], 0, "", "")

        run(["git", "status"], cwd=tmp_path)

        assert mock_run.call_args.kwargs["env"] is None

    @patch("subprocess.run")
    def test_extra_env_is_layered(
        self, mock_run: MagicMock, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HOME", "/home/dev")
        mock_run.return_value = subprocess.CompletedProcess(["git"], 0, "", "")

        run(["git", "fetch"], cwd=tmp_path, extra_env={"GIT_TERMINAL_PROMPT": "0"})

        env = mock_run.call_args.kwargs["env"]
        assert env["GIT_TERMINAL_PROMPT"] == "0"
        assert env["HOME"] == "/home/dev"
