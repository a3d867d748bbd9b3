"""Tests for gitflow.git.repository."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from gitflow.core.result import Err, Ok
from gitflow.flow.errors import CommandFailure, DivergedRemoteError
from gitflow.git.repository import GitRepository, _parse_left_right
from gitflow.output.console import MockConsole, Style


def _done(
    stdout: str = "", returncode: int = 0, stderr: str = ""
) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess([], returncode, stdout, stderr)


def _argv(mock_run: MagicMock) -> list[list[str]]:
    return [c.args[0] for c in mock_run.call_args_list]


class TestExists:
    def test_git_dir(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        assert GitRepository(tmp_path).exists()

    def test_plain_directory(self, tmp_path: Path) -> None:
        assert not GitRepository(tmp_path).exists()


class TestUncommittedChanges:
    @patch("subprocess.run")
    def test_clean_tree(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done()

        assert GitRepository(tmp_path).has_uncommitted_changes() == Ok(False)
        assert mock_run.call_count == 2

    @patch("subprocess.run")
    def test_unstaged_changes_short_circuit(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(returncode=1)

        assert GitRepository(tmp_path).has_uncommitted_changes() == Ok(True)
        assert mock_run.call_count == 1

    @patch("subprocess.run")
    def test_staged_changes(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = [_done(), _done(returncode=1)]

        assert GitRepository(tmp_path).has_uncommitted_changes() == Ok(True)
        assert _argv(mock_run)[1][:2] == ["git", "diff-index"]

    @patch("subprocess.run")
    def test_git_error(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(returncode=128, stderr="fatal: not a git repository")

        result = GitRepository(tmp_path).has_uncommitted_changes()

        assert isinstance(result, Err)
        assert result.error.returncode == 128
        assert "not a git repository" in result.error.output


class TestRefs:
    @patch("subprocess.run")
    def test_branch_exists_exact_match(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done("refs/heads/feature/login\n")

        assert GitRepository(tmp_path).branch_exists("feature/login") == Ok(True)
        assert _argv(mock_run)[0] == [
            "git",
            "for-each-ref",
            "--format=%(refname)",
            "refs/heads/feature/login",
        ]

    @patch("subprocess.run")
    def test_branch_missing(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done("")

        assert GitRepository(tmp_path).branch_exists("feature/nope") == Ok(False)

    @patch("subprocess.run")
    def test_tag_exists(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done("refs/tags/1.0.0\n")

        assert GitRepository(tmp_path).tag_exists("1.0.0") == Ok(True)

    @patch("subprocess.run")
    def test_list_branches(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done("feature/a\nfeature/b\n\n")

        assert GitRepository(tmp_path).list_branches("feature/") == Ok(["feature/a", "feature/b"])
        assert _argv(mock_run)[0][-1] == "refs/heads/feature/*"

    @patch("subprocess.run")
    def test_last_tag_none(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done("")

        assert GitRepository(tmp_path).last_tag() == Ok(None)

    @patch("subprocess.run")
    def test_last_tag(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done("1.1.0\n")

        assert GitRepository(tmp_path).last_tag() == Ok("1.1.0")
        assert "--sort=-creatordate" in _argv(mock_run)[0]

    @patch("subprocess.run")
    def test_current_branch(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done("develop\n")

        assert GitRepository(tmp_path).current_branch() == Ok("develop")

    @patch("subprocess.run")
    def test_current_branch_detached(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(returncode=1)

        assert GitRepository(tmp_path).current_branch() == Ok(None)

    @patch("subprocess.run")
    def test_valid_branch_name(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = [_done("feature/x\n"), _done(returncode=1, stderr="fatal")]
        repo = GitRepository(tmp_path)

        assert repo.is_valid_branch_name("feature/x") is True
        assert repo.is_valid_branch_name("feature/a..b") is False

    def test_blank_branch_name_is_invalid_without_git(self, tmp_path: Path) -> None:
        with patch("subprocess.run") as mock_run:
            assert GitRepository(tmp_path).is_valid_branch_name("  ") is False
            mock_run.assert_not_called()


class TestMutations:
    @patch("subprocess.run")
    def test_merge_no_ff_with_message(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done()

        assert GitRepository(tmp_path).merge_no_ff("feature/x", "Merge x") == Ok(None)
        assert _argv(mock_run)[0] == ["git", "merge", "--no-ff", "-m", "Merge x", "feature/x"]

    @patch("subprocess.run")
    def test_merge_no_ff_default_message(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done()

        GitRepository(tmp_path).merge_no_ff("feature/x")

        assert _argv(mock_run)[0] == ["git", "merge", "--no-ff", "--no-edit", "feature/x"]

    @patch("subprocess.run")
    def test_commit_renders_template(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done()

        GitRepository(tmp_path).commit("Release {{version}}", {"version": "1.0.0"})

        assert _argv(mock_run)[0] == ["git", "commit", "-a", "-m", "Release 1.0.0"]

    @patch("subprocess.run")
    def test_delete_branch_force(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done()
        repo = GitRepository(tmp_path)

        repo.delete_branch_local("feature/x")
        repo.delete_branch_local("feature/y", force=True)

        assert _argv(mock_run) == [
            ["git", "branch", "-d", "feature/x"],
            ["git", "branch", "-D", "feature/y"],
        ]

    @patch("subprocess.run")
    def test_push_options(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done()

        GitRepository(tmp_path, remote="upstream").push("master", follow_tags=True)

        assert _argv(mock_run)[0] == [
            "git",
            "push",
            "--quiet",
            "-u",
            "--follow-tags",
            "upstream",
            "master",
        ]

    @patch("subprocess.run")
    def test_network_commands_never_prompt(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done()
        repo = GitRepository(tmp_path)

        repo.push("develop")
        repo.checkout("develop")

        push_env, checkout_env = (c.kwargs["env"] for c in mock_run.call_args_list)
        assert push_env["GIT_TERMINAL_PROMPT"] == "0"
        assert checkout_env is None

    @patch("subprocess.run")
    def test_delete_remote(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done()

        GitRepository(tmp_path).delete_branch_remote("feature/x")

        assert _argv(mock_run)[0] == ["git", "push", "--delete", "origin", "feature/x"]

    @patch("subprocess.run")
    def test_failure_carries_diagnostic(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done(
            returncode=1, stderr="error: The branch 'feature/x' is not fully merged."
        )

        result = GitRepository(tmp_path).delete_branch_local("feature/x")

        assert result == Err(
            CommandFailure(
                tool="git",
                command="git branch -d feature/x",
                returncode=1,
                output="error: The branch 'feature/x' is not fully merged.",
            )
        )

    @patch("subprocess.run")
    def test_mutations_are_echoed(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done()
        console = MockConsole()

        GitRepository(tmp_path, console=console).commit("Update versions", None)

        assert console.styled(Style.DIM) == ['git commit -a -m "Update versions"']


class TestCompareWithRemote:
    @patch("subprocess.run")
    def test_missing_on_remote_passes(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _done("")

        assert GitRepository(tmp_path).compare_with_remote("develop") == Ok(None)
        assert mock_run.call_count == 1

    @patch("subprocess.run")
    def test_up_to_date(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = [
            _done("abc123\trefs/heads/develop\n"),
            _done(),
            _done("refs/heads/develop\n"),
            _done("2\t0\n"),
        ]

        assert GitRepository(tmp_path).compare_with_remote("develop") == Ok(None)
        assert _argv(mock_run)[3] == [
            "git",
            "rev-list",
            "--left-right",
            "--count",
            "develop...origin/develop",
        ]

    @patch("subprocess.run")
    def test_behind_is_diverged(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = [
            _done("abc123\trefs/heads/develop\n"),
            _done(),
            _done("refs/heads/develop\n"),
            _done("1\t3\n"),
        ]

        result = GitRepository(tmp_path).compare_with_remote("develop")

        assert result == Err(
            DivergedRemoteError(branch="develop", remote="origin", ahead=1, behind=3)
        )

    @patch("subprocess.run")
    def test_remote_only_branch_is_created(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = [
            _done("abc123\trefs/heads/release/1.0\n"),
            _done(),
            _done(""),
            _done(),
        ]

        assert GitRepository(tmp_path).compare_with_remote("release/1.0") == Ok(None)
        assert _argv(mock_run)[3] == ["git", "branch", "release/1.0", "origin/release/1.0"]


class TestParseLeftRight:
    def test_counts(self) -> None:
        assert _parse_left_right("4\t1\n") == (4, 1)

    def test_garbage(self) -> None:
        assert _parse_left_right("fatal") == (0, 0)
