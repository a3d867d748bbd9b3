"""Feature start/finish driven through the engine with in-memory collaborators."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from gitflow.core.config import CommitMessages, FeatureConfig, FlowConfig
from gitflow.flow.engine import WorkflowEngine
from gitflow.flow.errors import CommandFailure, DivergedRemoteError, UncommittedChanges
from gitflow.flow.fakes import FakeBuildTool, FakeVersionControl, ScriptedPrompter
from gitflow.output.console import MockConsole

BATCH = FlowConfig(interactive=False, push_remote=False, fetch_remote=False)


def _engine(
    vcs: FakeVersionControl,
    config: FlowConfig = BATCH,
    answers: Sequence[str] = (),
) -> WorkflowEngine:
    return WorkflowEngine(
        config,
        vcs=vcs,
        build=FakeBuildTool(vcs),
        prompter=ScriptedPrompter(answers),
        console=MockConsole(),
    )


def _login_repo() -> FakeVersionControl:
    return FakeVersionControl(
        branches={"develop": "2.1.0-SNAPSHOT", "feature/login": "2.1.0-login"},
        current="develop",
    )


class TestFeatureFinish:
    def test_finish_strips_qualifier_and_merges(self) -> None:
        vcs = _login_repo()
        config = replace(
            BATCH,
            messages=CommitMessages(feature_finish="Finish {{featureName}} at {{version}}"),
        )

        result = _engine(vcs, config).feature_finish(name="login")

        assert result.success, result.describe()
        assert vcs.calls == [
            ("has-uncommitted-changes",),
            ("branch-exists", "feature/login"),
            ("checkout", "feature/login"),
            ("clean-test",),
            ("current-version",),
            ("set-versions", "2.1.0"),
            ("commit", "Finish login at 2.1.0"),
            ("checkout", "develop"),
            ("merge-no-ff", "feature/login", ""),
            ("delete-branch-local", "feature/login", "safe"),
        ]
        assert vcs.versions["develop"] == "2.1.0"
        assert "feature/login" not in vcs.heads
        assert result.skipped == (
            "compare-remote",
            "pre-finish-goals",
            "increment-version",
            "squash-merge",
            "post-finish-goals",
            "install",
            "restore-feature-version",
            "push-development",
            "push-branch",
            "delete-remote-branch",
        )

    def test_dirty_tree_fails_fast(self) -> None:
        vcs = _login_repo()
        vcs.dirty = True

        result = _engine(vcs).feature_finish(name="login")

        assert result.error == UncommittedChanges()
        assert result.failed_step == "check-clean"
        assert vcs.calls == [("has-uncommitted-changes",)]

    def test_version_without_qualifier_is_not_committed(self) -> None:
        vcs = FakeVersionControl(
            branches={"develop": "2.1.0-SNAPSHOT", "feature/login": "2.1.0-SNAPSHOT"},
            current="develop",
        )

        result = _engine(vcs).feature_finish(branch="feature/login")

        assert result.success
        assert "set-versions" not in vcs.names()
        assert "strip-feature-version" in result.skipped

    def test_squash_uses_branch_name_and_force_delete(self) -> None:
        vcs = _login_repo()
        config = replace(BATCH, feature=FeatureConfig(squash=True, skip_test=True))

        result = _engine(vcs, config).feature_finish(name="login")

        assert result.success, result.describe()
        assert ("merge-squash", "feature/login") in vcs.calls
        assert "merge-no-ff" not in vcs.names()
        assert vcs.commits_on("develop") == ["feature/login"]
        assert vcs.calls[-1] == ("delete-branch-local", "feature/login", "force")

    def test_keep_branch_restores_feature_version(self) -> None:
        vcs = _login_repo()
        config = replace(BATCH, feature=FeatureConfig(keep_branch=True, skip_test=True))

        result = _engine(vcs, config).feature_finish(name="login")

        assert result.success, result.describe()
        assert vcs.calls[-3:] == [
            ("checkout", "feature/login"),
            ("set-versions", "2.1.0-login"),
            ("commit", CommitMessages().feature_update_back),
        ]
        assert vcs.versions["feature/login"] == "2.1.0-login"
        assert vcs.versions["develop"] == "2.1.0"
        assert "delete-branch-local" not in vcs.names()

    def test_increment_at_finish(self) -> None:
        vcs = FakeVersionControl(
            branches={"develop": "2.1.0-SNAPSHOT", "feature/login": "2.1.0-login-SNAPSHOT"},
            current="develop",
        )
        config = replace(
            BATCH, feature=FeatureConfig(increment_version_at_finish=True, skip_test=True)
        )

        result = _engine(vcs, config).feature_finish(name="login")

        assert result.success, result.describe()
        set_versions = [c[1] for c in vcs.calls if c[0] == "set-versions"]
        assert set_versions == ["2.1.1-login-SNAPSHOT", "2.1.1-SNAPSHOT"]
        assert vcs.versions["develop"] == "2.1.1-SNAPSHOT"

    def test_push_and_remote_delete(self) -> None:
        vcs = _login_repo()
        config = replace(BATCH, push_remote=True, feature=FeatureConfig(skip_test=True))

        result = _engine(vcs, config).feature_finish(name="login")

        assert result.success, result.describe()
        assert vcs.calls[-3:] == [
            ("push", "develop"),
            ("delete-branch-remote", "feature/login"),
            ("delete-branch-local", "feature/login", "safe"),
        ]

    def test_goals_run_around_merge(self) -> None:
        vcs = _login_repo()
        config = replace(
            BATCH,
            install_project=True,
            feature=FeatureConfig(
                skip_test=True, pre_finish_goals="verify", post_finish_goals="site"
            ),
        )

        result = _engine(vcs, config).feature_finish(name="login")

        assert result.success, result.describe()
        names = vcs.names()
        assert names.index("run-goals") < names.index("merge-no-ff")
        assert ("run-goals", "site") in vcs.calls
        assert names.index("clean-install") > names.index("merge-no-ff")

    def test_remote_ahead_aborts_before_checkout(self) -> None:
        vcs = _login_repo()
        vcs.behind["develop"] = 2

        result = _engine(vcs, replace(BATCH, fetch_remote=True)).feature_finish(name="login")

        assert isinstance(result.error, DivergedRemoteError)
        assert result.error.behind == 2
        assert result.failed_step == "compare-remote"
        assert "checkout" not in vcs.names()

    def test_failing_tests_stop_the_action(self) -> None:
        vcs = _login_repo()
        vcs.fail_on["clean-test"] = "[ERROR] Tests run: 3, Failures: 1"

        result = _engine(vcs).feature_finish(name="login")

        assert isinstance(result.error, CommandFailure)
        assert result.error.tool == "mvn"
        assert result.failed_step == "test"
        assert vcs.names()[-1] == "clean-test"
        assert vcs.current == "feature/login"

    def test_interactive_choice(self) -> None:
        vcs = _login_repo()
        config = replace(BATCH, interactive=True, feature=FeatureConfig(skip_test=True))

        result = _engine(vcs, config, answers=["1"]).feature_finish()

        assert result.success, result.describe()
        assert ("merge-no-ff", "feature/login", "") in vcs.calls


class TestFeatureStart:
    def test_start_sets_feature_version(self) -> None:
        vcs = FakeVersionControl(branches={"develop": "1.3.0-SNAPSHOT"}, current="develop")
        config = replace(BATCH, push_remote=True, fetch_remote=True)

        result = _engine(vcs, config).feature_start(name="login")

        assert result.success, result.describe()
        assert vcs.current == "feature/login"
        assert vcs.versions["feature/login"] == "1.3.0-login-SNAPSHOT"
        assert vcs.versions["develop"] == "1.3.0-SNAPSHOT"
        assert vcs.commits_on("feature/login") == [CommitMessages().feature_start]
        names = vcs.names()
        assert names.index("compare-with-remote") < names.index("create-and-checkout")
        assert vcs.calls[-1] == ("push", "feature/login")

    def test_start_existing_branch_fails(self) -> None:
        vcs = _login_repo()

        result = _engine(vcs).feature_start(name="login")

        assert result.failed_step == "resolve-branch"
        assert result.error is not None
        assert "already exists" in result.error.message
        assert "create-and-checkout" not in vcs.names()

    def test_start_prompts_for_name(self) -> None:
        vcs = FakeVersionControl(branches={"develop": "1.3.0-SNAPSHOT"}, current="develop")
        config = replace(BATCH, interactive=True)

        result = _engine(vcs, config, answers=["", "search"]).feature_start()

        assert result.success, result.describe()
        assert vcs.current == "feature/search"

    def test_start_without_name_in_batch_mode(self) -> None:
        vcs = FakeVersionControl(branches={"develop": "1.3.0-SNAPSHOT"}, current="develop")

        result = _engine(vcs).feature_start()

        assert result.error is not None
        assert result.error.message == "Feature branch name is blank"

    def test_skip_feature_version(self) -> None:
        vcs = FakeVersionControl(branches={"develop": "1.3.0-SNAPSHOT"}, current="develop")
        config = replace(BATCH, feature=FeatureConfig(skip_feature_version=True))

        result = _engine(vcs, config).feature_start(name="login")

        assert result.success
        assert vcs.versions["feature/login"] == "1.3.0-SNAPSHOT"
        assert vcs.commits == []
