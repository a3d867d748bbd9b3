"""Tests for gitflow.core.config."""

from __future__ import annotations

from pathlib import Path

from gitflow.core.config import (
    CONFIG_FILENAME,
    FlowConfig,
    load_config,
    load_config_or_default,
)
from gitflow.core.result import Err, Ok


class TestDefaults:
    def test_branch_defaults(self) -> None:
        config = FlowConfig()
        assert config.branches.feature == "feature/"
        assert config.branches.release == "release/"
        assert config.branches.hotfix == "hotfix/"
        assert config.branches.support == "support/"
        assert config.branches.development == "develop"
        assert config.branches.production == "master"
        assert config.branches.remote == "origin"

    def test_flag_defaults(self) -> None:
        config = FlowConfig()
        assert config.interactive is True
        assert config.push_remote is True
        assert config.fetch_remote is True
        assert config.install_project is False
        assert config.version_digit_to_increment is None
        assert config.feature.squash is False
        assert config.support.use_snapshot is False

    def test_merge_templates_default_to_git_message(self) -> None:
        assert FlowConfig().messages.feature_dev_merge == ""


class TestFromDict:
    def test_empty_mapping_gives_defaults(self) -> None:
        assert FlowConfig.from_dict({}) == FlowConfig()

    def test_tables_are_read(self) -> None:
        config = FlowConfig.from_dict(
            {
                "push_remote": False,
                "version_digit_to_increment": 1,
                "version_tag_prefix": "v",
                "branches": {"development": "dev", "production": "main"},
                "feature": {"squash": True, "post_finish_goals": "  verify  "},
                "release": {"skip_tag": True},
                "support": {"use_snapshot": True},
                "messages": {"feature_finish": "[finish] {{featureName}}"},
                "maven": {"executable": "./mvnw", "args": "-B -q"},
            }
        )
        assert config.push_remote is False
        assert config.version_digit_to_increment == 1
        assert config.version_tag_prefix == "v"
        assert config.branches.development == "dev"
        assert config.branches.production == "main"
        assert config.branches.feature == "feature/"
        assert config.feature.squash is True
        assert config.feature.post_finish_goals == "verify"
        assert config.release.skip_tag is True
        assert config.support.use_snapshot is True
        assert config.messages.feature_finish == "[finish] {{featureName}}"
        assert config.messages.release_start == FlowConfig().messages.release_start
        assert config.maven.executable == "./mvnw"
        assert config.maven.args == "-B -q"

    def test_wrong_types_fall_back_to_defaults(self) -> None:
        config = FlowConfig.from_dict(
            {"push_remote": "no", "version_digit_to_increment": True, "feature": "x"}
        )
        assert config.push_remote is True
        assert config.version_digit_to_increment is None
        assert config.feature == FlowConfig().feature


class TestLoadConfig:
    def test_load_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text(
            'interactive = false\n\n[branches]\nproduction = "main"\n', encoding="utf-8"
        )

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.interactive is False
        assert result.value.branches.production == "main"

    def test_missing_file_is_error(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "missing.toml")

        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[branches\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_or_default_without_file(self, tmp_path: Path) -> None:
        result = load_config_or_default(tmp_path / CONFIG_FILENAME)

        assert result == Ok(FlowConfig())

    def test_or_default_still_reports_broken_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("push_remote = \n", encoding="utf-8")

        assert isinstance(load_config_or_default(path), Err)
