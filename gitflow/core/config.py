"""Typed configuration loading and access.

Configuration is read once per invocation from ``.gitflow.toml`` at the
project root and is immutable afterwards. CLI flags are layered on top with
``dataclasses.replace``.

Example ``.gitflow.toml``:

    push_remote = false
    version_tag_prefix = "v"

    [branches]
    development = "dev"
    production = "main"

    [feature]
    squash = true
    post_finish_goals = "verify"

    [messages]
    feature_finish = "[release] {{featureName}} -> {{version}}"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_int, get_raw_str, get_str, get_table

__all__ = [
    "CONFIG_FILENAME",
    "BranchConfig",
    "CommitMessages",
    "ConfigError",
    "FeatureConfig",
    "FlowConfig",
    "HotfixConfig",
    "MavenConfig",
    "ReleaseConfig",
    "SupportConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = ".gitflow.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the config file cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class BranchConfig:
    """Branch naming: category prefixes and the two long-lived branches."""

    feature: str = "feature/"
    release: str = "release/"
    hotfix: str = "hotfix/"
    support: str = "support/"
    development: str = "develop"
    production: str = "master"
    remote: str = "origin"


@dataclass(frozen=True, slots=True)
class FeatureConfig:
    keep_branch: bool = False
    squash: bool = False
    skip_test: bool = False
    increment_version_at_finish: bool = False
    skip_feature_version: bool = False
    pre_finish_goals: str | None = None
    post_finish_goals: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    keep_branch: bool = False
    skip_test: bool = False
    skip_tag: bool = False
    pre_finish_goals: str | None = None
    post_finish_goals: str | None = None


@dataclass(frozen=True, slots=True)
class HotfixConfig:
    keep_branch: bool = False
    skip_test: bool = False
    skip_tag: bool = False
    pre_finish_goals: str | None = None
    post_finish_goals: str | None = None


@dataclass(frozen=True, slots=True)
class SupportConfig:
    use_snapshot: bool = False


@dataclass(frozen=True, slots=True)
class CommitMessages:
    """Commit-message templates.

    Placeholders are written ``{{name}}`` and substituted literally; an
    empty merge template means git's default merge message.
    """

    feature_start: str = "Update versions for feature branch"
    feature_finish: str = "Update versions for development branch"
    feature_increment_version: str = "Increment feature version"
    feature_update_back: str = "Update feature branch back to feature version"
    feature_dev_merge: str = ""
    feature_squash: str = ""
    release_start: str = "Update versions for release"
    release_finish: str = "Update for next development version"
    release_merge: str = ""
    release_dev_merge: str = ""
    hotfix_start: str = "Update versions for hotfix"
    hotfix_merge: str = ""
    hotfix_dev_merge: str = ""
    update_dev_to_avoid_conflicts: str = (
        "Update develop to production version to avoid merge conflicts"
    )
    update_dev_back_pre_merge_state: str = "Update develop version back to pre-merge state"
    support_start: str = "Update versions for support branch"
    tag_release: str = "Tag release"
    tag_hotfix: str = "Tag hotfix"


@dataclass(frozen=True, slots=True)
class MavenConfig:
    executable: str = "mvn"
    args: str | None = None


@dataclass(frozen=True, slots=True)
class FlowConfig:
    """Main configuration container."""

    branches: BranchConfig = field(default_factory=BranchConfig)
    feature: FeatureConfig = field(default_factory=FeatureConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    hotfix: HotfixConfig = field(default_factory=HotfixConfig)
    support: SupportConfig = field(default_factory=SupportConfig)
    messages: CommitMessages = field(default_factory=CommitMessages)
    maven: MavenConfig = field(default_factory=MavenConfig)
    interactive: bool = True
    push_remote: bool = True
    fetch_remote: bool = True
    install_project: bool = False
    version_digit_to_increment: int | None = None
    version_tag_prefix: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> FlowConfig:
        """Create FlowConfig from a mapping (parsed TOML)."""
        branches: StrDict = get_table(data, "branches") or {}
        feature: StrDict = get_table(data, "feature") or {}
        release: StrDict = get_table(data, "release") or {}
        hotfix: StrDict = get_table(data, "hotfix") or {}
        support: StrDict = get_table(data, "support") or {}
        messages: StrDict = get_table(data, "messages") or {}
        maven: StrDict = get_table(data, "maven") or {}

        defaults = cls()
        b = defaults.branches

        def flag(table: StrDict, key: str, default: bool) -> bool:
            value = get_bool(table, key)
            return default if value is None else value

        def prefix(key: str, default: str) -> str:
            value = get_raw_str(branches, key)
            return default if value is None else value

        message_values: dict[str, str] = {}
        for name in (f.name for f in fields(CommitMessages)):
            value = get_raw_str(messages, name)
            if value is not None:
                message_values[name] = value

        return cls(
            branches=BranchConfig(
                feature=prefix("feature", b.feature),
                release=prefix("release", b.release),
                hotfix=prefix("hotfix", b.hotfix),
                support=prefix("support", b.support),
                development=prefix("development", b.development),
                production=prefix("production", b.production),
                remote=get_str(branches, "remote") or b.remote,
            ),
            feature=FeatureConfig(
                keep_branch=flag(feature, "keep_branch", False),
                squash=flag(feature, "squash", False),
                skip_test=flag(feature, "skip_test", False),
                increment_version_at_finish=flag(feature, "increment_version_at_finish", False),
                skip_feature_version=flag(feature, "skip_feature_version", False),
                pre_finish_goals=get_str(feature, "pre_finish_goals"),
                post_finish_goals=get_str(feature, "post_finish_goals"),
            ),
            release=ReleaseConfig(
                keep_branch=flag(release, "keep_branch", False),
                skip_test=flag(release, "skip_test", False),
                skip_tag=flag(release, "skip_tag", False),
                pre_finish_goals=get_str(release, "pre_finish_goals"),
                post_finish_goals=get_str(release, "post_finish_goals"),
            ),
            hotfix=HotfixConfig(
                keep_branch=flag(hotfix, "keep_branch", False),
                skip_test=flag(hotfix, "skip_test", False),
                skip_tag=flag(hotfix, "skip_tag", False),
                pre_finish_goals=get_str(hotfix, "pre_finish_goals"),
                post_finish_goals=get_str(hotfix, "post_finish_goals"),
            ),
            support=SupportConfig(use_snapshot=flag(support, "use_snapshot", False)),
            messages=CommitMessages(**message_values),
            maven=MavenConfig(
                executable=get_str(maven, "executable") or "mvn",
                args=get_str(maven, "args"),
            ),
            interactive=flag(data, "interactive", defaults.interactive),
            push_remote=flag(data, "push_remote", defaults.push_remote),
            fetch_remote=flag(data, "fetch_remote", defaults.fetch_remote),
            install_project=flag(data, "install_project", defaults.install_project),
            version_digit_to_increment=get_int(data, "version_digit_to_increment"),
            version_tag_prefix=get_raw_str(data, "version_tag_prefix") or "",
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling IO and syntax errors."""
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[FlowConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(FlowConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(FlowConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[FlowConfig, ConfigError]:
    """Load config if the file exists, otherwise return the defaults.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(FlowConfig())
    return load_config(path)
