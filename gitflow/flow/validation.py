"""Configuration checks that run before any external command."""

from __future__ import annotations

from gitflow.core.config import FlowConfig
from gitflow.core.result import Err, Ok, Result
from gitflow.flow.errors import ConfigurationError

__all__ = ["validate_config"]

_FORBIDDEN_GOAL_CHARS = ("&", "|")


def validate_config(config: FlowConfig) -> Result[FlowConfig, ConfigurationError]:
    """Reject configurations no action can run with."""
    b = config.branches
    for label, prefix in (
        ("feature", b.feature),
        ("release", b.release),
        ("hotfix", b.hotfix),
        ("support", b.support),
    ):
        if not prefix.strip():
            return Err(ConfigurationError(f"{label} branch prefix is blank"))

    if not b.development.strip() or not b.production.strip():
        return Err(ConfigurationError("development and production branch names must be set"))
    if b.development == b.production:
        return Err(
            ConfigurationError(
                f"development and production branch are both '{b.development}'",
                hint="Set [branches] development and production to different branches.",
            )
        )

    goals = {
        "feature.pre_finish_goals": config.feature.pre_finish_goals,
        "feature.post_finish_goals": config.feature.post_finish_goals,
        "release.pre_finish_goals": config.release.pre_finish_goals,
        "release.post_finish_goals": config.release.post_finish_goals,
        "hotfix.pre_finish_goals": config.hotfix.pre_finish_goals,
        "hotfix.post_finish_goals": config.hotfix.post_finish_goals,
    }
    for key, value in goals.items():
        if value and any(c in value for c in _FORBIDDEN_GOAL_CHARS):
            return Err(
                ConfigurationError(
                    f"{key} cannot contain '&' or '|': {value}",
                    hint="Goals are passed to mvn as arguments, not to a shell.",
                )
            )

    digit = config.version_digit_to_increment
    if digit is not None and digit < 0:
        return Err(ConfigurationError(f"version_digit_to_increment must be >= 0, got {digit}"))

    return Ok(config)
