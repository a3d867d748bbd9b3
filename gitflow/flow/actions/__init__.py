"""Step lists for every workflow action, keyed by action name."""

from __future__ import annotations

from collections.abc import Mapping

from gitflow.flow.actions.feature import FEATURE_FINISH, FEATURE_START
from gitflow.flow.actions.hotfix import HOTFIX_FINISH, HOTFIX_START
from gitflow.flow.actions.release import RELEASE_FINISH, RELEASE_START
from gitflow.flow.actions.support import SUPPORT_START
from gitflow.flow.pipeline import Step

__all__ = [
    "ACTIONS",
    "FEATURE_FINISH",
    "FEATURE_START",
    "HOTFIX_FINISH",
    "HOTFIX_START",
    "RELEASE_FINISH",
    "RELEASE_START",
    "SUPPORT_START",
]

ACTIONS: Mapping[str, tuple[Step, ...]] = {
    "feature-start": FEATURE_START,
    "feature-finish": FEATURE_FINISH,
    "release-start": RELEASE_START,
    "release-finish": RELEASE_FINISH,
    "hotfix-start": HOTFIX_START,
    "hotfix-finish": HOTFIX_FINISH,
    "support-start": SUPPORT_START,
}
