"""Version strings and numbering policies.

A ``VersionString`` is ``N(.N)*[-qualifier]`` as Maven projects use it
(``1.4.0``, ``1.4.0-SNAPSHOT``, ``2.1.0-login-SNAPSHOT``). Every operation
returns a new value; nothing is mutated in place.

Which component the "next" version increments is decided by a
``VersionPolicy`` strategy, chosen from ``version_digit_to_increment``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Protocol

from gitflow.core.result import Err, Ok, Result
from gitflow.flow.errors import InvalidVersion

__all__ = [
    "SNAPSHOT",
    "IncrementDigit",
    "IncrementLastDigit",
    "VersionPolicy",
    "VersionString",
    "policy_for",
]

SNAPSHOT = "SNAPSHOT"

_VERSION_RE = re.compile(r"^(\d+(?:\.\d+)*)(?:-([^\s]+))?$")


@dataclass(frozen=True, slots=True)
class VersionString:
    """A parsed version.

    Components are kept as the digit strings that were parsed so that a
    version prints back exactly as it was read.

    Attributes:
        components: Numeric components, most significant first.
        qualifier: Everything after the first ``-``, or None.
    """

    components: tuple[str, ...]
    qualifier: str | None = None

    @classmethod
    def parse(cls, raw: str) -> Result[VersionString, InvalidVersion]:
        """Parse ``raw``.

        Examples:
            >>> VersionString.parse("1.2.0-SNAPSHOT")
            Ok(VersionString(components=('1', '2', '0'), qualifier='SNAPSHOT'))
            >>> VersionString.parse("latest")
            Err(InvalidVersion(value='latest'))
        """
        m = _VERSION_RE.match(raw.strip())
        if m is None:
            return Err(InvalidVersion(raw))
        return Ok(cls(components=tuple(m.group(1).split(".")), qualifier=m.group(2)))

    def __str__(self) -> str:
        base = ".".join(self.components)
        if self.qualifier:
            return f"{base}-{self.qualifier}"
        return base

    @property
    def is_snapshot(self) -> bool:
        return self.qualifier is not None and self.qualifier.upper().endswith(SNAPSHOT)

    def strip_suffix(self, qualifier: str) -> VersionString:
        """Remove a trailing ``-<qualifier>``; unchanged if it is not there."""
        if self.qualifier is None or not qualifier:
            return self
        if self.qualifier == qualifier:
            return replace(self, qualifier=None)
        if self.qualifier.endswith(f"-{qualifier}"):
            return replace(self, qualifier=self.qualifier[: -len(qualifier) - 1])
        return self

    def append_suffix(self, qualifier: str) -> VersionString:
        """Return ``<version>-<qualifier>``.

        Does not check for an existing suffix; callers decide whether a
        second one is acceptable.
        """
        if not qualifier:
            return self
        if self.qualifier is None:
            return replace(self, qualifier=qualifier)
        return replace(self, qualifier=f"{self.qualifier}-{qualifier}")

    def release_version(self) -> VersionString:
        """The version without its snapshot marker."""
        if not self.is_snapshot or self.qualifier is None:
            return self
        rest = self.qualifier[: -len(SNAPSHOT)]
        if rest.endswith("-"):
            rest = rest[:-1]
        return replace(self, qualifier=rest or None)

    def snapshot_version(self) -> VersionString:
        if self.is_snapshot:
            return self
        return self.append_suffix(SNAPSHOT)

    def next_release_version(self, policy: VersionPolicy) -> VersionString:
        """Increment according to ``policy``, without a snapshot marker."""
        return policy.next_version(self.release_version())

    def next_development_version(self, policy: VersionPolicy) -> VersionString:
        """Increment according to ``policy`` and mark as snapshot."""
        return self.next_release_version(policy).append_suffix(SNAPSHOT)

    def feature_version(self, name: str) -> VersionString:
        """Qualify the version with a feature name.

        The name goes before the snapshot marker, so ``1.3.0-SNAPSHOT`` and
        ``login`` give ``1.3.0-login-SNAPSHOT``; ``2.1.0`` gives
        ``2.1.0-login``.
        """
        if not name:
            return self
        qualified = self.release_version().append_suffix(name)
        if self.is_snapshot:
            return qualified.append_suffix(SNAPSHOT)
        return qualified

    def has_feature_qualifier(self, name: str) -> bool:
        if not name or self.qualifier is None:
            return False
        return f"-{name}" in f"-{self.qualifier}"

    def strip_feature_qualifier(self, name: str) -> VersionString:
        """Remove the first ``-<name>`` occurrence.

        Inverts ``feature_version``. The match is textual: a name that
        equals some other pre-release token in the qualifier removes that
        token instead.
        """
        if not self.has_feature_qualifier(name) or self.qualifier is None:
            return self
        stripped = f"-{self.qualifier}".replace(f"-{name}", "", 1)
        return replace(self, qualifier=stripped[1:] or None)


class VersionPolicy(Protocol):
    """Strategy deciding what "the next version" is."""

    def next_version(self, version: VersionString) -> VersionString: ...


@dataclass(frozen=True, slots=True)
class IncrementLastDigit:
    """``1.4.2`` -> ``1.4.3``; ``1.4`` -> ``1.5``."""

    def next_version(self, version: VersionString) -> VersionString:
        return IncrementDigit(len(version.components) - 1).next_version(version)


@dataclass(frozen=True, slots=True)
class IncrementDigit:
    """Increment the component at ``index`` and zero everything after it.

    With ``index=1``: ``1.4.2`` -> ``1.5.0``. An index past the last
    component increments the last one.
    """

    index: int

    def next_version(self, version: VersionString) -> VersionString:
        parts = list(version.components)
        i = min(self.index, len(parts) - 1)
        parts[i] = str(int(parts[i]) + 1)
        for j in range(i + 1, len(parts)):
            parts[j] = "0"
        return replace(version, components=tuple(parts))


def policy_for(digit_to_increment: int | None) -> VersionPolicy:
    """Select the policy for the ``version_digit_to_increment`` setting."""
    if digit_to_increment is None:
        return IncrementLastDigit()
    return IncrementDigit(digit_to_increment)
