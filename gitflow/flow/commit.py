"""Commit-message templates.

Templates name their placeholders ``{{version}}``, ``{{featureName}}`` and
so on. Substitution is a literal string replace: a placeholder with no
value stays in the message as written.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

__all__ = ["CommitProperties", "render_message"]


class CommitProperties(Mapping[str, str]):
    """Ordered placeholder values for a single commit.

    Usage:
        props = CommitProperties(version="2.1.0", featureName="login")
        render_message("Finish {{featureName}} at {{version}}", props)
    """

    __slots__ = ("_values",)

    def __init__(self, **values: str) -> None:
        self._values: dict[str, str] = dict(values)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"CommitProperties({inner})"


def render_message(template: str, properties: Mapping[str, str] | None = None) -> str:
    """Substitute ``{{key}}`` placeholders in ``template``."""
    if not properties:
        return template
    message = template
    for key, value in properties.items():
        message = message.replace("{{" + key + "}}", value)
    return message
