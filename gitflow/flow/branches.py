"""Branch name resolution.

Finish actions need a branch that already exists; start actions need a
name that does not. The name comes from, in order: an explicit full branch
name, an explicit short name (prefixed), or, in interactive mode, a
numbered choice among the existing branches of the category.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from gitflow.core.result import Err, Ok, Result
from gitflow.flow.errors import FlowError, ResolutionError
from gitflow.flow.executor import Prompter, VersionControl

__all__ = [
    "BranchCategory",
    "BranchRef",
    "ExistingBranchQuery",
    "prompt_new_name",
    "resolve_existing_branch",
    "resolve_new_branch",
]


class BranchCategory(StrEnum):
    FEATURE = "feature"
    RELEASE = "release"
    HOTFIX = "hotfix"
    SUPPORT = "support"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True, slots=True)
class BranchRef:
    """A branch name together with the prefix of its category."""

    name: str
    prefix: str
    category: BranchCategory

    @property
    def local_name(self) -> str:
        """The name without its category prefix (``feature/login`` -> ``login``)."""
        if self.prefix and self.name.startswith(self.prefix):
            return self.name[len(self.prefix) :]
        return self.name

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class ExistingBranchQuery:
    """Inputs for locating a branch that must already exist.

    Attributes:
        category: Branch family being finished.
        prefix: Configured prefix for the family.
        interactive: Whether the operator may be asked.
        branch: Explicit full branch name (must start with ``prefix``).
        name: Explicit short name, ``prefix`` is prepended.
        purpose: Verb used in messages ("finish").
    """

    category: BranchCategory
    prefix: str
    interactive: bool
    branch: str | None = None
    name: str | None = None
    purpose: str = "finish"


def resolve_existing_branch(
    query: ExistingBranchQuery, vcs: VersionControl, prompter: Prompter
) -> Result[BranchRef, FlowError]:
    """Determine the branch to act on; first matching source wins.

    A full branch name outside the prefix is rejected before git is asked
    anything.
    """
    label = query.category.label

    if query.branch and query.branch.strip():
        candidate = query.branch.strip()
        if not candidate.startswith(query.prefix):
            return Err(
                ResolutionError(
                    f"{label} branch '{candidate}' does not start with '{query.prefix}'",
                    hint=f"Pass a branch under '{query.prefix}' or use the short name instead.",
                )
            )
        return _require_existing(candidate, query, vcs)

    if query.name and query.name.strip():
        return _require_existing(f"{query.prefix}{query.name.strip()}", query, vcs)

    if query.interactive:
        return _choose_existing(query, vcs, prompter)

    return Err(
        ResolutionError(
            f"{label} branch name is blank",
            hint="Pass --branch or --name, or run interactively.",
        )
    )


def _require_existing(
    name: str, query: ExistingBranchQuery, vcs: VersionControl
) -> Result[BranchRef, FlowError]:
    exists = vcs.branch_exists(name)
    if isinstance(exists, Err):
        return exists
    if not exists.value:
        return Err(
            ResolutionError(
                f"{query.category.label} branch '{name}' doesn't exist. "
                f"Cannot {query.purpose} {query.category.value}."
            )
        )
    return Ok(BranchRef(name=name, prefix=query.prefix, category=query.category))


def _choose_existing(
    query: ExistingBranchQuery, vcs: VersionControl, prompter: Prompter
) -> Result[BranchRef, FlowError]:
    listed = vcs.list_branches(query.prefix)
    if isinstance(listed, Err):
        return listed
    branches = listed.value
    if not branches:
        return Err(ResolutionError(f"There are no {query.category.value} branches."))

    current = vcs.current_branch()
    if isinstance(current, Err):
        return current

    numbers = [str(i + 1) for i in range(len(branches))]
    default: str | None = None
    lines = [f"{query.category.label} branches:"]
    for number, branch in zip(numbers, branches, strict=True):
        lines.append(f"{number}. {branch}")
        if branch == current.value:
            default = number
    lines.append(f"Choose {query.category.value} branch to {query.purpose}")
    message = "\n".join(lines)

    choice = ""
    while choice not in numbers:
        answer = prompter.choose(message, numbers, default)
        if isinstance(answer, Err):
            return answer
        choice = answer.value.strip()

    return Ok(
        BranchRef(
            name=branches[int(choice) - 1],
            prefix=query.prefix,
            category=query.category,
        )
    )


def resolve_new_branch(
    category: BranchCategory,
    prefix: str,
    name: str | None,
    vcs: VersionControl,
) -> Result[BranchRef, FlowError]:
    """Validate ``prefix + name`` as a branch that can be created."""
    if name is None or not name.strip():
        return Err(ResolutionError(f"{category.label} branch name is blank"))
    full = f"{prefix}{name.strip()}"
    if not vcs.is_valid_branch_name(full):
        return Err(ResolutionError(f"'{full}' is not a valid branch name"))

    exists = vcs.branch_exists(full)
    if isinstance(exists, Err):
        return exists
    if exists.value:
        return Err(
            ResolutionError(
                f"{category.label} branch '{full}' already exists. Cannot start {category.value}."
            )
        )
    return Ok(BranchRef(name=full, prefix=prefix, category=category))


def prompt_new_name(
    message: str,
    prefix: str,
    vcs: VersionControl,
    prompter: Prompter,
    default: str | None = None,
) -> Result[str, FlowError]:
    """Ask until the answer forms a valid branch name under ``prefix``."""
    while True:
        answer = prompter.ask(message, default)
        if isinstance(answer, Err):
            return answer
        name = answer.value.strip()
        if name and vcs.is_valid_branch_name(f"{prefix}{name}"):
            return Ok(name)
