"""Git operations module.

Usage:
    from gitflow.git import GitRepository

    repo = GitRepository(Path("/path/to/repo"))
    if repo.branch_exists("develop").unwrap_or(False):
        repo.checkout("develop")
"""

from gitflow.git.repository import GitRepository

__all__ = ["GitRepository"]
