"""Process exit codes.

Each failure kind surfaced by a workflow action maps to one stable exit
status so scripts wrapping ``gitflow`` can tell them apart.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (branch/tag cannot be resolved, invalid version)
    - 2: Configuration error (invalid flag combination or config file)
    - 3: Command failure (git or mvn returned non-zero)
    - 4: Local branch is behind its remote counterpart
    - 5: Interactive prompt cancelled
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    COMMAND_ERROR = 3
    REMOTE_ERROR = 4
    CANCELLED = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
