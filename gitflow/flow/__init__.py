"""Workflow core: versions, branch resolution, step pipelines and the engine.

Usage:
    from gitflow.flow import WorkflowEngine

    engine = WorkflowEngine(config, vcs=repo, build=project, prompter=prompter,
                            console=console)
    result = engine.release_start(version="1.4.0")
"""

from gitflow.flow.engine import WorkflowEngine
from gitflow.flow.errors import (
    CommandFailure,
    ConfigurationError,
    DivergedRemoteError,
    FlowError,
    InvalidVersion,
    ResolutionError,
    UncommittedChanges,
    UserCancelled,
)
from gitflow.flow.pipeline import WorkflowResult
from gitflow.flow.state import FlowRequest
from gitflow.flow.version import VersionString

__all__ = [
    "CommandFailure",
    "ConfigurationError",
    "DivergedRemoteError",
    "FlowError",
    "FlowRequest",
    "InvalidVersion",
    "ResolutionError",
    "UncommittedChanges",
    "UserCancelled",
    "VersionString",
    "WorkflowEngine",
    "WorkflowResult",
]
