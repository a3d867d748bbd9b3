"""Maven build-tool adapter."""

from gitflow.maven.project import MavenProject

__all__ = ["MavenProject"]
