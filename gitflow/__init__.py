"""Git-flow branch lifecycle automation for Maven projects."""

__version__ = "0.1.0"
