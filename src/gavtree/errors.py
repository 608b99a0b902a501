"""Exceptions raised while constructing dependency graphs.

Dependency cycles are not errors: populators silently truncate them.
"""

from __future__ import annotations


class DependencyTreeError(Exception):
    """Base exception for dependency graph construction."""


class NotFoundError(DependencyTreeError):
    """The generated build-info for a build could not be located."""


class ReadError(DependencyTreeError):
    """A build-info or dependency tree file could not be read."""

    def __init__(self, path, message: str):
        super().__init__(f"Could not read {path}: {message}")
        self.path = path


class DecodeError(DependencyTreeError):
    """A build-info or dependency tree file is not valid JSON of the expected shape."""

    def __init__(self, path, message: str):
        super().__init__(f"Could not decode {path}: {message}")
        self.path = path


class BuildToolError(DependencyTreeError):
    """Running Maven or Gradle failed."""

    def __init__(self, cmd: list[str], message: str, returncode: int | None = None):
        super().__init__(f"{cmd[0]} failed: {message}")
        self.cmd = cmd
        self.returncode = returncode


class UnsupportedTechnologyError(DependencyTreeError, KeyError):
    """No package type or build strategy is known for a technology."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""
