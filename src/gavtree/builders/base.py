"""Builder protocol and build-tool process execution."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from gavtree.config import DEFAULT_TIMEOUT, DependencyTreeParams
from gavtree.errors import BuildToolError
from gavtree.model import GraphNode

logger = logging.getLogger(__name__)

# (cmd, cwd, env, timeout) -> stdout
Runner = Callable[..., str]


class DependencyTreeBuilder(Protocol):
    """Protocol for build-tool specific dependency tree acquisition."""

    def can_handle(self, project_dir: Path) -> bool:
        """Return True if this builder applies to the given project."""
        ...

    def build(self, params: DependencyTreeParams) -> tuple[list[GraphNode], list[str]]:
        """Run the build tool and return module trees and unique dependency ids."""
        ...


def run_build_tool(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> str:
    """Run *cmd* in *cwd* and return its stdout, raising BuildToolError on failure."""
    logger.info("Running %s in %s", " ".join(cmd), cwd)
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=str(cwd),
            env={**os.environ, **env} if env else None,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise BuildToolError(cmd, f"executable not found: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise BuildToolError(cmd, f"timed out after {timeout}s") from e

    if result.returncode != 0:
        msg = (result.stderr or "").strip() or (result.stdout or "").strip()
        raise BuildToolError(cmd, msg or "unknown error", result.returncode)
    return result.stdout


def find_executable(project_dir: Path, name: str, use_wrapper: bool) -> str:
    """Locate the wrapper script (``mvnw``/``gradlew``) or the tool on PATH."""
    if use_wrapper:
        wrapper_name = f"{name}w.bat" if os.name == "nt" else f"{name}w"
        if name == "mvn" and os.name == "nt":
            wrapper_name = "mvnw.cmd"
        wrapper = project_dir / wrapper_name
        if wrapper.exists():
            return str(wrapper.resolve())
        logger.warning("%s not found in %s, falling back to %s", wrapper_name, project_dir, name)

    path = shutil.which(name)
    if not path:
        raise BuildToolError([name], f"{name} not found on PATH")
    return path
