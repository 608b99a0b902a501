"""Orchestrator: detect → run build tool → build module trees."""

from __future__ import annotations

import logging
from pathlib import Path

from gavtree.builders import GradleTreeBuilder, MavenTreeBuilder
from gavtree.builders.base import DependencyTreeBuilder, Runner, run_build_tool
from gavtree.config import DependencyTreeParams
from gavtree.errors import UnsupportedTechnologyError
from gavtree.model import GraphNode, Technology

logger = logging.getLogger(__name__)


def select_builder(tech: Technology, runner: Runner = run_build_tool) -> DependencyTreeBuilder:
    if tech == Technology.MAVEN:
        return MavenTreeBuilder(runner)
    return GradleTreeBuilder(runner)


def detect_builder(
    project_dir: Path, runner: Runner = run_build_tool
) -> DependencyTreeBuilder:
    """Return the first builder that can handle *project_dir*; Maven wins over Gradle."""
    builders: list[DependencyTreeBuilder] = [
        MavenTreeBuilder(runner),
        GradleTreeBuilder(runner),
    ]
    for builder in builders:
        if builder.can_handle(project_dir):
            return builder
    raise UnsupportedTechnologyError(
        f"Could not detect a Maven or Gradle project in {project_dir}"
    )


def build_dependency_tree(
    params: DependencyTreeParams,
    tech: Technology | None = None,
    *,
    runner: Runner = run_build_tool,
) -> tuple[list[GraphNode], list[str]]:
    """Build one dependency tree per module of the project in *params*.

    *tech* defaults to ``params.tool``, then to auto-detection. Returns the
    module roots and the sorted unique dependency ids across all modules.
    """
    tech = tech or params.tool
    if tech is not None:
        builder = select_builder(tech, runner)
    else:
        builder = detect_builder(Path(params.project_dir), runner)
    logger.debug("Using %s for %s", type(builder).__name__, params.project_dir)

    nodes, unique_deps = builder.build(params)
    logger.debug(
        "Dependency tree: %d modules, %d unique dependencies",
        len(nodes),
        len(unique_deps),
    )
    return nodes, unique_deps
