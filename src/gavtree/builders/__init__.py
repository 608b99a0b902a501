"""Build-tool strategies producing module dependency trees."""

from __future__ import annotations

from gavtree.builders.base import DependencyTreeBuilder, run_build_tool
from gavtree.builders.gradle import GradleTreeBuilder
from gavtree.builders.maven import MavenTreeBuilder

__all__ = [
    "DependencyTreeBuilder",
    "GradleTreeBuilder",
    "MavenTreeBuilder",
    "run_build_tool",
]
