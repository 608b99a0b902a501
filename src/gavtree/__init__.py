"""Dependency graphs for Maven and Gradle modules."""

from __future__ import annotations

from gavtree.deptree import get_graph_from_dep_tree, parse_dep_tree_files
from gavtree.errors import (
    BuildToolError,
    DecodeError,
    DependencyTreeError,
    NotFoundError,
    ReadError,
    UnsupportedTechnologyError,
)
from gavtree.model import GraphNode, Technology
from gavtree.naming import GAV_PACKAGE_TYPE_IDENTIFIER, format_id
from gavtree.pipeline import build_dependency_tree
from gavtree.requested_by import create_gav_dependency_tree

__all__ = [
    "GAV_PACKAGE_TYPE_IDENTIFIER",
    "BuildToolError",
    "DecodeError",
    "DependencyTreeError",
    "GraphNode",
    "NotFoundError",
    "ReadError",
    "Technology",
    "UnsupportedTechnologyError",
    "build_dependency_tree",
    "create_gav_dependency_tree",
    "format_id",
    "get_graph_from_dep_tree",
    "parse_dep_tree_files",
]
