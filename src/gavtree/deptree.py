"""Read the output of the gradle-dep-tree and maven-dep-tree plugins.

The plugins write one JSON file per module, shaped as
``{"root": id, "nodes": {id: {"children": [id, ...]}}}``, and print the
paths of these files, one per line.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from gavtree.errors import DecodeError, ReadError
from gavtree.model import GraphNode, ModuleDepTree
from gavtree.naming import Namer, gav_id

logger = logging.getLogger(__name__)


def get_graph_from_dep_tree(
    dep_tree_output: bytes | str, namer: Namer = gav_id
) -> tuple[list[GraphNode], list[str]]:
    """Turn the plugin output (newline-separated JSON paths) into module trees.

    Returns the module roots in file order and the sorted unique ids.
    """
    modules = parse_dep_tree_files(dep_tree_output)
    unique_deps: set[str] = set()
    deps_graph: list[GraphNode] = []
    for module_tree in modules:
        root = GraphNode(id=namer(module_tree.root))
        unique_deps.add(root.id)
        populate_dependency_tree(root, module_tree.root, module_tree, unique_deps, namer)
        deps_graph.append(root)
    logger.debug(
        "Built %d module trees with %d unique dependencies",
        len(deps_graph),
        len(unique_deps),
    )
    return deps_graph, sorted(unique_deps)


def populate_dependency_tree(
    curr_node: GraphNode,
    curr_node_id: str,
    module_tree: ModuleDepTree,
    unique_deps: set[str],
    namer: Namer = gav_id,
) -> None:
    stack = [(curr_node, curr_node_id)]
    while stack:
        node, node_id = stack.pop()
        # The plugins may report cycles caused by version conflicts; a node
        # repeating one of its ancestors is kept as a leaf.
        if node.node_has_loop():
            continue
        children = []
        for child_id in module_tree.children_of(node_id):
            child_node = node.add_child(GraphNode(id=namer(child_id)))
            unique_deps.add(child_node.id)
            children.append((child_node, child_id))
        stack.extend(reversed(children))


def parse_dep_tree_files(json_file_paths: bytes | str) -> list[ModuleDepTree]:
    if isinstance(json_file_paths, bytes):
        json_file_paths = json_file_paths.decode("utf-8")
    output_file_paths = [
        line.strip() for line in json_file_paths.strip().split("\n") if line.strip()
    ]
    return [parse_dep_tree_file(path) for path in output_file_paths]


def parse_dep_tree_file(path: str | Path) -> ModuleDepTree:
    path = Path(str(path).strip())
    try:
        content = path.read_bytes()
    except OSError as e:
        raise ReadError(path, e.strerror or str(e)) from e
    try:
        return ModuleDepTree.from_dict(json.loads(content))
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
        raise DecodeError(path, str(e)) from e
