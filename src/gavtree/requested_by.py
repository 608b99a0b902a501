"""Build module dependency trees from build-info "requested-by" chains.

Each build-info dependency lists the chains of ancestors that pulled it in,
immediate parent first. Dependencies with no chain, or whose immediate
parent is the module itself, are direct; the rest are attached under their
immediate requesters.
"""

from __future__ import annotations

import logging

from gavtree.errors import NotFoundError
from gavtree.model import BuildInfo, Dependency, GraphNode, Module
from gavtree.multimap import DependencyMultimap
from gavtree.naming import Namer, gav_id

logger = logging.getLogger(__name__)


def create_gav_dependency_tree(
    builds_info: list[BuildInfo],
    build_name: str = "",
    build_number: str = "",
    namer: Namer = gav_id,
) -> tuple[list[GraphNode], list[str]]:
    """Create a dependency tree for each module of the first generated build-info.

    Returns the module roots and the sorted list of unique ids seen in any tree.
    """
    if not builds_info:
        raise NotFoundError(f"Couldn't find build {build_name}/{build_number}")

    unique_deps: set[str] = set()
    modules = [
        add_module_tree(module, unique_deps, namer)
        for module in builds_info[0].modules
    ]
    logger.debug(
        "Built %d module trees with %d unique dependencies",
        len(modules),
        len(unique_deps),
    )
    return modules, sorted(unique_deps)


def add_module_tree(
    module: Module, unique_deps: set[str], namer: Namer = gav_id
) -> GraphNode:
    module_tree = GraphNode(id=namer(module.id))
    unique_deps.add(module_tree.id)

    direct_dependencies: dict[str, Dependency] = {}
    parent_to_children = DependencyMultimap()
    for dependency in module.dependencies:
        if is_direct_dependency(module.id, dependency.requested_by):
            direct_dependencies[dependency.id] = dependency
            continue
        for chain in dependency.requested_by:
            if not chain:
                logger.warning(
                    "Skipping empty requested-by chain of %s in module %s",
                    dependency.id,
                    module.id,
                )
                continue
            parent_to_children.put_child(namer(chain[0]), dependency)

    for direct_dependency in direct_dependencies.values():
        populate_transitive_dependencies(
            module_tree,
            direct_dependency.id,
            parent_to_children,
            [],
            unique_deps,
            namer,
        )
    logger.debug(
        "Module %s: %d direct of %d dependencies",
        module.id,
        len(direct_dependencies),
        len(module.dependencies),
    )
    return module_tree


def is_direct_dependency(module_id: str, requested_by: list[list[str]]) -> bool:
    if not requested_by or not requested_by[0]:
        return True
    return any(chain and chain[0] == module_id for chain in requested_by)


def populate_transitive_dependencies(
    parent: GraphNode,
    dependency_id: str,
    parent_to_children: DependencyMultimap,
    ids_added: list[str],
    unique_deps: set[str],
    namer: Namer = gav_id,
) -> None:
    """Attach *dependency_id* under *parent* and expand its descendants.

    *ids_added* holds the raw ids on the path from the module root to
    *parent*. A dependency already on that path closes a cycle and is not
    attached. Expansion is depth-first over an explicit stack, so chain
    depth is not bounded by the interpreter's recursion limit.
    """
    stack = [(parent, dependency_id, list(ids_added))]
    while stack:
        parent, dependency_id, ids_added = stack.pop()
        if has_loop(ids_added, dependency_id):
            continue
        ids_added = [*ids_added, dependency_id]
        node = parent.add_child(GraphNode(id=namer(dependency_id)))
        unique_deps.add(node.id)
        children = parent_to_children.get_children(node.id).values()
        # Reversed so children are attached in multimap order
        stack.extend((node, child.id, ids_added) for child in reversed(list(children)))


def has_loop(ids_added: list[str], id_to_add: str) -> bool:
    return id_to_add in ids_added
