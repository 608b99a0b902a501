"""Data model for module dependency graphs and the raw build-tool records they come from."""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class Technology(str, Enum):
    """Build technology / package ecosystem."""

    MAVEN = "maven"
    GRADLE = "gradle"
    NPM = "npm"
    YARN = "yarn"
    PIP = "pip"
    GO = "go"
    NUGET = "nuget"


@dataclass(eq=False)
class GraphNode:
    """A node in a module's dependency tree.

    Each node exclusively owns its ``nodes`` (children). The parent is held
    through a weak reference and is only used to walk upward when checking
    for cycles.
    """

    id: str
    nodes: list[GraphNode] = field(default_factory=list)
    _parent: weakref.ReferenceType[GraphNode] | None = field(
        default=None, init=False, repr=False
    )

    @property
    def parent(self) -> GraphNode | None:
        if self._parent is None:
            return None
        return self._parent()

    def add_child(self, child: GraphNode) -> GraphNode:
        child._parent = weakref.ref(self)
        self.nodes.append(child)
        return child

    def node_has_loop(self) -> bool:
        """Return True if an ancestor of this node carries the same id."""
        ancestor = self.parent
        while ancestor is not None:
            if ancestor.id == self.id:
                return True
            ancestor = ancestor.parent
        return False

    def iter_ids(self) -> Iterator[str]:
        """Yield every id of the subtree in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node.id
            stack.extend(reversed(node.nodes))

    def to_dict(self) -> dict:
        result: dict = {"id": self.id, "nodes": []}
        stack = [(self, result)]
        while stack:
            node, out = stack.pop()
            for child in node.nodes:
                child_out: dict = {"id": child.id, "nodes": []}
                out["nodes"].append(child_out)
                stack.append((child, child_out))
        return result


def _str_list(value, what: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{what} must be a list of strings")
    return list(value)


@dataclass
class Dependency:
    """A dependency entry of a build-info module."""

    id: str
    requested_by: list[list[str]] = field(default_factory=list)
    type: str | None = None
    scopes: list[str] = field(default_factory=list)
    sha1: str | None = None
    sha256: str | None = None
    md5: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Dependency:
        if not isinstance(data, dict) or not isinstance(data.get("id"), str):
            raise ValueError("dependency must be an object with a string 'id'")
        requested_by = data.get("requestedBy") or []
        if not isinstance(requested_by, list):
            raise ValueError(f"requestedBy of {data['id']} must be a list")
        return cls(
            id=data["id"],
            requested_by=[
                _str_list(chain, f"requestedBy chain of {data['id']}")
                for chain in requested_by
            ],
            type=data.get("type"),
            scopes=_str_list(data.get("scopes"), "scopes"),
            sha1=data.get("sha1"),
            sha256=data.get("sha256"),
            md5=data.get("md5"),
        )


@dataclass
class Module:
    """A module of a build, with its flat dependency list."""

    id: str
    type: str | None = None
    dependencies: list[Dependency] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> Module:
        if not isinstance(data, dict) or not isinstance(data.get("id"), str):
            raise ValueError("module must be an object with a string 'id'")
        deps = data.get("dependencies") or []
        if not isinstance(deps, list):
            raise ValueError(f"dependencies of module {data['id']} must be a list")
        return cls(
            id=data["id"],
            type=data.get("type"),
            dependencies=[Dependency.from_dict(d) for d in deps],
        )


@dataclass
class BuildInfo:
    """A generated build-info record."""

    name: str
    number: str
    modules: list[Module] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> BuildInfo:
        if not isinstance(data, dict):
            raise ValueError("build-info must be a JSON object")
        modules = data.get("modules") or []
        if not isinstance(modules, list):
            raise ValueError("modules must be a list")
        return cls(
            name=str(data.get("name", "")),
            number=str(data.get("number", "")),
            modules=[Module.from_dict(m) for m in modules],
        )


@dataclass
class DepTreeNode:
    """Adjacency entry of a plugin-generated dependency tree."""

    children: list[str] = field(default_factory=list)


@dataclass
class ModuleDepTree:
    """Dependency tree of one Maven/Gradle module, as written by the dep-tree plugins."""

    root: str
    nodes: dict[str, DepTreeNode] = field(default_factory=dict)

    def children_of(self, node_id: str) -> list[str]:
        node = self.nodes.get(node_id)
        return node.children if node is not None else []

    @classmethod
    def from_dict(cls, data: dict) -> ModuleDepTree:
        if not isinstance(data, dict):
            raise ValueError("dependency tree must be a JSON object")
        root = data.get("root")
        if not isinstance(root, str):
            raise ValueError("'root' must be a string")
        raw_nodes = data.get("nodes")
        if raw_nodes is None:
            raw_nodes = {}
        elif not isinstance(raw_nodes, dict):
            raise ValueError("'nodes' must be an object")
        nodes: dict[str, DepTreeNode] = {}
        for node_id, node in raw_nodes.items():
            if not isinstance(node, dict):
                raise ValueError(f"node {node_id} must be an object")
            nodes[node_id] = DepTreeNode(
                children=_str_list(node.get("children"), f"children of {node_id}")
            )
        return cls(root=root, nodes=nodes)
