"""Tests for building module trees from build-info requested-by chains."""

import pytest

from gavtree.errors import NotFoundError
from gavtree.model import BuildInfo, Dependency, GraphNode, Module
from gavtree.requested_by import (
    add_module_tree,
    create_gav_dependency_tree,
    has_loop,
    is_direct_dependency,
)


# ── Helpers ───────────────────────────────────────────────────

def _dep(dep_id, *chains):
    return Dependency(id=dep_id, requested_by=[list(c) for c in chains])


def _module(module_id, *deps):
    return Module(id=module_id, dependencies=list(deps))


def _shape(node):
    """Nested (id, [children]) form of a tree, without the gav:// prefix."""
    return (node.id.removeprefix("gav://"), [_shape(c) for c in node.nodes])


def _all_ids(roots):
    return {node_id for root in roots for node_id in root.iter_ids()}


# ── Direct dependency detection ───────────────────────────────

class TestIsDirectDependency:
    def test_no_chains(self):
        assert is_direct_dependency("m", [])

    def test_empty_first_chain(self):
        assert is_direct_dependency("m", [[]])

    def test_requested_by_module(self):
        assert is_direct_dependency("m", [["m"]])

    def test_any_chain_rooted_at_module(self):
        assert is_direct_dependency("m", [["b", "m"], ["m"]])

    def test_transitive(self):
        assert not is_direct_dependency("m", [["b", "m"]])

    def test_module_deeper_in_chain_is_not_direct(self):
        assert not is_direct_dependency("m", [["b", "m"], ["c", "b", "m"]])


class TestHasLoop:
    def test_has_loop(self):
        assert has_loop(["a", "b"], "a")
        assert not has_loop(["a", "b"], "c")
        assert not has_loop([], "a")


# ── Module trees ──────────────────────────────────────────────

class TestAddModuleTree:
    def test_direct_then_transitive(self):
        unique = set()
        root = add_module_tree(
            _module("m", _dep("b"), _dep("c", ["b"])), unique
        )
        assert _shape(root) == ("m", [("b", [("c", [])])])
        assert unique == {"gav://m", "gav://b", "gav://c"}

    def test_module_without_dependencies(self):
        unique = set()
        root = add_module_tree(_module("m"), unique)
        assert root.id == "gav://m"
        assert root.nodes == []
        assert unique == {"gav://m"}

    def test_deep_chain(self):
        root = add_module_tree(
            _module(
                "m",
                _dep("b", ["m"]),
                _dep("c", ["b", "m"]),
                _dep("d", ["c", "b", "m"]),
            ),
            set(),
        )
        assert _shape(root) == ("m", [("b", [("c", [("d", [])])])])

    def test_parents_point_upward(self):
        root = add_module_tree(_module("m", _dep("b"), _dep("c", ["b"])), set())
        b = root.nodes[0]
        c = b.nodes[0]
        assert c.parent is b
        assert b.parent is root

    def test_shared_dependency_attached_under_each_requester(self):
        unique = set()
        root = add_module_tree(
            _module("m", _dep("b"), _dep("x"), _dep("c", ["b", "m"], ["x", "m"])),
            unique,
        )
        assert _shape(root) == ("m", [("b", [("c", [])]), ("x", [("c", [])])])
        b_child = root.nodes[0].nodes[0]
        x_child = root.nodes[1].nodes[0]
        assert b_child is not x_child
        assert unique == {"gav://m", "gav://b", "gav://x", "gav://c"}

    def test_cycle_is_dropped_at_reentry(self):
        root = add_module_tree(
            _module(
                "m",
                _dep("b"),
                _dep("c", ["b", "m"], ["d", "c", "b", "m"]),
                _dep("d", ["c", "b", "m"]),
            ),
            set(),
        )
        assert _shape(root) == ("m", [("b", [("c", [("d", [])])])])

    def test_two_node_cycle(self):
        unique = set()
        root = add_module_tree(
            _module("m", _dep("b"), _dep("x", ["b"], ["y"]), _dep("y", ["x"])),
            unique,
        )
        assert _shape(root) == ("m", [("b", [("x", [("y", [])])])])
        assert unique == {"gav://m", "gav://b", "gav://x", "gav://y"}

    def test_direct_dependency_rerequested_is_not_an_edge(self):
        root = add_module_tree(
            _module("m", _dep("a"), _dep("b", ["a"]),
                    Dependency("a", requested_by=[["m"], ["b"]])),
            set(),
        )
        assert _shape(root) == ("m", [("a", [("b", [])])])

    def test_self_loop_terminates(self):
        root = add_module_tree(
            _module("m", _dep("b"), _dep("c", ["b"], ["c"])), set()
        )
        assert _shape(root) == ("m", [("b", [("c", [])])])

    def test_duplicate_direct_dependency_collapses(self):
        root = add_module_tree(_module("m", _dep("b"), _dep("b", ["m"])), set())
        assert _shape(root) == ("m", [("b", [])])

    def test_empty_later_chain_is_skipped(self):
        root = add_module_tree(
            _module("m", _dep("b"), _dep("c", ["b"], [])), set()
        )
        assert _shape(root) == ("m", [("b", [("c", [])])])

    def test_orphan_transitive_is_not_attached(self):
        unique = set()
        root = add_module_tree(_module("m", _dep("b"), _dep("c", ["zz"])), unique)
        assert _shape(root) == ("m", [("b", [])])
        assert "gav://c" not in unique

    def test_deep_chain_beyond_recursion_limit(self):
        depth = 2000
        deps = [_dep("d0")] + [_dep(f"d{i}", [f"d{i - 1}"]) for i in range(1, depth)]
        unique = set()
        root = add_module_tree(_module("m", *deps), unique)

        node, seen = root, []
        while node.nodes:
            assert len(node.nodes) == 1
            node = node.nodes[0]
            seen.append(node.id)
        assert seen == [f"gav://d{i}" for i in range(depth)]
        assert len(unique) == depth + 1

    def test_deep_cycle_back_to_top(self):
        depth = 2000
        deps = [_dep("d0"), _dep("d1", ["d0"], [f"d{depth - 1}"])]
        deps += [_dep(f"d{i}", [f"d{i - 1}"]) for i in range(2, depth)]
        root = add_module_tree(_module("m", *deps), set())
        ids = list(root.iter_ids())
        # d1 requested again by the last link is dropped, not repeated
        assert ids == ["gav://m"] + [f"gav://d{i}" for i in range(depth)]

    def test_custom_namer(self):
        root = add_module_tree(
            _module("m", _dep("b")), set(), namer=lambda raw: "npm://" + raw
        )
        assert root.id == "npm://m"
        assert root.nodes[0].id == "npm://b"


# ── Build-level construction ──────────────────────────────────

class TestCreateGavDependencyTree:
    def test_missing_build(self):
        with pytest.raises(NotFoundError, match="Couldn't find build audit-mvn/17"):
            create_gav_dependency_tree([], "audit-mvn", "17")

    def test_one_tree_per_module(self):
        info = BuildInfo(
            name="audit-mvn",
            number="1",
            modules=[
                _module("m1", _dep("b"), _dep("c", ["b", "m1"])),
                _module("m2", _dep("c")),
            ],
        )
        roots, unique = create_gav_dependency_tree([info])
        assert [r.id for r in roots] == ["gav://m1", "gav://m2"]
        assert unique == sorted({"gav://m1", "gav://m2", "gav://b", "gav://c"})

    def test_only_first_build_info_is_used(self):
        first = BuildInfo("b", "1", [_module("m1")])
        second = BuildInfo("b", "1", [_module("m2")])
        roots, _ = create_gav_dependency_tree([first, second])
        assert [r.id for r in roots] == ["gav://m1"]

    def test_unique_ids_match_graph(self):
        info = BuildInfo("b", "1", [
            _module(
                "m",
                _dep("a"),
                _dep("b", ["a", "m"]),
                _dep("c", ["b", "a", "m"], ["a", "m"]),
                _dep("a", ["c", "b", "a", "m"]),
            ),
        ])
        roots, unique = create_gav_dependency_tree([info])
        assert set(unique) == _all_ids(roots)
        assert len(unique) == len(set(unique))

    def test_idempotent(self):
        info = BuildInfo("b", "1", [
            _module("m", _dep("b"), _dep("c", ["b"]), _dep("d", ["c", "b"])),
        ])
        first_roots, first_unique = create_gav_dependency_tree([info])
        second_roots, second_unique = create_gav_dependency_tree([info])
        assert first_unique == second_unique
        assert _all_ids(first_roots) == _all_ids(second_roots)
        assert isinstance(first_roots[0], GraphNode)
