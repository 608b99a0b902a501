"""Parent → children index over build-info dependency records."""

from __future__ import annotations

from gavtree.model import Dependency


class DependencyMultimap:
    """Map a parent identifier to its direct children, keyed by child id.

    Built once per module while populating its tree, then discarded.
    """

    def __init__(self) -> None:
        self._multimap: dict[str, dict[str, Dependency]] = {}

    def put_child(self, parent: str, child: Dependency) -> None:
        self._multimap.setdefault(parent, {})[child.id] = child

    def get_children(self, parent: str) -> dict[str, Dependency]:
        return self._multimap.get(parent, {})

    def __contains__(self, parent: str) -> bool:
        return parent in self._multimap

    def __len__(self) -> int:
        return len(self._multimap)
