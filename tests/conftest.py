import json

import pytest


@pytest.fixture
def builds_dir(tmp_path, monkeypatch):
    """Point generated build-info directories at a per-test location."""
    path = tmp_path / "builds"
    monkeypatch.setenv("GAVTREE_BUILDS_DIR", str(path))
    return path


@pytest.fixture
def write_dep_tree(tmp_path):
    """Write a plugin-style module tree JSON file and return its path."""
    counter = [0]

    def _write(root, nodes=None, name=None):
        counter[0] += 1
        path = tmp_path / (name or f"module{counter[0]}.json")
        data = {"root": root, "nodes": {k: {"children": v} for k, v in (nodes or {}).items()}}
        path.write_text(json.dumps(data))
        return path

    return _write
