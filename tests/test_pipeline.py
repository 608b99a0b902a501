"""Tests for technology detection and top-level orchestration."""

import json
from pathlib import Path

import pytest

from gavtree.builders import GradleTreeBuilder, MavenTreeBuilder
from gavtree.config import DependencyTreeParams
from gavtree.errors import UnsupportedTechnologyError
from gavtree.model import Technology
from gavtree.pipeline import build_dependency_tree, detect_builder, select_builder


class TestDetectBuilder:
    def test_maven(self, tmp_path):
        (tmp_path / "pom.xml").write_text("")
        assert isinstance(detect_builder(tmp_path), MavenTreeBuilder)

    def test_gradle(self, tmp_path):
        (tmp_path / "build.gradle.kts").write_text("")
        assert isinstance(detect_builder(tmp_path), GradleTreeBuilder)

    def test_maven_wins(self, tmp_path):
        (tmp_path / "pom.xml").write_text("")
        (tmp_path / "build.gradle").write_text("")
        assert isinstance(detect_builder(tmp_path), MavenTreeBuilder)

    def test_unknown(self, tmp_path):
        with pytest.raises(UnsupportedTechnologyError):
            detect_builder(tmp_path)


class TestSelectBuilder:
    def test_maven(self):
        assert isinstance(select_builder(Technology.MAVEN), MavenTreeBuilder)

    def test_gradle(self):
        assert isinstance(select_builder(Technology.GRADLE), GradleTreeBuilder)


class TestBuildDependencyTree:
    def _gradle_project(self, tmp_path):
        (tmp_path / "build.gradle").write_text("")
        (tmp_path / "gradlew").write_text("")
        tree = tmp_path / "tree.json"
        tree.write_text(json.dumps({"root": "m", "nodes": {"m": {"children": ["a"]}}}))
        return tree

    def test_detects_and_builds(self, tmp_path):
        tree = self._gradle_project(tmp_path)
        calls = []

        def runner(cmd, cwd, env, timeout):
            calls.append(cmd)
            prefix = "-Dcom.jfrog.depsTreeOutputFile="
            out = next(a for a in cmd if a.startswith(prefix))[len(prefix):]
            Path(out).write_text(f"{tree}\n")
            return ""

        params = DependencyTreeParams(project_dir=tmp_path, use_wrapper=True)
        roots, unique = build_dependency_tree(params, runner=runner)
        assert len(calls) == 1
        assert [r.id for r in roots] == ["gav://m"]
        assert unique == ["gav://a", "gav://m"]

    def test_unknown_project(self, tmp_path):
        with pytest.raises(UnsupportedTechnologyError):
            build_dependency_tree(DependencyTreeParams(project_dir=tmp_path))
