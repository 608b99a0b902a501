"""Build-file checks used to decide which build tool applies to a project."""

from __future__ import annotations

from pathlib import Path


def is_maven_project(project_dir: Path) -> bool:
    return (project_dir / "pom.xml").exists()


def is_gradle_project(project_dir: Path) -> bool:
    return (project_dir / "build.gradle.kts").exists() or (
        project_dir / "build.gradle"
    ).exists()
