"""Gradle dependency trees from the gradle-dep-tree plugin output."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from string import Template

from gavtree.builders.base import Runner, find_executable, run_build_tool
from gavtree.config import DependencyTreeParams
from gavtree.deptree import get_graph_from_dep_tree
from gavtree.detect import is_gradle_project
from gavtree.errors import ReadError
from gavtree.model import GraphNode, Technology
from gavtree.naming import namer_for

logger = logging.getLogger(__name__)

GRADLE_DEP_TREE_VERSION = "3.0.1"

DEPS_REPO_URL_ENV = "GAVTREE_DEPS_REPO_URL"
DEPS_REPO_USER_ENV = "GAVTREE_DEPS_REPO_USER"
DEPS_REPO_TOKEN_ENV = "GAVTREE_DEPS_REPO_TOKEN"

_INIT_SCRIPT_PATH = Path(__file__).with_name("gradledeptree.init.gradle")


class GradleTreeBuilder:
    """Run the gradle-dep-tree plugin through an init script and read its output files."""

    def __init__(self, runner: Runner = run_build_tool) -> None:
        self._runner = runner

    def can_handle(self, project_dir: Path) -> bool:
        return is_gradle_project(project_dir)

    def build(self, params: DependencyTreeParams) -> tuple[list[GraphNode], list[str]]:
        project_dir = Path(params.project_dir)
        gradle = find_executable(project_dir, "gradle", params.use_wrapper)

        with tempfile.TemporaryDirectory(prefix="gavtree-gradle-") as tmp:
            init_script = Path(tmp) / "gradledeptree.init"
            init_script.write_text(render_init_script(params), encoding="utf-8")
            output_file = Path(tmp) / "deptrees.out"
            cmd = [
                gradle,
                "clean",
                "generateDepTrees",
                "-I",
                str(init_script),
                "-q",
                f"-Dcom.jfrog.depsTreeOutputFile={output_file}",
                "-Dcom.jfrog.includeAllBuildFiles=true",
            ]
            self._runner(
                cmd, project_dir, repository_env(params) or None, params.timeout
            )

            try:
                output = output_file.read_bytes()
            except OSError as e:
                raise ReadError(output_file, e.strerror or str(e)) from e
            logger.debug(
                "gradle-dep-tree output files:\n%s",
                output.decode("utf-8", "replace").strip(),
            )

        return get_graph_from_dep_tree(output, namer_for(Technology.GRADLE))


def render_init_script(params: DependencyTreeParams) -> str:
    """Render the init script applying the dep-tree plugin to all projects.

    Repository URL and credentials are not written into the script; it reads
    them from the environment built by :func:`repository_env`.
    """
    if params.plugin_jar is not None:
        jar = str(Path(params.plugin_jar).resolve()).replace("\\", "/")
        classpath = f"files({_groovy_string(jar)})"
    else:
        classpath = _groovy_string(
            f"com.jfrog:gradle-dep-tree:{GRADLE_DEP_TREE_VERSION}"
        )

    template = Template(_INIT_SCRIPT_PATH.read_text(encoding="utf-8"))
    return template.substitute(
        REPOSITORIES=_repositories(params), PLUGIN_CLASSPATH=classpath
    )


def repository_env(params: DependencyTreeParams) -> dict[str, str]:
    """Environment read by the init script's resolution repository."""
    if params.server is None or not params.deps_repo:
        return {}
    env = {DEPS_REPO_URL_ENV: params.server.repo_url(params.deps_repo)}
    if params.server.access_token:
        env[DEPS_REPO_USER_ENV] = params.server.user or ""
        env[DEPS_REPO_TOKEN_ENV] = params.server.access_token
    return env


def _groovy_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _repositories(params: DependencyTreeParams) -> str:
    indent = " " * 8
    if params.server is None or not params.deps_repo:
        return f"{indent}mavenCentral()"

    lines = [
        f"{indent}maven {{",
        f"{indent}    url System.getenv('{DEPS_REPO_URL_ENV}')",
    ]
    if params.insecure_tls:
        lines.append(f"{indent}    allowInsecureProtocol = true")
    if params.server.access_token:
        lines += [
            f"{indent}    credentials {{",
            f"{indent}        username = System.getenv('{DEPS_REPO_USER_ENV}')",
            f"{indent}        password = System.getenv('{DEPS_REPO_TOKEN_ENV}')",
            f"{indent}    }}",
        ]
    lines.append(f"{indent}}}")
    return "\n".join(lines)
