"""Maven dependency trees from build-info generated by the build-info extractor."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from gavtree.builders.base import Runner, find_executable, run_build_tool
from gavtree.buildinfo import (
    MAVEN_BUILD_NAME,
    BuildConfiguration,
    get_generated_builds_info,
)
from gavtree.config import DependencyTreeParams
from gavtree.detect import is_maven_project
from gavtree.errors import BuildToolError
from gavtree.model import GraphNode, Technology
from gavtree.naming import namer_for
from gavtree.requested_by import create_gav_dependency_tree

logger = logging.getLogger(__name__)

BUILD_INFO_PROPFILE_ENV = "BUILDINFO_PROPFILE"


class MavenTreeBuilder:
    """Run Maven with the build-info extractor and read its requested-by chains."""

    def __init__(self, runner: Runner = run_build_tool) -> None:
        self._runner = runner

    def can_handle(self, project_dir: Path) -> bool:
        return is_maven_project(project_dir)

    def build(self, params: DependencyTreeParams) -> tuple[list[GraphNode], list[str]]:
        project_dir = Path(params.project_dir)
        mvn = find_executable(project_dir, "mvn", params.use_wrapper)

        with BuildConfiguration(MAVEN_BUILD_NAME) as build_config:
            build_dir = build_config.build_dir()
            build_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.TemporaryDirectory(prefix="gavtree-mvn-") as tmp:
                prop_file = Path(tmp) / "buildinfo.properties"
                prop_file.write_text(
                    _build_info_properties(params, build_config, build_dir),
                    encoding="utf-8",
                )
                cmd = [mvn, *_maven_goals(params)]
                self._runner(
                    cmd,
                    project_dir,
                    {BUILD_INFO_PROPFILE_ENV: str(prop_file)},
                    params.timeout,
                )

            builds_info = get_generated_builds_info(build_config)
            logger.debug(
                "Maven build %s/%s generated %d build-info files",
                build_config.build_name,
                build_config.build_number,
                len(builds_info),
            )
            return create_gav_dependency_tree(
                builds_info,
                build_config.build_name,
                build_config.build_number,
                namer_for(Technology.MAVEN),
            )


def _maven_goals(params: DependencyTreeParams) -> list[str]:
    if params.extractor_dir is None:
        raise BuildToolError(["mvn"], "no build-info extractor directory configured")
    extractor_dir = Path(params.extractor_dir)
    jars = sorted(str(p) for p in extractor_dir.glob("*.jar"))
    if not jars:
        raise BuildToolError(["mvn"], f"no extractor jars found in {extractor_dir}")

    goals = ["-B", "compile"]
    if not params.exclude_test_deps:
        goals.append("test-compile")
    goals.append(f"-Dmaven.ext.class.path={os.pathsep.join(jars)}")
    if params.insecure_tls:
        goals += [
            "-Dmaven.wagon.http.ssl.insecure=true",
            "-Dmaven.wagon.http.ssl.allowall=true",
        ]
    return goals


def _build_info_properties(
    params: DependencyTreeParams, build_config: BuildConfiguration, build_dir: Path
) -> str:
    props = {
        "buildInfo.build.name": build_config.build_name,
        "buildInfo.build.number": build_config.build_number,
        "buildInfo.build.project": build_config.project,
        "buildInfo.generated.build.info": str(
            build_dir / f"{build_config.build_number}.json"
        ),
        "artifactory.publish.artifacts": "false",
        "artifactory.publish.buildInfo": "false",
    }
    if params.server is not None and params.deps_repo:
        props["artifactory.resolve.contextUrl"] = params.server.url
        props["artifactory.resolve.repoKey"] = params.deps_repo
        if params.server.user:
            props["artifactory.resolve.username"] = params.server.user
        if params.server.access_token:
            props["artifactory.resolve.password"] = params.server.access_token
    if params.insecure_tls:
        props["artifactory.insecureTls"] = "true"
    lines = []
    for key, value in props.items():
        # Backslashes are escapes in .properties files
        value = value.replace("\\", "/")
        lines.append(f"{key}={value}\n")
    return "".join(lines)
