"""Build configuration and the generated build-info files it owns."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import shutil
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path

from gavtree.errors import DecodeError, ReadError
from gavtree.model import BuildInfo

logger = logging.getLogger(__name__)

BUILDS_DIR_ENV = "GAVTREE_BUILDS_DIR"

MAVEN_BUILD_NAME = "audit-mvn"
GRADLE_BUILD_NAME = "audit-gradle"


def _timestamp() -> str:
    return str(int(time.time()))


@dataclass
class BuildConfiguration:
    """Names a temporary build whose generated build-info lives in :meth:`build_dir`.

    Usable as a context manager; the build dir is removed on exit.
    """

    build_name: str
    build_number: str = field(default_factory=_timestamp)
    project: str = ""

    def build_dir(self) -> Path:
        base = os.environ.get(BUILDS_DIR_ENV) or tempfile.gettempdir()
        key = f"{self.build_name}_{self.build_number}_{self.project}"
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return Path(base) / "jfrog" / "builds" / digest

    def cleanup(self) -> None:
        build_dir = self.build_dir()
        if build_dir.exists():
            logger.debug("Removing build dir %s", build_dir)
            shutil.rmtree(build_dir)

    def __enter__(self) -> BuildConfiguration:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.cleanup()
        except OSError as e:
            if exc_type is None:
                raise
            logger.warning("Could not remove build dir %s: %s", self.build_dir(), e)


def get_generated_builds_info(config: BuildConfiguration) -> list[BuildInfo]:
    """Read every generated build-info file of *config*'s build dir."""
    build_dir = config.build_dir()
    if not build_dir.is_dir():
        logger.debug("Build dir %s does not exist", build_dir)
        return []

    builds_info: list[BuildInfo] = []
    for build_file in sorted(build_dir.iterdir()):
        if build_file.is_dir():
            continue
        builds_info.append(read_build_info(build_file))
    logger.debug("Found %d generated build-info files in %s", len(builds_info), build_dir)
    return builds_info


def read_build_info(path: Path) -> BuildInfo:
    try:
        content = path.read_bytes()
    except OSError as e:
        raise ReadError(path, e.strerror or str(e)) from e
    try:
        return BuildInfo.from_dict(json.loads(content))
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
        raise DecodeError(path, str(e)) from e
