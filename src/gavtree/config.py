"""Parameters for dependency tree construction, with defaults read from project config."""

from __future__ import annotations

import dataclasses
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from gavtree.model import Technology

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 1800


@dataclass
class ServerDetails:
    """Connection details of the repository server used to resolve build plugins."""

    url: str
    user: str | None = None
    access_token: str | None = None

    def repo_url(self, repo: str) -> str:
        return f"{self.url.rstrip('/')}/{repo}"


@dataclass
class DependencyTreeParams:
    project_dir: Path = field(default_factory=Path.cwd)
    tool: Technology | None = None
    insecure_tls: bool = False
    ignore_config_file: bool = False
    exclude_test_deps: bool = False
    use_wrapper: bool = False
    server: ServerDetails | None = None
    deps_repo: str = ""
    extractor_dir: Path | None = None  # Maven build-info extractor jars
    plugin_jar: Path | None = None  # gradle-dep-tree plugin jar
    timeout: int = DEFAULT_TIMEOUT


_PATH_KEYS = {"extractor_dir", "plugin_jar"}
_BOOL_KEYS = {"insecure_tls", "exclude_test_deps", "use_wrapper"}
_FILE_KEYS = _PATH_KEYS | _BOOL_KEYS | {"tool", "deps_repo", "timeout", "server"}


def load_params(project_dir: Path, **overrides) -> DependencyTreeParams:
    """Build params for *project_dir* from its config file, then *overrides*.

    ``ignore_config_file=True`` skips reading the config file.
    """
    project_dir = Path(project_dir)
    values: dict = {}
    if not overrides.get("ignore_config_file"):
        values.update(_coerce(read_config(project_dir), project_dir))
    values.update(overrides)
    values["project_dir"] = project_dir
    return DependencyTreeParams(**values)


def read_config(project_dir: Path) -> dict:
    """Read the ``gavtree`` table from .gavtree.toml or pyproject.toml."""
    gavtree_toml = project_dir / ".gavtree.toml"
    if gavtree_toml.exists():
        try:
            with open(gavtree_toml, "rb") as f:
                data = tomllib.load(f)
            return data.get("gavtree", {})
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.debug("Could not read %s: %s", gavtree_toml, e)

    pyproject = project_dir / "pyproject.toml"
    if pyproject.exists():
        try:
            with open(pyproject, "rb") as f:
                data = tomllib.load(f)
            return data.get("tool", {}).get("gavtree", {})
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.debug("Could not read %s: %s", pyproject, e)

    return {}


def _coerce(raw: dict, project_dir: Path) -> dict:
    if not isinstance(raw, dict):
        return {}
    values: dict = {}
    for key, value in raw.items():
        if key not in _FILE_KEYS:
            logger.debug("Ignoring unknown config key %r", key)
            continue
        try:
            if key == "tool":
                values[key] = Technology(value)
            elif key == "server":
                names = {f.name for f in dataclasses.fields(ServerDetails)}
                values[key] = ServerDetails(
                    **{k: v for k, v in value.items() if k in names}
                )
            elif key in _PATH_KEYS:
                values[key] = project_dir / value
            elif key in _BOOL_KEYS:
                values[key] = bool(value)
            elif key == "timeout":
                values[key] = int(value)
            else:
                values[key] = str(value)
        except (TypeError, ValueError, AttributeError) as e:
            logger.debug("Ignoring invalid config value for %r: %s", key, e)
    return values
