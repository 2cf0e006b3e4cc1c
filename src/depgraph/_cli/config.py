"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Error in depgraph configuration."""


@dataclass(slots=True, frozen=True)
class DepgraphConfig:
    """Configuration loaded from pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    graph: Path | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def load_config(pyproject_path: Path) -> DepgraphConfig:
    """Load and validate [tool.depgraph] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed DepgraphConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    depgraph_section = data.get("tool", {}).get("depgraph", {})

    if not depgraph_section:
        return DepgraphConfig(project_root=project_root)

    graph_path: Path | None = None
    if "graph" in depgraph_section:
        graph_value = depgraph_section["graph"]
        if not isinstance(graph_value, str):
            msg = "Invalid [tool.depgraph].graph: expected string path"
            raise ConfigError(msg)
        graph_path = Path(graph_value)
        if not graph_path.is_absolute():
            graph_path = project_root / graph_path

    return DepgraphConfig(graph=graph_path, project_root=project_root)


def get_config(start_dir: Path | None = None) -> DepgraphConfig:
    """Get config from pyproject.toml in start_dir or its parents.

    Returns:
        DepgraphConfig (may be empty if no pyproject.toml or no [tool.depgraph] section)

    """
    pyproject_path = find_pyproject_toml(start_dir)
    if pyproject_path is None:
        return DepgraphConfig()
    return load_config(pyproject_path)
