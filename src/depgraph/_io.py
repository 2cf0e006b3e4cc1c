import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ._errors import GraphFileError
from ._graph import DependencyGraph

logger = logging.getLogger(__name__)


class GraphFile(BaseModel):
    """Schema of a graph input file.

    Example:
        [dependencies]
        web = ["db", "cache"]
        db = ["net"]

    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    dependencies: dict[str, list[str]] = Field(default_factory=dict)


def toml_to_graph(toml_contents: dict[str, Any]) -> DependencyGraph[str]:
    """Convert parsed TOML contents into a dependency graph.

    Args:
        toml_contents: The parsed TOML dictionary

    Returns:
        The graph described by the ``[dependencies]`` table

    Raises:
        GraphFileError: If the contents do not match the expected schema
        CircularDependencyError: If the declared dependencies contain a cycle

    """
    try:
        graph_file = GraphFile.model_validate(toml_contents)
    except ValidationError as e:
        msg = f"Invalid graph definition: {e}"
        raise GraphFileError(msg) from e

    graph = DependencyGraph.from_mapping(graph_file.dependencies)
    logger.debug(f"Built graph with {len(graph)} nodes")
    return graph


def load_graph_from_toml(input_path: Path | str) -> DependencyGraph[str]:
    """Load a dependency graph from a TOML file.

    Args:
        input_path: Path to the TOML file

    Returns:
        The graph described by the file

    Raises:
        GraphFileError: If the file is missing, is not valid TOML or does not
            match the expected schema
        CircularDependencyError: If the declared dependencies contain a cycle

    """
    input_path = Path(input_path).resolve()

    try:
        with input_path.open("rb") as f:
            toml_contents = tomllib.load(f)
    except FileNotFoundError as e:
        msg = f"Graph file not found: {input_path}"
        raise GraphFileError(msg) from e
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {input_path}: {e}"
        raise GraphFileError(msg) from e

    graph = toml_to_graph(toml_contents)
    logger.debug(f"Loaded graph from {input_path}")
    return graph
