import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from depgraph._errors import CircularDependencyError, GraphFileError
from depgraph._graph import DependencyGraph
from depgraph._io import load_graph_from_toml

from .config import ConfigError, get_config
from .render import build_summary_table, render_node_list, render_order_table

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

GraphFileArgument = Annotated[
    Path | None,
    typer.Argument(help="Path to the graph TOML file (defaults to [tool.depgraph].graph in pyproject.toml)"),
]
TransitiveOption = Annotated[
    bool,
    typer.Option("--transitive", "-t", help="Include indirect relationships"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Depgraph CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _resolve_graph_path(path: Path | None) -> Path:
    """Use the given path or fall back to the configured one."""
    if path is not None:
        return path

    try:
        config = get_config()
    except ConfigError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    if config.graph is None:
        err_console.print("[red]Error: No graph file given and no [tool.depgraph].graph configured[/red]")
        raise typer.Exit(code=1)
    return config.graph


def _load_graph(path: Path | None) -> DependencyGraph[str]:
    """Load the graph file, reporting failures on the error console."""
    graph_path = _resolve_graph_path(path)
    err_console.print(f"[cyan]Loading graph from:[/cyan] {escape(str(graph_path))}")

    try:
        return load_graph_from_toml(graph_path)
    except GraphFileError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    except CircularDependencyError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


@app.command()
def order(
    path: GraphFileArgument = None,
    *,
    sort: Annotated[
        bool,
        typer.Option("--sorted", help="Break ties between independent nodes alphabetically"),
    ] = False,
    table: Annotated[
        bool,
        typer.Option("--table", help="Show the order as a table with each node's dependencies"),
    ] = False,
) -> None:
    """Print nodes in dependency order (dependencies first)."""
    graph = _load_graph(path)
    nodes = graph.topological_order(key=str if sort else None)

    if table:
        render_order_table(nodes, graph, out_console)
        return

    for node in nodes:
        out_console.print(escape(node))


@app.command()
def deps(
    node: Annotated[str, typer.Argument(help="Node to query")],
    path: GraphFileArgument = None,
    *,
    transitive: TransitiveOption = False,
) -> None:
    """Show what a node depends on."""
    graph = _load_graph(path)
    if node not in graph:
        logger.warning(f"Node '{node}' is not in the graph")

    result = graph.transitive_dependencies(node) if transitive else graph.immediate_dependencies(node)
    render_node_list("Dependencies", result, out_console)


@app.command()
def dependents(
    node: Annotated[str, typer.Argument(help="Node to query")],
    path: GraphFileArgument = None,
    *,
    transitive: TransitiveOption = False,
) -> None:
    """Show what depends on a node."""
    graph = _load_graph(path)
    if node not in graph:
        logger.warning(f"Node '{node}' is not in the graph")

    result = graph.transitive_dependents(node) if transitive else graph.immediate_dependents(node)
    render_node_list("Dependents", result, out_console)


@app.command()
def check(path: GraphFileArgument = None) -> None:
    """Check that a graph file is well-formed and acyclic."""
    err_console.print()
    graph = _load_graph(path)
    err_console.print()

    err_console.print(
        Panel(
            build_summary_table(graph),
            title="[bold]Graph[/bold]",
            subtitle=f"[dim]{len(graph)} nodes[/dim]",
            border_style="cyan",
        ),
    )
    err_console.print()
    err_console.print("[green]✓ Graph is valid[/green]")
    err_console.print()


def main() -> None:
    app()
