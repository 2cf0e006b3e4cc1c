"""Rich rendering utilities for graph commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Iterable

    from rich.console import Console

    from depgraph._graph import DependencyGraph


def render_order_table(order: list[str], graph: DependencyGraph[str], console: Console) -> None:
    """Render a topological order as a Rich table.

    Args:
        order: Nodes in topological order.
        graph: The graph the order was computed from.
        console: Rich Console to output to.

    """
    if not order:
        console.print("[dim]Graph is empty[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Node", style="bold")
    table.add_column("Depends on")

    for index, node in enumerate(order, start=1):
        deps = ", ".join(sorted(graph.immediate_dependencies(node)))
        table.add_row(str(index), escape(node), escape(deps) or "[dim]-[/dim]")

    console.print(table)


def render_node_list(title: str, nodes: Iterable[str], console: Console) -> None:
    """Render a set of nodes as a single-column Rich table."""
    names = sorted(nodes)
    if not names:
        console.print(f"[dim]No {title.lower()}[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column(title, style="bold")
    for name in names:
        table.add_row(escape(name))

    console.print(table)


def build_summary_table(graph: DependencyGraph[str]) -> Table:
    """Build a table of node and edge counts of a graph."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Nodes", justify="right")
    table.add_column("Edges", justify="right", style="yellow")
    table.add_column("Roots", justify="right", style="green")
    table.add_column("Leaves", justify="right", style="green")

    table.add_row(
        str(len(graph)),
        str(sum(1 for _ in graph.edges())),
        str(len(graph.roots())),
        str(len(graph.leaves())),
    )

    return table
