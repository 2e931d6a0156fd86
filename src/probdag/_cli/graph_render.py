"""Rich rendering utilities for graph commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from probdag._nodes import Role

if TYPE_CHECKING:
    from rich.console import Console

    from .graph_query import ComponentSummary, NodeInfo


def render_component_table(summaries: list[ComponentSummary], console: Console) -> None:
    """Render sub-graph summaries as a Rich table.

    Args:
        summaries: List of ComponentSummary to render.
        console: Rich Console to output to.

    """
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Graph", style="bold")
    table.add_column("Variables", justify="right")
    table.add_column("Distributions", justify="right")
    table.add_column("Operations", justify="right")
    table.add_column("Data", justify="right")

    for summary in summaries:
        table.add_row(
            str(summary.component),
            str(summary.variable_count),
            str(summary.distribution_count),
            str(summary.operation_count),
            str(summary.data_count),
        )

    console.print(table)


def render_node_table(nodes: list[NodeInfo], console: Console) -> None:
    """Render node list as a Rich table.

    Args:
        nodes: List of NodeInfo to render.
        console: Rich Console to output to.

    """
    if not nodes:
        console.print("[dim]No nodes match the given filters[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim")
    table.add_column("Name")
    table.add_column("Role")
    table.add_column("Graph", justify="right")
    table.add_column("Parents", justify="right")

    for node in nodes:
        role_style = _get_role_style(node.role)
        table.add_row(
            node.id,
            escape(node.name) if node.name is not None else "",
            f"[{role_style}]{node.role.upper()}[/{role_style}]",
            str(node.component),
            str(node.parent_count),
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(nodes)} nodes[/dim]")


def _get_role_style(role: Role) -> str:
    """Get Rich style string for a node role.

    Args:
        role: The Role.

    Returns:
        Rich style string.

    """
    match role:
        case Role.DATA:
            return "blue"
        case Role.VARIABLE:
            return "green"
        case Role.DISTRIBUTION:
            return "magenta"
        case Role.OPERATION:
            return "yellow"
