
from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from family_tree.cli.utils import fail, load_tree
from family_tree.core.exceptions import FamilyTreeError
from family_tree.graph.models import RelationType

console = Console()


def stats_command(
    tree: Path = typer.Argument(..., exists=True, readable=True),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable rich logging",
    ),
):
    """
    Show summary statistics for a family tree export.
    """
    try:
        session, report = load_tree(tree, verbose=verbose)
    except FamilyTreeError as exc:
        fail(exc)

    graph = session.graph
    layout = session.layout()

    table = Table(title="Family Tree Statistics")
    table.add_column("Item", style="bold")
    table.add_column("Count", justify="right")

    table.add_row("Members", str(len(graph)))
    for rel_type in RelationType:
        count = sum(len(graph.relations_of(mid, rel_type)) for mid in graph)
        table.add_row(f"Relations: {rel_type.value}", str(count))
    table.add_row("Generations", str(len(layout.layers) - (1 if layout.unreached else 0)))
    table.add_row("Disconnected members", str(len(layout.unreached)))
    table.add_row("Records skipped on load", str(report.skipped_records))

    console.print(table)
