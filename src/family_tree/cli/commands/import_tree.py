from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from family_tree.cli.utils import fail, load_tree
from family_tree.core.exceptions import FamilyTreeError

console = Console()


def import_command(
    tree: Path = typer.Argument(..., exists=True, readable=True),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write the sanitized export to this file",
    ),
    repair: bool = typer.Option(
        True,
        "--repair/--no-repair",
        help="Add missing reciprocal relations",
    ),
):
    """
    Sanitize an export and report what was dropped or repaired.
    """
    try:
        session, report = load_tree(tree, repair_reciprocity=repair)
    except FamilyTreeError as exc:
        fail(exc)

    table = Table(title="Import Report")
    table.add_column("Item", style="bold")
    table.add_column("Count", justify="right")

    table.add_row("Members kept", str(len(report.members)))
    table.add_row("Records skipped", str(report.skipped_records))
    table.add_row("Relations dropped", str(report.dropped_relations))
    table.add_row("Dangling relations pruned", str(report.pruned_relations))
    table.add_row("Reciprocal relations added", str(report.repaired_relations))

    console.print(table)

    if report.is_empty:
        console.print("No valid members found; a default member was created.")

    if out:
        out.write_text(session.export_text(), encoding="utf-8")
        console.print(f"Sanitized tree written to {out}")
