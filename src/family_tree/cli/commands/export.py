from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from family_tree.cli.utils import fail, load_tree, write_json
from family_tree.core.exceptions import FamilyTreeError

console = Console()


def export_command(
    tree: Path = typer.Argument(..., exists=True, readable=True),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write output to file instead of stdout",
    ),
    pretty: bool = typer.Option(
        True,
        "--pretty/--compact",
        help="Pretty-print JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable rich logging",
    ),
):
    """
    Re-export a tree in the canonical bare-array shape.
    """
    try:
        session, _ = load_tree(tree, verbose=verbose)
    except FamilyTreeError as exc:
        fail(exc)

    if verbose:
        console.log("Exporting JSON")

    write_json(session.export_members(), out=out, pretty=pretty)

    if verbose:
        console.log("Export complete")
