from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from family_tree.cli.utils import fail, load_tree, write_json
from family_tree.core.exceptions import FamilyTreeError

console = Console()


def layout_command(
    tree: Path = typer.Argument(..., exists=True, readable=True),
    root: Optional[str] = typer.Option(
        None,
        "--root",
        "-r",
        help="Member id to lay out from (defaults to the first member)",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write output to file instead of stdout",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
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
    Compute the generation layout (layers, positions, edges) as JSON.
    """
    try:
        session, _ = load_tree(tree, verbose=verbose)
    except FamilyTreeError as exc:
        fail(exc)

    if root is not None and root not in session.graph:
        console.print(f"[bold red]Error:[/bold red] unknown member id {root!r}")
        raise typer.Exit(code=1)

    layout = session.layout(root_id=root)

    if verbose:
        console.log(f"{len(layout.layers)} layers, {len(layout.edges)} parent edges")

    write_json(layout.to_dict(), out=out, pretty=pretty)
