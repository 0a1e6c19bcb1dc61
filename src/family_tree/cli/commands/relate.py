from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from family_tree.cli.utils import fail, load_tree
from family_tree.core.exceptions import FamilyTreeError
from family_tree.graph.models import RelationType
from family_tree.mutator import ExistingTarget, NewTarget, RelationEdit

console = Console()


class QuickRelation(str, Enum):
    child = "child"
    spouse = "spouse"
    sibling = "sibling"


def relate_command(
    tree: Path = typer.Argument(..., exists=True, readable=True),
    source: str = typer.Argument(..., help="Member id the relation starts from"),
    relation: QuickRelation = typer.Argument(..., help="Relation to add"),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        "-n",
        help="Create a new member with this name as the target",
    ),
    target: Optional[str] = typer.Option(
        None,
        "--target",
        "-t",
        help="Existing member id to use as the target",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write the updated tree here instead of overwriting TREE",
    ),
):
    """
    Add a child, spouse or sibling relation and save the tree.
    """
    edit = RelationEdit(
        source_id=source,
        type=RelationType(relation.value),
        target=NewTarget(name) if name is not None else ExistingTarget(target),
    )

    try:
        session, _ = load_tree(tree)
        result = session.apply(edit)
    except FamilyTreeError as exc:
        fail(exc)

    dest = out or tree
    dest.write_text(session.export_text(), encoding="utf-8")

    verb = "Created" if result.created else "Linked"
    console.print(
        f"{verb} {result.target_id} as {relation.value} of {source} "
        f"({len(result.added)} relation entries added) -> {dest}"
    )
