
from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Optional, Tuple

import typer
from rich.console import Console

from family_tree.core.exceptions import FamilyTreeError
from family_tree.core.session import TreeSession
from family_tree.importer import ImportReport

console = Console()
err_console = Console(stderr=True)


def load_tree(
    path: Path,
    *,
    repair_reciprocity: Optional[bool] = None,
    verbose: bool = False,
) -> Tuple[TreeSession, ImportReport]:
    """
    Read a family tree export from disk into a fresh session.
    """
    if not path.exists():
        raise FileNotFoundError(path)

    t0 = time.perf_counter()

    session = TreeSession()
    report = session.import_text(
        path.read_text(encoding="utf-8"),
        repair_reciprocity=repair_reciprocity,
    )

    elapsed = time.perf_counter() - t0

    if verbose:
        console.log(f"Loaded {len(session.graph)} members in {elapsed:.3f}s")

    return session, report


def write_json(
    data: Any,
    *,
    out: Path | None,
    pretty: bool,
):
    """
    Write JSON to stdout or file.
    """
    if pretty:
        payload = json.dumps(data, indent=2, ensure_ascii=False)
    else:
        payload = json.dumps(data, separators=(",", ":"), ensure_ascii=False)

    if out:
        out.write_text(payload, encoding="utf-8")
    else:
        typer.echo(payload)


def fail(exc: FamilyTreeError) -> None:
    """Report a core error and exit with status 1."""
    err_console.print(f"[bold red]Error:[/bold red] {exc}")
    raise typer.Exit(code=1)
