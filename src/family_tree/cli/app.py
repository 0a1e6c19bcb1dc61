
from __future__ import annotations

import typer

from family_tree.cli.commands.export import export_command
from family_tree.cli.commands.import_tree import import_command
from family_tree.cli.commands.layout import layout_command
from family_tree.cli.commands.relate import relate_command
from family_tree.cli.commands.stats import stats_command

app = typer.Typer(
    name="family-tree",
    help="Family tree relation editor, sanitizer and layout engine",
    add_completion=False,
)

app.command("layout")(layout_command)
app.command("import")(import_command)
app.command("relate")(relate_command)
app.command("stats")(stats_command)
app.command("export")(export_command)


def main():
    app()


if __name__ == "__main__":
    main()
