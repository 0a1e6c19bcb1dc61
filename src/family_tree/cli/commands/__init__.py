
"""
CLI command modules for family_tree.

Each command module defines a single Typer-compatible command function.
"""

from family_tree.cli.commands.export import export_command
from family_tree.cli.commands.import_tree import import_command
from family_tree.cli.commands.layout import layout_command
from family_tree.cli.commands.relate import relate_command
from family_tree.cli.commands.stats import stats_command

__all__ = [
    "export_command",
    "import_command",
    "layout_command",
    "relate_command",
    "stats_command",
]
