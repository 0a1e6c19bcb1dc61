"""
Exporter package.

Re-exports the JSON export entry points used by the session and CLI.
"""

from __future__ import annotations

from .json_exporter import export_graph_json, export_members, serialize_graph_to_json_string

__all__ = ["export_graph_json", "export_members", "serialize_graph_to_json_string"]
