"""
json_exporter.py
Bare-array JSON exporter for FamilyGraph objects.

This exporter:
- Emits the same shape the import sanitizer accepts (always the bare array)
- Omits optional fields that are absent
- Is deterministic: member order is graph insertion order
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from family_tree.graph.model import FamilyGraph
from family_tree.logging import get_logger

log = get_logger("json_exporter")


def export_members(graph: FamilyGraph) -> List[Dict[str, Any]]:
    """
    Convert the graph into JSON-safe member dicts.
    """
    return [member.to_dict() for member in graph.all()]


def serialize_graph_to_json_string(graph: FamilyGraph, indent: int | None = 2) -> str:
    return json.dumps(
        export_members(graph),
        indent=indent,
        ensure_ascii=False,
    )


def export_graph_json(graph: FamilyGraph, output_path: str | Path, indent: int = 2) -> None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    log.info(
        "Exporting family tree JSON to: %s (members=%d, relations=%d)",
        output_path,
        len(graph),
        graph.relation_count(),
    )

    json_str = serialize_graph_to_json_string(graph, indent=indent)

    with output_path.open("w", encoding="utf-8") as f:
        f.write(json_str)

    size_bytes = output_path.stat().st_size
    log.info("JSON export complete. size=%d bytes", size_bytes)
