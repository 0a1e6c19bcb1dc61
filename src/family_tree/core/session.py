from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from family_tree.config import FTConfig, get_config
from family_tree.exporter import export_members, serialize_graph_to_json_string
from family_tree.graph.model import FamilyGraph
from family_tree.graph.models import Member, Sex
from family_tree.identity.id_factory import IdFactory, fresh_id, new_member_id
from family_tree.importer import ImportReport, parse_import_text, sanitize_import
from family_tree.layout import LayoutSettings, TreeLayout, compute_layout
from family_tree.logging import get_logger
from family_tree.mutator import EditResult, RelationEdit, apply_relation_edit


class TreeSession:
    """
    Owns one FamilyGraph and threads it through the core operations.

    Orchestration only: every rule lives in the mutator, sanitizer,
    exporter or layout engine. The layout is recomputed lazily after any
    change.
    """

    def __init__(
        self,
        graph: Optional[FamilyGraph] = None,
        *,
        config: Optional[FTConfig] = None,
        id_factory: IdFactory = new_member_id,
        profile: Optional[Dict[str, Any]] = None,
    ):
        self.config = config or get_config()
        self.log = get_logger("session")
        self.id_factory = id_factory
        self.profile = dict(profile or {})
        self._graph = graph if graph is not None else FamilyGraph()
        self._layout: Optional[TreeLayout] = None
        self._layout_key: Optional[Tuple[Optional[str], int]] = None

    @property
    def graph(self) -> FamilyGraph:
        return self._graph

    # ------------------------------------------------------------------
    # Bootstrap / reset
    # ------------------------------------------------------------------

    def ensure_default_member(self) -> Optional[str]:
        """
        Create the "self" member when the graph is empty.

        Returns the new member's id, or None if the graph already had members.
        """
        if len(self._graph) > 0:
            return None

        default_name = self.config.session.get("default_member_name", "Me")
        name = self.profile.get("name")
        if not isinstance(name, str) or not name.strip():
            name = default_name

        def _text(key: str) -> Optional[str]:
            value = self.profile.get(key)
            return value if isinstance(value, str) and value else None

        member = Member(
            id=fresh_id(self._graph, self.id_factory),
            name=name.strip(),
            dob=_text("dob"),
            email=_text("email"),
            photo=_text("photo"),
            sex=Sex.parse(self.profile.get("sex")),
        )
        with self._graph.transaction() as tx:
            tx.add_member(member)

        self.log.info("Created default member %s (%s)", member.id, member.name)
        return member.id

    def reset(self) -> str:
        """Drop all members and bootstrap a fresh "self" member."""
        self._graph.clear()
        self.log.info("Family data cleared")
        return self.ensure_default_member()

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def apply(self, edit: RelationEdit) -> EditResult:
        result = apply_relation_edit(self._graph, edit, id_factory=self.id_factory)
        self.log.info(
            "Relation %s: %s -> %s (%d links added)",
            edit.type.value,
            edit.source_id,
            result.target_id,
            len(result.added),
        )
        return result

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def import_data(self, data: Any, *, repair_reciprocity: Optional[bool] = None) -> ImportReport:
        """
        Replace the graph with a sanitized import.

        FormatError leaves the current graph untouched.
        """
        report = sanitize_import(data, repair_reciprocity=repair_reciprocity)
        self._graph = FamilyGraph.from_members(report.members)
        self._layout = None

        if report.skipped_records:
            self.log.warning("Import skipped %d malformed records", report.skipped_records)
        self.log.info("Imported family tree: %s", report.summary())

        self.ensure_default_member()
        return report

    def import_text(self, text: str, *, repair_reciprocity: Optional[bool] = None) -> ImportReport:
        return self.import_data(parse_import_text(text), repair_reciprocity=repair_reciprocity)

    def export_members(self) -> List[Dict[str, Any]]:
        return export_members(self._graph)

    def export_text(self, indent: int = 2) -> str:
        return serialize_graph_to_json_string(self._graph, indent=indent)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def layout(self, root_id: Optional[str] = None) -> TreeLayout:
        """
        Layout of the current graph, recomputed whenever the graph version
        or the root changes, including edits made directly on ``graph``.
        """
        key = (root_id, self._graph.version)
        if self._layout is None or key != self._layout_key:
            settings = LayoutSettings.from_config(self.config)
            self._layout = compute_layout(self._graph, root_id=root_id, settings=settings)
            self._layout_key = key
        return self._layout
