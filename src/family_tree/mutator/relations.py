"""
Relation Mutator.

Applies one user-requested edit, "connect SOURCE to TARGET with relation R",
as a single transaction over a FamilyGraph:

  1. resolve the target (existing id, or a new member created inline)
  2. insert R on the source and reciprocal(R) on the target
  3. joint-parenting propagation:
       - child added to one half of a couple becomes a child of both
       - a new spouse/partner becomes a parent of the source's children

Every insert is idempotent, propagation is a single hop, and a failed
validation leaves the graph untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from family_tree.core.exceptions import ValidationError, ValidationReason
from family_tree.graph.model import FamilyGraph, GraphTransaction
from family_tree.graph.models import COUPLE_TYPES, Member, Relation, RelationType
from family_tree.identity.id_factory import IdFactory, fresh_id, new_member_id
from family_tree.logging import get_logger

log = get_logger("mutator")

_RECIPROCAL: Dict[RelationType, RelationType] = {
    RelationType.PARENT: RelationType.CHILD,
    RelationType.CHILD: RelationType.PARENT,
    RelationType.SPOUSE: RelationType.SPOUSE,
    RelationType.PARTNER: RelationType.PARTNER,
    RelationType.SIBLING: RelationType.SIBLING,
}


def reciprocal(rel_type: Union[RelationType, str]) -> RelationType:
    """parent<->child, spouse/partner/sibling map to themselves, anything else to other."""
    return _RECIPROCAL.get(RelationType.coerce(rel_type), RelationType.OTHER)


# ----------------------------------------------------------------------
# Request types
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class ExistingTarget:
    existing_id: Optional[str]


@dataclass(frozen=True)
class NewTarget:
    new_name: str


Target = Union[ExistingTarget, NewTarget]


@dataclass(frozen=True)
class RelationEdit:
    """
    UI intent: ``{sourceId, type, target: {existingId} | {newName}}``.
    """
    source_id: str
    type: RelationType
    target: Target

    @classmethod
    def from_dict(cls, data: Dict) -> "RelationEdit":
        target_raw = data.get("target") or {}
        if "newName" in target_raw:
            target: Target = NewTarget(new_name=str(target_raw.get("newName") or ""))
        else:
            target = ExistingTarget(existing_id=target_raw.get("existingId"))
        return cls(
            source_id=str(data.get("sourceId") or ""),
            type=RelationType.coerce(data.get("type")),
            target=target,
        )


@dataclass(frozen=True)
class EditResult:
    target_id: str
    created: bool
    added: List[Tuple[str, Relation]]

    @property
    def changed(self) -> bool:
        return self.created or bool(self.added)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------

def _link_pair(tx: GraphTransaction, a: str, b: str, rel_type: RelationType) -> None:
    """Stage a->b as rel_type and b->a as its reciprocal, each only once."""
    tx.link(a, Relation(rel_type, b))
    tx.link(b, Relation(reciprocal(rel_type), a))


def _resolve_target(
    graph: FamilyGraph,
    tx: GraphTransaction,
    edit: RelationEdit,
    id_factory: IdFactory,
) -> Tuple[str, bool]:
    if isinstance(edit.target, NewTarget):
        name = (edit.target.new_name or "").strip()
        if not name:
            raise ValidationError(ValidationReason.EMPTY_NAME)
        target_id = fresh_id(graph, id_factory)
        tx.add_member(Member(id=target_id, name=name))
        return target_id, True

    target_id = edit.target.existing_id
    if not target_id:
        raise ValidationError(ValidationReason.NO_TARGET_SELECTED)
    if target_id == edit.source_id:
        raise ValidationError(ValidationReason.SELF_RELATION)
    if target_id not in graph:
        raise ValidationError(ValidationReason.UNKNOWN_TARGET)
    return target_id, False


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def apply_relation_edit(
    graph: FamilyGraph,
    edit: RelationEdit,
    *,
    id_factory: IdFactory = new_member_id,
) -> EditResult:
    """
    Apply ``edit`` to ``graph`` atomically.

    Raises ValidationError (graph unchanged) when:
      - the source is unknown
      - a new target has an empty name
      - no existing target was picked, or it is unknown
      - the target is the source
    """
    if edit.source_id not in graph:
        raise ValidationError(ValidationReason.UNKNOWN_SOURCE)

    source_id = edit.source_id
    rel_type = RelationType.coerce(edit.type)

    with graph.transaction() as tx:
        target_id, created = _resolve_target(graph, tx, edit, id_factory)

        _link_pair(tx, source_id, target_id, rel_type)

        # Joint parenting: looked up on the committed graph so propagation
        # only ever follows relations that existed before this edit.
        if rel_type == RelationType.CHILD:
            partner = next(
                (r for r in graph.relations_of(source_id) if r.type in COUPLE_TYPES),
                None,
            )
            if partner is not None and partner.target_id != target_id:
                _link_pair(tx, partner.target_id, target_id, RelationType.CHILD)

        elif rel_type in COUPLE_TYPES:
            for child in graph.relations_of(source_id, RelationType.CHILD):
                if child.target_id != target_id:
                    _link_pair(tx, target_id, child.target_id, RelationType.CHILD)

        added = tx.staged_links

    log.debug(
        "Applied %s edit %s -> %s (created=%s, links=%d)",
        rel_type.value,
        source_id,
        target_id,
        created,
        len(added),
    )
    return EditResult(target_id=target_id, created=created, added=added)


def add_relation(
    graph: FamilyGraph,
    source_id: str,
    rel_type: Union[RelationType, str],
    *,
    existing_id: Optional[str] = None,
    new_name: Optional[str] = None,
    id_factory: IdFactory = new_member_id,
) -> EditResult:
    """
    Keyword convenience over ``apply_relation_edit``.

    ``new_name`` wins when both are given, matching the "New" toggle.
    """
    target: Target = NewTarget(new_name) if new_name is not None else ExistingTarget(existing_id)
    edit = RelationEdit(source_id=source_id, type=RelationType.coerce(rel_type), target=target)
    return apply_relation_edit(graph, edit, id_factory=id_factory)
