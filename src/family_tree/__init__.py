"""
family_tree: relation editing, import sanitizing and generation layout
for a small family tree.
"""

from family_tree.core.exceptions import (
    FamilyTreeError,
    FormatError,
    ValidationError,
    ValidationReason,
)
from family_tree.core.session import TreeSession
from family_tree.graph import FamilyGraph, Member, Relation, RelationType, Sex
from family_tree.importer import ImportReport, normalize_import, sanitize_import
from family_tree.layout import LayoutSettings, TreeLayout, compute_layout
from family_tree.mutator import (
    ExistingTarget,
    NewTarget,
    RelationEdit,
    add_relation,
    apply_relation_edit,
    reciprocal,
)

__version__ = "0.1.0"

__all__ = [
    "ExistingTarget",
    "FamilyGraph",
    "FamilyTreeError",
    "FormatError",
    "ImportReport",
    "LayoutSettings",
    "Member",
    "NewTarget",
    "Relation",
    "RelationEdit",
    "RelationType",
    "Sex",
    "TreeLayout",
    "TreeSession",
    "ValidationError",
    "ValidationReason",
    "add_relation",
    "apply_relation_edit",
    "compute_layout",
    "normalize_import",
    "reciprocal",
    "sanitize_import",
]
