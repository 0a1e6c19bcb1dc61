"""
Relation Mutator: the only writer of relation edges.
"""

from __future__ import annotations

from .relations import (
    EditResult,
    ExistingTarget,
    NewTarget,
    RelationEdit,
    add_relation,
    apply_relation_edit,
    reciprocal,
)

__all__ = [
    "EditResult",
    "ExistingTarget",
    "NewTarget",
    "RelationEdit",
    "add_relation",
    "apply_relation_edit",
    "reciprocal",
]
