"""
Graph model: Member/Relation records and the FamilyGraph arena.
"""

from __future__ import annotations

from .models import (
    COUPLE_TYPES,
    SAME_GENERATION_TYPES,
    Member,
    Relation,
    RelationType,
    Sex,
)
from .model import FamilyGraph, GraphTransaction

__all__ = [
    "COUPLE_TYPES",
    "SAME_GENERATION_TYPES",
    "FamilyGraph",
    "GraphTransaction",
    "Member",
    "Relation",
    "RelationType",
    "Sex",
]
