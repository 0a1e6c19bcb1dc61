"""
Layout Engine package.
"""

from __future__ import annotations

from .engine import (
    ParentEdge,
    Position,
    SpouseEdge,
    TreeLayout,
    are_mutual_spouses,
    assign_generations,
    compute_layout,
    parents_of,
)
from .settings import LayoutSettings

__all__ = [
    "LayoutSettings",
    "ParentEdge",
    "Position",
    "SpouseEdge",
    "TreeLayout",
    "are_mutual_spouses",
    "assign_generations",
    "compute_layout",
    "parents_of",
]
