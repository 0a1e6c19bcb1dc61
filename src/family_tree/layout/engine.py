"""
Layout Engine.

Pure function from a FamilyGraph to a drawable layout:

    layers       generation buckets, each ordered left to right
    positions    id -> {x, y} in content-space units (origin top-left)
    edges        parent -> child edges; a child of two mutually-spousal
                 parents gets exactly one joint edge
    spouseEdges  one {from, to} per spouse/partner pair

Layering is a breadth-first walk from the root (the bootstrap "self"
member): parents sit one row above, children one row below, spouses,
partners and siblings share a row. Members the walk cannot reach go into a
trailing layer. Within a layer, couples are placed side by side as one
block, and blocks are centred under the average position of their
already-placed parents; members with no placed parents keep graph
insertion order.

Nothing here depends on wall-clock time, randomness or set iteration
order, so a fixed graph always yields the same layout.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from family_tree.graph.model import FamilyGraph
from family_tree.graph.models import COUPLE_TYPES, SAME_GENERATION_TYPES, RelationType
from family_tree.layout.settings import LayoutSettings
from family_tree.logging import get_logger

log = get_logger("layout")


# ======================================================================
# OUTPUT MODEL
# ======================================================================

@dataclass(frozen=True)
class Position:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class ParentEdge:
    """
    Parent -> child edge.

    A joint edge is anchored at the midpoint of ``from_id`` and ``parent2``.
    """
    from_id: str
    to_id: str
    is_joint: bool = False
    parent2: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"from": self.from_id, "to": self.to_id}
        if self.is_joint:
            out["isJoint"] = True
            out["parent2"] = self.parent2
        return out


@dataclass(frozen=True)
class SpouseEdge:
    from_id: str
    to_id: str

    def to_dict(self) -> Dict[str, str]:
        return {"from": self.from_id, "to": self.to_id}


@dataclass
class TreeLayout:
    layers: List[List[str]] = field(default_factory=list)
    positions: Dict[str, Position] = field(default_factory=dict)
    edges: List[ParentEdge] = field(default_factory=list)
    spouse_edges: List[SpouseEdge] = field(default_factory=list)
    generations: Dict[str, int] = field(default_factory=dict)
    root_id: Optional[str] = None
    unreached: List[str] = field(default_factory=list)
    settings: LayoutSettings = field(default_factory=LayoutSettings)

    @property
    def width(self) -> float:
        if not self.positions:
            return 0.0
        return max(p.x for p in self.positions.values()) + self.settings.node_width

    @property
    def height(self) -> float:
        if not self.positions:
            return 0.0
        return max(p.y for p in self.positions.values()) + self.settings.node_height

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layers": [list(layer) for layer in self.layers],
            "positions": {mid: pos.to_dict() for mid, pos in self.positions.items()},
            "edges": [e.to_dict() for e in self.edges],
            "spouseEdges": [e.to_dict() for e in self.spouse_edges],
        }


# ======================================================================
# STRUCTURAL HELPERS
# ======================================================================

# Generation step from a member to the target of its own relation.
_OUTGOING_STEP = {
    RelationType.PARENT: -1,
    RelationType.CHILD: 1,
}


def _step_for(rel_type: RelationType) -> Optional[int]:
    if rel_type in SAME_GENERATION_TYPES:
        return 0
    return _OUTGOING_STEP.get(rel_type)


def _neighbors(graph: FamilyGraph, member_id: str) -> List[Tuple[str, int]]:
    """
    (other_id, generation step) for every layering edge touching member_id.

    Incoming relations are followed too, so a relation whose reciprocal is
    missing still places both endpoints.
    """
    out: List[Tuple[str, int]] = []
    for rel in graph.relations_of(member_id):
        step = _step_for(rel.type)
        if step is not None:
            out.append((rel.target_id, step))
    for owner_id, rel in graph.referrers(member_id):
        step = _step_for(rel.type)
        if step is not None:
            out.append((owner_id, -step))
    return out


def parents_of(graph: FamilyGraph, member_id: str) -> List[str]:
    """Parents from either side of the relation, deduplicated, in discovery order."""
    found: List[str] = []
    for rel in graph.relations_of(member_id, RelationType.PARENT):
        if rel.target_id not in found:
            found.append(rel.target_id)
    for owner_id, _ in graph.referrers(member_id, RelationType.CHILD):
        if owner_id not in found:
            found.append(owner_id)
    return [pid for pid in found if pid in graph]


def are_mutual_spouses(graph: FamilyGraph, a: str, b: str) -> bool:
    a_to_b = any(r.target_id == b and r.type in COUPLE_TYPES for r in graph.relations_of(a))
    b_to_a = any(r.target_id == a and r.type in COUPLE_TYPES for r in graph.relations_of(b))
    return a_to_b and b_to_a


# ======================================================================
# STEP 1: LAYERING
# ======================================================================

def assign_generations(graph: FamilyGraph, root_id: str) -> Tuple[List[List[str]], List[str]]:
    """
    Return (layers, unreached).

    Layers hold members in graph insertion order; the unreached members
    are already appended as the trailing layer when there are any.
    """
    gen: Dict[str, int] = {root_id: 0}
    discovered: List[str] = [root_id]
    queue = deque([root_id])

    while queue:
        current = queue.popleft()
        for other, step in _neighbors(graph, current):
            if other in gen:
                continue
            gen[other] = gen[current] + step
            discovered.append(other)
            queue.append(other)

    # Couples share a row: the member discovered later joins the earlier one.
    rank = {mid: idx for idx, mid in enumerate(discovered)}
    for member_id in graph:
        if member_id not in gen:
            continue
        for rel in graph.relations_of(member_id):
            other = rel.target_id
            if rel.type not in COUPLE_TYPES or other not in gen:
                continue
            if gen[other] == gen[member_id]:
                continue
            if rank[other] > rank[member_id]:
                gen[other] = gen[member_id]
            else:
                gen[member_id] = gen[other]

    distinct = sorted(set(gen.values()))
    index_of = {g: idx for idx, g in enumerate(distinct)}
    layers: List[List[str]] = [[] for _ in distinct]
    unreached: List[str] = []
    for member_id in graph:
        if member_id in gen:
            layers[index_of[gen[member_id]]].append(member_id)
        else:
            unreached.append(member_id)

    if unreached:
        layers.append(list(unreached))
    return layers, unreached


# ======================================================================
# STEPS 2-3: ORDERING AND HORIZONTAL PLACEMENT
# ======================================================================

@dataclass
class _Unit:
    members: List[str]
    order: int
    anchor: Optional[float] = None

    def width(self, settings: LayoutSettings) -> float:
        return settings.couple_width if len(self.members) == 2 else settings.node_width


def _build_units(graph: FamilyGraph, layer: List[str], order: Dict[str, int]) -> List[_Unit]:
    in_layer = set(layer)
    used: set = set()
    units: List[_Unit] = []

    for member_id in layer:
        if member_id in used:
            continue
        used.add(member_id)
        partner = None
        for rel in graph.relations_of(member_id):
            other = rel.target_id
            if rel.type not in COUPLE_TYPES or other in used or other not in in_layer:
                continue
            if are_mutual_spouses(graph, member_id, other):
                partner = other
                break
        if partner is not None:
            used.add(partner)
            units.append(_Unit(members=[member_id, partner], order=order[member_id]))
        else:
            units.append(_Unit(members=[member_id], order=order[member_id]))
    return units


def _mean(values: List[float]) -> float:
    # Sorted so equal parent sets always produce bit-identical anchors.
    ordered = sorted(values)
    return sum(ordered) / len(ordered)


def _place_layer(
    graph: FamilyGraph,
    layer: List[str],
    order: Dict[str, int],
    centers: Dict[str, float],
    lefts: Dict[str, float],
    settings: LayoutSettings,
) -> List[str]:
    units = _build_units(graph, layer, order)

    for unit in units:
        parent_xs = [
            centers[pid]
            for mid in unit.members
            for pid in parents_of(graph, mid)
            if pid in centers
        ]
        if parent_xs:
            unit.anchor = round(_mean(parent_xs), 6)

    anchored = sorted((u for u in units if u.anchor is not None), key=lambda u: (u.anchor, u.order))
    floating = sorted((u for u in units if u.anchor is None), key=lambda u: u.order)

    # Units sharing an anchor (siblings) are centred as one group.
    groups: List[List[_Unit]] = []
    for unit in anchored:
        if groups and groups[-1][0].anchor == unit.anchor:
            groups[-1].append(unit)
        else:
            groups.append([unit])
    groups.extend([u] for u in floating)

    cursor: Optional[float] = None
    placed: List[str] = []
    for group in groups:
        group_width = sum(u.width(settings) for u in group) + settings.h_spacing * (len(group) - 1)
        anchor = group[0].anchor
        if anchor is not None:
            desired = anchor - group_width / 2
        else:
            desired = cursor if cursor is not None else 0.0
        left = desired if cursor is None else max(desired, cursor)

        x = left
        for unit in group:
            slot = x
            for member_id in unit.members:
                lefts[member_id] = slot
                centers[member_id] = slot + settings.node_width / 2
                placed.append(member_id)
                slot += settings.node_width + settings.spouse_gap
            x += unit.width(settings) + settings.h_spacing

        cursor = left + group_width + settings.h_spacing

    return placed


# ======================================================================
# STEP 4: EDGES
# ======================================================================

def _parent_edges(
    graph: FamilyGraph,
    layers: List[List[str]],
    lefts: Dict[str, float],
) -> List[ParentEdge]:
    edges: List[ParentEdge] = []
    for layer in layers:
        for child_id in layer:
            parents = parents_of(graph, child_id)

            joint: Optional[Tuple[str, str]] = None
            for i, first in enumerate(parents):
                for second in parents[i + 1:]:
                    if are_mutual_spouses(graph, first, second):
                        joint = (first, second)
                        break
                if joint:
                    break

            if joint is not None:
                first, second = joint
                if lefts[second] < lefts[first]:
                    first, second = second, first
                edges.append(ParentEdge(first, child_id, is_joint=True, parent2=second))
                parents = [p for p in parents if p not in joint]

            edges.extend(ParentEdge(pid, child_id) for pid in parents)
    return edges


def _spouse_edges(graph: FamilyGraph, layers: List[List[str]]) -> List[SpouseEdge]:
    seen: set = set()
    edges: List[SpouseEdge] = []
    for layer in layers:
        for member_id in layer:
            for rel in graph.relations_of(member_id):
                if rel.type not in COUPLE_TYPES or rel.target_id not in graph:
                    continue
                key = tuple(sorted((member_id, rel.target_id)))
                if key in seen:
                    continue
                seen.add(key)
                edges.append(SpouseEdge(member_id, rel.target_id))
    return edges


# ======================================================================
# PUBLIC API
# ======================================================================

def compute_layout(
    graph: FamilyGraph,
    root_id: Optional[str] = None,
    settings: Optional[LayoutSettings] = None,
) -> TreeLayout:
    """
    Compute layers, positions and edges for ``graph``.

    ``root_id`` defaults to the graph's first member. Raises ValueError if
    an explicit root is not in the graph.
    """
    settings = settings or LayoutSettings.from_config()
    root_id = root_id if root_id is not None else graph.root_id

    if root_id is None:
        return TreeLayout(settings=settings)
    if root_id not in graph:
        raise ValueError(f"Layout root not in graph: {root_id!r}")

    order = graph.insertion_order()
    raw_layers, unreached = assign_generations(graph, root_id)

    centers: Dict[str, float] = {}
    lefts: Dict[str, float] = {}
    layers = [_place_layer(graph, layer, order, centers, lefts, settings) for layer in raw_layers]

    min_left = min(lefts.values())
    positions: Dict[str, Position] = {}
    generations: Dict[str, int] = {}
    for index, layer in enumerate(layers):
        for member_id in layer:
            positions[member_id] = Position(
                x=lefts[member_id] - min_left,
                y=index * settings.row_height,
            )
            generations[member_id] = index

    layout = TreeLayout(
        layers=layers,
        positions=positions,
        edges=_parent_edges(graph, layers, lefts),
        spouse_edges=_spouse_edges(graph, layers),
        generations=generations,
        root_id=root_id,
        unreached=unreached,
        settings=settings,
    )

    log.debug(
        "Layout computed: members=%d layers=%d edges=%d spouse_edges=%d unreached=%d",
        len(positions),
        len(layers),
        len(layout.edges),
        len(layout.spouse_edges),
        len(unreached),
    )
    return layout


__all__ = [
    "ParentEdge",
    "Position",
    "SpouseEdge",
    "TreeLayout",
    "are_mutual_spouses",
    "assign_generations",
    "compute_layout",
    "parents_of",
]
