from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from family_tree.graph.models import Member, Relation, RelationType


def _copy_member(member: Member) -> Member:
    return replace(member, relations=list(member.relations))


@dataclass
class FamilyGraph:
    """
    Arena of Member records addressed by id.

    Insertion order is preserved and is the stable fallback ordering used by
    the layout engine. Read queries hand out copies; the only way to change
    relations is through ``transaction()``.

    The first member inserted is the bootstrap "self" member and the default
    layout root.
    """

    _members: Dict[str, Member] = field(default_factory=dict)

    # Internal indexes, built lazily
    _incoming: Dict[str, List[Tuple[str, Relation]]] = field(
        default_factory=dict, init=False, repr=False
    )
    _indexes_built: bool = field(default=False, init=False, repr=False)

    # Bumped on every committed change
    version: int = field(default=0, init=False)

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #

    @classmethod
    def from_members(cls, members: Iterable[Member]) -> "FamilyGraph":
        """
        Build a graph from already-validated members.

        Raises ValueError on duplicate ids, self relations or relations that
        point at an id not present in ``members``.
        """
        graph = cls()
        for member in members:
            if member.id in graph._members:
                raise ValueError(f"Duplicate member id: {member.id!r}")
            graph._members[member.id] = _copy_member(member)

        problems = graph.integrity_problems()
        if problems:
            raise ValueError("; ".join(problems))
        return graph

    def integrity_problems(self) -> List[str]:
        """Describe every self relation and dangling reference in the graph."""
        problems: List[str] = []
        for member in self._members.values():
            for rel in member.relations:
                if rel.target_id == member.id:
                    problems.append(f"{member.id!r} relates to itself ({rel.type.value})")
                elif rel.target_id not in self._members:
                    problems.append(
                        f"{member.id!r} has {rel.type.value} -> missing {rel.target_id!r}"
                    )
        return problems

    # ------------------------------------------------------------------ #
    # Core helpers
    # ------------------------------------------------------------------ #

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, member_id: object) -> bool:
        return member_id in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._members))

    @property
    def root_id(self) -> Optional[str]:
        return next(iter(self._members), None)

    def insertion_order(self) -> Dict[str, int]:
        return {mid: idx for idx, mid in enumerate(self._members)}

    # ------------------------------------------------------------------ #
    # Index construction
    # ------------------------------------------------------------------ #

    def _build_indexes(self) -> None:
        incoming: Dict[str, List[Tuple[str, Relation]]] = {}
        for member in self._members.values():
            for rel in member.relations:
                incoming.setdefault(rel.target_id, []).append((member.id, rel))
        self._incoming = incoming
        self._indexes_built = True

    def _ensure_indexes(self) -> None:
        if not self._indexes_built:
            self._build_indexes()

    def _invalidate(self) -> None:
        self._indexes_built = False
        self._incoming = {}

    # ------------------------------------------------------------------ #
    # Public query API
    # ------------------------------------------------------------------ #

    def get(self, member_id: str) -> Optional[Member]:
        member = self._members.get(member_id)
        return _copy_member(member) if member is not None else None

    def all(self) -> List[Member]:
        return [_copy_member(m) for m in self._members.values()]

    def relations_of(
        self,
        member_id: str,
        rel_type: Optional[RelationType] = None,
    ) -> List[Relation]:
        """Relations owned by ``member_id``; empty for unknown ids."""
        member = self._members.get(member_id)
        if member is None:
            return []
        return member.relations_of(rel_type)

    def referrers(
        self,
        member_id: str,
        rel_type: Optional[RelationType] = None,
    ) -> List[Tuple[str, Relation]]:
        """
        Reverse lookup: every (owner_id, relation) whose target is ``member_id``.

        Returned in owner insertion order, then relation order.
        """
        self._ensure_indexes()
        found = self._incoming.get(member_id, [])
        if rel_type is None:
            return list(found)
        return [(owner, rel) for owner, rel in found if rel.type == rel_type]

    def relation_count(self) -> int:
        return sum(len(m.relations) for m in self._members.values())

    # ------------------------------------------------------------------ #
    # Controlled mutation
    # ------------------------------------------------------------------ #

    @contextmanager
    def transaction(self) -> Iterator["GraphTransaction"]:
        """
        Stage edits and apply them only if the block exits cleanly.

            with graph.transaction() as tx:
                tx.add_member(Member(id="2", name="Kid"))
                tx.link("1", Relation(RelationType.CHILD, "2"))
        """
        tx = GraphTransaction(self)
        yield tx
        tx.commit()

    def clear(self) -> None:
        """Full reset: drop every member."""
        self._members.clear()
        self._invalidate()
        self.version += 1

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"<FamilyGraph members={len(self._members)}>"


class GraphTransaction:
    """
    Staged set of member inserts and relation appends.

    Nothing touches the graph until ``commit``; a transaction abandoned by an
    exception leaves the graph exactly as it was.
    """

    def __init__(self, graph: FamilyGraph):
        self._graph = graph
        self._new_members: Dict[str, Member] = {}
        self._new_links: List[Tuple[str, Relation]] = []
        self._committed = False

    def has_member(self, member_id: str) -> bool:
        return member_id in self._graph._members or member_id in self._new_members

    def relations_of(
        self,
        member_id: str,
        rel_type: Optional[RelationType] = None,
    ) -> List[Relation]:
        """Relations of ``member_id`` as they will be after commit."""
        base = self._graph._members.get(member_id) or self._new_members.get(member_id)
        rels = list(base.relations) if base is not None else []
        rels.extend(rel for owner, rel in self._new_links if owner == member_id)
        if rel_type is None:
            return rels
        return [r for r in rels if r.type == rel_type]

    def add_member(self, member: Member) -> None:
        if self.has_member(member.id):
            raise ValueError(f"Duplicate member id: {member.id!r}")
        self._new_members[member.id] = _copy_member(member)

    def link(self, owner_id: str, relation: Relation) -> bool:
        """
        Stage ``relation`` on ``owner_id`` unless the identical pair exists.

        Returns True when something new was staged.
        """
        if not self.has_member(owner_id) or not self.has_member(relation.target_id):
            raise KeyError(f"Unknown member in link: {owner_id!r} -> {relation.target_id!r}")
        if owner_id == relation.target_id:
            raise ValueError(f"Self relation on {owner_id!r}")
        if relation in self.relations_of(owner_id):
            return False
        self._new_links.append((owner_id, relation))
        return True

    @property
    def staged_links(self) -> List[Tuple[str, Relation]]:
        return list(self._new_links)

    def commit(self) -> None:
        if self._committed:
            return
        members = self._graph._members
        for member_id, member in self._new_members.items():
            members[member_id] = member
        for owner_id, relation in self._new_links:
            members[owner_id].relations.append(relation)
        if self._new_members or self._new_links:
            self._graph.version += 1
        self._graph._invalidate()
        self._committed = True
