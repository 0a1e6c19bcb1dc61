from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# -----------------------------
# Enumerations
# -----------------------------

class RelationType(str, Enum):
    PARENT = "parent"
    CHILD = "child"
    SPOUSE = "spouse"
    PARTNER = "partner"
    SIBLING = "sibling"
    OTHER = "other"

    @classmethod
    def coerce(cls, value: Any) -> "RelationType":
        """
        Map a raw value onto a RelationType.

        Unknown strings (and non-strings) collapse to OTHER.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return cls.OTHER
        return cls.OTHER


# Relation types that place both endpoints in the same generation.
COUPLE_TYPES = frozenset({RelationType.SPOUSE, RelationType.PARTNER})
SAME_GENERATION_TYPES = COUPLE_TYPES | {RelationType.SIBLING}


class Sex(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other/Unknown"

    @classmethod
    def parse(cls, value: Any) -> Optional["Sex"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        lowered = value.strip().lower()
        for sex in cls:
            if sex.value.lower() == lowered:
                return sex
        if lowered in ("other", "unknown"):
            return cls.OTHER
        return None


# -----------------------------
# Records
# -----------------------------

@dataclass(frozen=True, slots=True)
class Relation:
    """
    A directed, typed edge from the owning Member to ``target_id``.

    Frozen so two relations compare equal on (type, target_id), which is
    what idempotent inserts rely on.
    """
    type: RelationType
    target_id: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type.value, "targetId": self.target_id}


@dataclass(slots=True)
class Member:
    id: str
    name: str
    dob: Optional[str] = None
    email: Optional[str] = None
    photo: Optional[str] = None
    sex: Optional[Sex] = None
    relations: List[Relation] = field(default_factory=list)

    def has_relation(self, relation: Relation) -> bool:
        return relation in self.relations

    def relations_of(self, rel_type: Optional[RelationType] = None) -> List[Relation]:
        if rel_type is None:
            return list(self.relations)
        return [r for r in self.relations if r.type == rel_type]

    def to_dict(self) -> Dict[str, Any]:
        """
        Export shape: optional fields are omitted when absent.
        """
        out: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.dob is not None:
            out["dob"] = self.dob
        if self.email is not None:
            out["email"] = self.email
        if self.photo is not None:
            out["photo"] = self.photo
        if self.sex is not None:
            out["sex"] = self.sex.value
        out["relations"] = [r.to_dict() for r in self.relations]
        return out
