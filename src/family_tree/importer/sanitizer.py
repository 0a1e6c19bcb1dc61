"""
Import Sanitizer.

Turns an arbitrary decoded JSON value into a list of valid Members, or
rejects it outright. It never produces a structurally broken graph.

Accepted shapes:
    [ {member}, ... ]
    { "members": [ {member}, ... ] }

Recovery policy:
  - malformed member records are dropped silently (counted in the report)
  - duplicate ids keep the first occurrence
  - relation entries with a bad/self targetId are dropped
  - relations pointing at ids that did not survive are pruned
  - optionally, missing reciprocal relations are added
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Union

from family_tree.config import get_config
from family_tree.core.exceptions import FormatError
from family_tree.graph.models import Member, Relation, RelationType, Sex
from family_tree.logging import get_logger
from family_tree.mutator.relations import reciprocal

log = get_logger("sanitizer")


# ----------------------------------------------------------------------
# Tagged decode
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class Accepted:
    records: List[Any]


@dataclass(frozen=True)
class Rejected:
    reason: str


DecodeResult = Union[Accepted, Rejected]


def decode_payload(data: Any) -> DecodeResult:
    """
    Decide whether ``data`` looks like a family tree export at all.

    Nothing past this point inspects the top-level shape again.
    """
    if isinstance(data, list):
        return Accepted(records=list(data))

    if isinstance(data, dict):
        if "members" not in data:
            return Rejected("object has no 'members' field")
        members = data["members"]
        if isinstance(members, list):
            return Accepted(records=list(members))
        return Rejected("'members' is not an array")

    return Rejected(f"expected an array or an object, got {type(data).__name__}")


# ----------------------------------------------------------------------
# Report
# ----------------------------------------------------------------------

@dataclass
class ImportReport:
    members: List[Member] = field(default_factory=list)
    skipped_records: int = 0
    dropped_relations: int = 0
    pruned_relations: int = 0
    repaired_relations: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.members

    def summary(self) -> Dict[str, int]:
        return {
            "members": len(self.members),
            "skipped_records": self.skipped_records,
            "dropped_relations": self.dropped_relations,
            "pruned_relations": self.pruned_relations,
            "repaired_relations": self.repaired_relations,
        }


# ----------------------------------------------------------------------
# Per-record helpers
# ----------------------------------------------------------------------

def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _optional_string(item: Dict[str, Any], key: str) -> Optional[str]:
    value = item.get(key)
    return value if isinstance(value, str) else None


def _sanitize_relations(member_id: str, raw: Any, report: ImportReport) -> List[Relation]:
    if not isinstance(raw, list):
        return []

    relations: List[Relation] = []
    for entry in raw:
        if not isinstance(entry, dict):
            report.dropped_relations += 1
            continue

        target_id = entry.get("targetId")
        if not isinstance(target_id, str) or not target_id or target_id == member_id:
            report.dropped_relations += 1
            continue

        rel = Relation(RelationType.coerce(entry.get("type")), target_id)
        if rel in relations:
            report.dropped_relations += 1
            continue
        relations.append(rel)

    return relations


def _sanitize_record(item: Any, seen: Set[str], report: ImportReport) -> Optional[Member]:
    if not isinstance(item, dict):
        return None

    member_id = item.get("id")
    name = item.get("name")
    if not _non_empty_string(member_id) or not _non_empty_string(name):
        return None
    if member_id in seen:
        return None

    return Member(
        id=member_id,
        name=name.strip(),
        dob=_optional_string(item, "dob"),
        email=_optional_string(item, "email"),
        photo=_optional_string(item, "photo"),
        sex=Sex.parse(item.get("sex")),
        relations=_sanitize_relations(member_id, item.get("relations"), report),
    )


# ----------------------------------------------------------------------
# Graph-level passes
# ----------------------------------------------------------------------

def _prune_dangling(members: List[Member], report: ImportReport) -> None:
    id_set = {m.id for m in members}
    for member in members:
        kept = [r for r in member.relations if r.target_id in id_set]
        report.pruned_relations += len(member.relations) - len(kept)
        member.relations = kept


def _repair_reciprocity(members: List[Member], report: ImportReport) -> None:
    by_id = {m.id: m for m in members}
    for member in members:
        for rel in list(member.relations):
            back = Relation(reciprocal(rel.type), member.id)
            other = by_id[rel.target_id]
            if not other.has_relation(back):
                other.relations.append(back)
                report.repaired_relations += 1


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def sanitize_records(records: List[Any], *, repair_reciprocity: bool = False) -> ImportReport:
    """Run the per-record pass and the graph-level passes over accepted records."""
    report = ImportReport()
    seen: Set[str] = set()

    for item in records:
        member = _sanitize_record(item, seen, report)
        if member is None:
            report.skipped_records += 1
            continue
        seen.add(member.id)
        report.members.append(member)

    _prune_dangling(report.members, report)
    if repair_reciprocity:
        _repair_reciprocity(report.members, report)

    log.debug("Import sanitized: %s", report.summary())
    return report


def normalize_import(data: Any, *, repair_reciprocity: bool = False) -> Optional[List[Member]]:
    """
    Sentinel form: None when ``data`` is not a family tree export, otherwise
    the (possibly empty) list of sanitized members.
    """
    decoded = decode_payload(data)
    if isinstance(decoded, Rejected):
        log.debug("Import rejected: %s", decoded.reason)
        return None
    return sanitize_records(decoded.records, repair_reciprocity=repair_reciprocity).members


def sanitize_import(data: Any, *, repair_reciprocity: Optional[bool] = None) -> ImportReport:
    """
    Report form: raises FormatError on rejection.

    ``repair_reciprocity`` defaults to ``importer.repair_reciprocity`` from config.
    """
    if repair_reciprocity is None:
        repair_reciprocity = bool(get_config().importer.get("repair_reciprocity", True))

    decoded = decode_payload(data)
    if isinstance(decoded, Rejected):
        raise FormatError(
            "Expected a JSON array of members (or an object with a \"members\" array): "
            + decoded.reason
        )
    return sanitize_records(decoded.records, repair_reciprocity=repair_reciprocity)


def parse_import_text(text: str) -> Any:
    """Decode JSON text, mapping decode failures onto FormatError."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise FormatError("Invalid JSON: please provide a valid JSON export.") from exc


__all__ = [
    "Accepted",
    "DecodeResult",
    "ImportReport",
    "Rejected",
    "decode_payload",
    "normalize_import",
    "parse_import_text",
    "sanitize_import",
    "sanitize_records",
]
