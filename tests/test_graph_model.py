# tests/test_graph_model.py

from __future__ import annotations

import pytest

from family_tree.graph import (
    FamilyGraph,
    Member,
    Relation,
    RelationType,
    Sex,
)


def _couple_graph() -> FamilyGraph:
    return FamilyGraph.from_members(
        [
            Member(id="1", name="Me", relations=[Relation(RelationType.SPOUSE, "2")]),
            Member(id="2", name="Partner", relations=[Relation(RelationType.SPOUSE, "1")]),
        ]
    )


def test_relation_type_coerce_unknown_values_become_other():
    assert RelationType.coerce("child") is RelationType.CHILD
    assert RelationType.coerce(RelationType.SIBLING) is RelationType.SIBLING
    assert RelationType.coerce("cousin") is RelationType.OTHER
    assert RelationType.coerce(None) is RelationType.OTHER
    assert RelationType.coerce(3) is RelationType.OTHER


def test_sex_parse_is_lenient():
    assert Sex.parse("male") is Sex.MALE
    assert Sex.parse(" Female ") is Sex.FEMALE
    assert Sex.parse("Other/Unknown") is Sex.OTHER
    assert Sex.parse("unknown") is Sex.OTHER
    assert Sex.parse("other") is Sex.OTHER
    assert Sex.parse("robot") is None
    assert Sex.parse(1) is None


def test_member_to_dict_omits_absent_fields():
    member = Member(id="1", name="Me", relations=[Relation(RelationType.CHILD, "2")])
    assert member.to_dict() == {
        "id": "1",
        "name": "Me",
        "relations": [{"type": "child", "targetId": "2"}],
    }

    member = Member(id="1", name="Me", dob="1990-01-01", sex=Sex.OTHER)
    out = member.to_dict()
    assert out["dob"] == "1990-01-01"
    assert out["sex"] == "Other/Unknown"
    assert "email" not in out
    assert "photo" not in out


def test_from_members_rejects_broken_input():
    with pytest.raises(ValueError, match="Duplicate"):
        FamilyGraph.from_members([Member(id="1", name="A"), Member(id="1", name="B")])

    with pytest.raises(ValueError, match="itself"):
        FamilyGraph.from_members(
            [Member(id="1", name="A", relations=[Relation(RelationType.SIBLING, "1")])]
        )

    with pytest.raises(ValueError, match="missing"):
        FamilyGraph.from_members(
            [Member(id="1", name="A", relations=[Relation(RelationType.CHILD, "9")])]
        )


def test_queries_never_fail_on_unknown_ids():
    graph = _couple_graph()
    assert graph.get("nope") is None
    assert graph.relations_of("nope") == []
    assert graph.relations_of("1", RelationType.CHILD) == []
    assert graph.referrers("nope") == []


def test_all_preserves_insertion_order_and_returns_copies():
    graph = _couple_graph()
    members = graph.all()
    assert [m.id for m in members] == ["1", "2"]
    assert graph.root_id == "1"
    assert graph.insertion_order() == {"1": 0, "2": 1}

    members[0].relations.append(Relation(RelationType.CHILD, "2"))
    assert graph.relations_of("1") == [Relation(RelationType.SPOUSE, "2")]


def test_referrers_reverse_lookup():
    graph = _couple_graph()
    assert graph.referrers("1") == [("2", Relation(RelationType.SPOUSE, "1"))]
    assert graph.referrers("1", RelationType.CHILD) == []


def test_transaction_commits_on_clean_exit():
    graph = _couple_graph()
    with graph.transaction() as tx:
        tx.add_member(Member(id="3", name="Kid"))
        assert tx.link("1", Relation(RelationType.CHILD, "3")) is True
        assert tx.link("1", Relation(RelationType.CHILD, "3")) is False
        assert "3" not in graph

    assert len(graph) == 3
    assert graph.relations_of("1", RelationType.CHILD) == [Relation(RelationType.CHILD, "3")]
    assert graph.referrers("3") == [("1", Relation(RelationType.CHILD, "3"))]


def test_transaction_is_discarded_on_error():
    graph = _couple_graph()
    with pytest.raises(RuntimeError):
        with graph.transaction() as tx:
            tx.add_member(Member(id="3", name="Kid"))
            tx.link("1", Relation(RelationType.CHILD, "3"))
            raise RuntimeError("boom")

    assert len(graph) == 2
    assert graph.relation_count() == 2


def test_transaction_link_guards():
    graph = _couple_graph()
    with pytest.raises(KeyError):
        with graph.transaction() as tx:
            tx.link("1", Relation(RelationType.CHILD, "9"))

    with pytest.raises(ValueError):
        with graph.transaction() as tx:
            tx.link("1", Relation(RelationType.SIBLING, "1"))

    assert graph.relation_count() == 2


def test_clear_drops_everything():
    graph = _couple_graph()
    graph.clear()
    assert len(graph) == 0
    assert graph.root_id is None
    assert graph.referrers("1") == []


def test_version_tracks_committed_changes():
    graph = _couple_graph()
    start = graph.version

    with graph.transaction() as tx:
        tx.link("1", Relation(RelationType.SPOUSE, "2"))
    assert graph.version == start

    with graph.transaction() as tx:
        tx.add_member(Member(id="3", name="Kid"))
    assert graph.version == start + 1

    with pytest.raises(RuntimeError):
        with graph.transaction() as tx:
            tx.add_member(Member(id="4", name="Ghost"))
            raise RuntimeError("boom")
    assert graph.version == start + 1

    graph.clear()
    assert graph.version == start + 2
