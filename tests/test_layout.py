# tests/test_layout.py

from __future__ import annotations

import pytest

from family_tree.graph import FamilyGraph, Member, Relation, RelationType
from family_tree.importer import sanitize_import, parse_import_text
from family_tree.layout import (
    LayoutSettings,
    ParentEdge,
    Position,
    SpouseEdge,
    compute_layout,
    parents_of,
)
from family_tree.mutator import add_relation
from family_tree.utils import pathing

SETTINGS = LayoutSettings()


def _family_graph() -> FamilyGraph:
    text = pathing.tests_data_path("family.json").read_text(encoding="utf-8")
    return FamilyGraph.from_members(sanitize_import(parse_import_text(text)).members)


def test_empty_graph_has_empty_layout():
    layout = compute_layout(FamilyGraph(), settings=SETTINGS)
    assert layout.to_dict() == {"layers": [], "positions": {}, "edges": [], "spouseEdges": []}
    assert layout.width == 0.0


def test_unknown_root_is_rejected():
    graph = FamilyGraph.from_members([Member(id="1", name="Me")])
    with pytest.raises(ValueError):
        compute_layout(graph, root_id="nope", settings=SETTINGS)


def test_child_is_one_row_below_parent():
    graph = FamilyGraph.from_members([Member(id="1", name="Me")])
    add_relation(graph, "1", "child", new_name="Kid", id_factory=lambda: "2")

    layout = compute_layout(graph, settings=SETTINGS)

    assert layout.layers == [["1"], ["2"]]
    assert layout.generations == {"1": 0, "2": 1}
    assert layout.positions["1"] == Position(0.0, 0.0)
    assert layout.positions["2"] == Position(0.0, 180.0)
    assert layout.edges == [ParentEdge("1", "2")]
    assert layout.to_dict()["edges"] == [{"from": "1", "to": "2"}]


def test_parents_of_root_sit_above_it():
    graph = FamilyGraph.from_members(
        [
            Member(id="me", name="Me", relations=[Relation(RelationType.PARENT, "mom")]),
            Member(id="mom", name="Mom", relations=[Relation(RelationType.CHILD, "me")]),
        ]
    )
    layout = compute_layout(graph, settings=SETTINGS)
    assert layout.layers == [["mom"], ["me"]]
    assert layout.root_id == "me"
    assert layout.positions["mom"].y == 0.0
    assert layout.positions["me"].y == 180.0


def test_couple_with_child_gets_one_joint_edge(counter_ids):
    graph = FamilyGraph.from_members([Member(id="1", name="Me")])
    add_relation(graph, "1", "spouse", new_name="Partner", id_factory=counter_ids)
    add_relation(graph, "1", "child", new_name="Kid", id_factory=counter_ids)

    layout = compute_layout(graph, settings=SETTINGS)

    assert layout.layers == [["1", "2"], ["3"]]
    assert layout.positions == {
        "1": Position(0.0, 0.0),
        "2": Position(160.0, 0.0),
        "3": Position(80.0, 180.0),
    }
    assert layout.edges == [ParentEdge("1", "3", is_joint=True, parent2="2")]
    assert layout.spouse_edges == [SpouseEdge("1", "2")]
    assert layout.to_dict()["edges"] == [
        {"from": "1", "to": "3", "isJoint": True, "parent2": "2"}
    ]


def test_siblings_are_centred_under_their_parents(counter_ids):
    graph = FamilyGraph.from_members([Member(id="1", name="Me")])
    add_relation(graph, "1", "spouse", new_name="Partner", id_factory=counter_ids)
    add_relation(graph, "1", "child", new_name="Kid", id_factory=counter_ids)
    add_relation(graph, "1", "child", new_name="Kid Two", id_factory=counter_ids)

    layout = compute_layout(graph, settings=SETTINGS)

    assert layout.layers == [["1", "2"], ["3", "4"]]
    assert layout.positions["1"] == Position(10.0, 0.0)
    assert layout.positions["2"] == Position(170.0, 0.0)
    assert layout.positions["3"] == Position(0.0, 180.0)
    assert layout.positions["4"] == Position(180.0, 180.0)
    assert min(p.x for p in layout.positions.values()) == 0.0
    assert len(layout.edges) == 2
    assert all(edge.is_joint for edge in layout.edges)


def test_three_generations_from_fixture():
    layout = compute_layout(_family_graph(), settings=SETTINGS)

    assert layout.layers == [["4"], ["1", "2"], ["3"]]
    assert layout.positions == {
        "4": Position(80.0, 0.0),
        "1": Position(0.0, 180.0),
        "2": Position(160.0, 180.0),
        "3": Position(80.0, 360.0),
    }
    assert layout.edges == [
        ParentEdge("4", "1"),
        ParentEdge("1", "3", is_joint=True, parent2="2"),
    ]
    assert layout.width == 300.0
    assert layout.height == 460.0


def test_parents_that_are_not_spouses_get_plain_edges():
    graph = FamilyGraph.from_members(
        [
            Member(id="kid", name="Kid", relations=[
                Relation(RelationType.PARENT, "a"),
                Relation(RelationType.PARENT, "b"),
            ]),
            Member(id="a", name="A", relations=[Relation(RelationType.CHILD, "kid")]),
            Member(id="b", name="B", relations=[Relation(RelationType.CHILD, "kid")]),
        ]
    )
    layout = compute_layout(graph, settings=SETTINGS)

    assert layout.layers == [["a", "b"], ["kid"]]
    assert layout.edges == [ParentEdge("a", "kid"), ParentEdge("b", "kid")]
    assert layout.spouse_edges == []


def test_one_way_relation_still_places_both_members():
    graph = FamilyGraph.from_members(
        [
            Member(id="1", name="Me"),
            Member(id="4", name="Grandma", relations=[Relation(RelationType.CHILD, "1")]),
        ]
    )
    assert parents_of(graph, "1") == ["4"]

    layout = compute_layout(graph, settings=SETTINGS)
    assert layout.layers == [["4"], ["1"]]
    assert layout.unreached == []


def test_disconnected_members_go_to_trailing_layer():
    graph = FamilyGraph.from_members(
        [
            Member(id="1", name="Me"),
            Member(id="x", name="Stranger"),
            Member(id="y", name="Other Stranger"),
        ]
    )
    layout = compute_layout(graph, settings=SETTINGS)

    assert layout.layers == [["1"], ["x", "y"]]
    assert layout.unreached == ["x", "y"]
    assert layout.positions["x"] == Position(0.0, 180.0)
    assert layout.positions["y"] == Position(180.0, 180.0)


def test_other_relations_do_not_affect_layering():
    graph = FamilyGraph.from_members(
        [
            Member(id="1", name="Me", relations=[Relation(RelationType.OTHER, "2")]),
            Member(id="2", name="Friend", relations=[Relation(RelationType.OTHER, "1")]),
        ]
    )
    layout = compute_layout(graph, settings=SETTINGS)
    assert layout.unreached == ["2"]


def test_layout_is_deterministic(counter_ids):
    graph = _family_graph()
    add_relation(graph, "3", "sibling", new_name="Sis", id_factory=counter_ids)
    add_relation(graph, "4", "spouse", new_name="Grandpa", id_factory=counter_ids)

    first = compute_layout(graph, settings=SETTINGS).to_dict()
    second = compute_layout(graph, settings=SETTINGS).to_dict()
    assert first == second


def test_custom_settings_scale_positions():
    graph = FamilyGraph.from_members([Member(id="1", name="Me")])
    add_relation(graph, "1", "child", new_name="Kid", id_factory=lambda: "2")

    settings = LayoutSettings(node_width=100, row_height=50)
    layout = compute_layout(graph, settings=settings)
    assert layout.positions["2"].y == 50.0
    assert layout.width == 100.0


def test_cross_generation_marriage_keeps_first_reached_rows():
    graph = FamilyGraph.from_members(
        [
            Member(id="1", name="Me", relations=[
                Relation(RelationType.CHILD, "a"),
                Relation(RelationType.SIBLING, "s"),
            ]),
            Member(id="a", name="A", relations=[
                Relation(RelationType.PARENT, "1"),
                Relation(RelationType.SPOUSE, "g"),
            ]),
            Member(id="s", name="Sis", relations=[
                Relation(RelationType.SIBLING, "1"),
                Relation(RelationType.CHILD, "p"),
            ]),
            Member(id="p", name="P", relations=[
                Relation(RelationType.PARENT, "s"),
                Relation(RelationType.CHILD, "g"),
            ]),
            Member(id="g", name="G", relations=[
                Relation(RelationType.PARENT, "p"),
                Relation(RelationType.SPOUSE, "a"),
            ]),
        ]
    )
    layout = compute_layout(graph, settings=SETTINGS)

    # g is reached through its spouse first, so it shares a row with its parent p
    assert layout.layers == [["1", "s"], ["a", "g", "p"]]
    assert ParentEdge("p", "g") in layout.edges
    assert layout.positions["a"] == Position(0.0, 180.0)
    assert layout.positions["g"] == Position(160.0, 180.0)
    assert layout.positions["p"] == Position(340.0, 180.0)
