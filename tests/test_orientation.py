import numpy as np
import pytest
from pcx.constraint.common import SeparationSetMapping
from pcx.constraint.orientation import (
    is_arrowpoint_allowed,
    orient_by_knowledge,
    orient_colliders,
)
from pcx.graph.graph_utils import (
    create_empty_graph,
    is_bidirected,
    is_parent,
    is_undirected,
    orient_edge,
)
from pcx.knowledge import Knowledge

NODES = ["A", "B", "C", "D"]


def undirected_graph(n, edges):
    graph = create_empty_graph(n)
    for x, y in edges:
        graph[x, y] = graph[y, x] = 1
    return graph


def test_sepset_mapping_is_unordered_and_write_once():
    sepsets = SeparationSetMapping()
    sepsets.set(2, 0, [1])
    assert sepsets.get(0, 2) == frozenset({1})
    assert (0, 2) in sepsets
    assert sepsets[(2, 0)] == frozenset({1})
    sepsets.set(0, 2, {1})
    with pytest.raises(ValueError):
        sepsets.set(0, 2, [])
    assert sepsets.get(0, 1) is None
    with pytest.raises(KeyError):
        sepsets[(0, 1)]
    assert list(sepsets) == [(0, 2)]
    assert sepsets.named(NODES) == {frozenset({"A", "C"}): frozenset({"B"})}


def test_sepset_mapping_rejects_endpoints():
    sepsets = SeparationSetMapping()
    with pytest.raises(ValueError):
        sepsets.set(0, 1, [1])
    with pytest.raises(ValueError):
        sepsets.set(1, 1, [])


def test_collider_when_centre_not_in_sepset():
    # A - B - C with sepset(A, C) = {}
    graph = undirected_graph(3, [(0, 1), (1, 2)])
    sepsets = SeparationSetMapping()
    sepsets.set(0, 2, [])
    colliders, noncolliders, ambiguous = orient_colliders(
        graph, sepsets, NODES, Knowledge()
    )
    assert colliders == {(0, 1, 2)}
    assert not noncolliders and not ambiguous
    assert is_parent(graph, 0, 1) and is_parent(graph, 2, 1)


def test_noncollider_when_centre_in_sepset():
    graph = undirected_graph(3, [(0, 1), (1, 2)])
    sepsets = SeparationSetMapping()
    sepsets.set(0, 2, [1])
    colliders, noncolliders, _ = orient_colliders(graph, sepsets, NODES, Knowledge())
    assert noncolliders == {(0, 1, 2)}
    assert not colliders
    assert is_undirected(graph, 0, 1) and is_undirected(graph, 1, 2)


def test_missing_sepset_is_a_noncollider():
    graph = undirected_graph(3, [(0, 1), (1, 2)])
    colliders, noncolliders, _ = orient_colliders(
        graph, SeparationSetMapping(), NODES, Knowledge()
    )
    assert noncolliders == {(0, 1, 2)}
    assert not colliders
    assert is_undirected(graph, 0, 1)


def test_shielded_triples_are_skipped():
    graph = undirected_graph(3, [(0, 1), (1, 2), (0, 2)])
    colliders, noncolliders, ambiguous = orient_colliders(
        graph, SeparationSetMapping(), NODES, Knowledge()
    )
    assert not (colliders or noncolliders or ambiguous)


def test_forbidden_collider_is_ambiguous():
    graph = undirected_graph(3, [(0, 1), (1, 2)])
    sepsets = SeparationSetMapping()
    sepsets.set(0, 2, [])
    knowledge = Knowledge().set_forbidden("A", "B")
    colliders, _, ambiguous = orient_colliders(graph, sepsets, NODES, knowledge)
    assert ambiguous == {(0, 1, 2)}
    assert not colliders
    assert is_undirected(graph, 0, 1) and is_undirected(graph, 1, 2)


def test_conflicting_colliders_leave_edge_undetermined():
    # A - B - C - D with sepset(A, C) = {} and sepset(B, D) = {}
    graph = undirected_graph(4, [(0, 1), (1, 2), (2, 3)])
    sepsets = SeparationSetMapping()
    sepsets.set(0, 2, [])
    sepsets.set(1, 3, [])
    colliders, _, _ = orient_colliders(graph, sepsets, NODES, Knowledge())
    assert colliders == {(0, 1, 2), (1, 2, 3)}
    assert is_bidirected(graph, 1, 2)
    assert is_parent(graph, 0, 1) and is_parent(graph, 3, 2)


def test_aggressive_mode_vetoes_collider_closing_cycle():
    # B -> D -> A already, collider A -> B <- C would close A -> B -> D -> A
    graph = undirected_graph(4, [(0, 1), (1, 2), (1, 3), (0, 3)])
    orient_edge(graph, 1, 3)
    orient_edge(graph, 3, 0)
    sepsets = SeparationSetMapping()
    sepsets.set(0, 2, [])
    colliders, _, ambiguous = orient_colliders(
        graph.copy(), sepsets, NODES, Knowledge(), aggressively_prevent_cycles=True
    )
    assert (0, 1, 2) in ambiguous
    assert (0, 1, 2) not in colliders
    colliders, _, _ = orient_colliders(graph, sepsets, NODES, Knowledge())
    assert (0, 1, 2) in colliders


def test_orient_by_knowledge():
    graph = undirected_graph(4, [(0, 1), (1, 2), (2, 3)])
    knowledge = Knowledge().set_required("B", "A").set_forbidden("B", "C")
    assert orient_by_knowledge(graph, NODES, knowledge) == 2
    assert is_parent(graph, 1, 0)
    assert is_parent(graph, 2, 1)
    assert is_undirected(graph, 2, 3)
    assert orient_by_knowledge(graph, NODES, knowledge) == 0


def test_orient_by_tiers():
    graph = undirected_graph(3, [(0, 1), (1, 2)])
    knowledge = Knowledge.from_tiers([["C"], ["A", "B"]])
    orient_by_knowledge(graph, ["A", "B", "C"], knowledge)
    assert is_parent(graph, 2, 1)
    assert is_undirected(graph, 0, 1)


def test_is_arrowpoint_allowed():
    knowledge = Knowledge().set_required("B", "A").set_forbidden("C", "A")
    assert not is_arrowpoint_allowed(NODES, knowledge, 0, 1)
    assert not is_arrowpoint_allowed(NODES, knowledge, 2, 0)
    assert is_arrowpoint_allowed(NODES, knowledge, 1, 0)
    assert is_arrowpoint_allowed(NODES, knowledge, 0, 2)
