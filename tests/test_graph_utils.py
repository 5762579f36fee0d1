import numpy as np
import networkx as nx
import pytest
from pcx.graph.graph_utils import *
import itertools


def test_create_empty():
    graph = create_empty_graph(5)
    assert nx.is_empty(nx.from_numpy_array(graph, create_using=nx.DiGraph))


def test_create_complete_graph():
    graph = create_complete_graph(5)
    for i, j in itertools.permutations(range(5), 2):
        assert graph[i, j] == 1
    assert np.all(np.diag(graph) == 0)


def test_adj_one_variable():
    graph = np.zeros((5, 5), dtype=np.int8)
    graph[0, 1] = 1
    graph[0, 2] = 1
    graph[0, 4] = 1
    assert adj(graph, 0) == {1, 2, 4}


def test_adj_two_variables():
    graph = np.zeros((5, 5), dtype=np.int8)
    graph[0, 1] = 1
    graph[0, 2] = 1
    graph[0, 4] = 1
    graph[2, 3] = 1
    assert adj(graph, 0) == {1, 2, 4}
    assert adj(graph, 2) == {3, 0}


def test_is_disconnected():
    graph = np.zeros((5, 5), dtype=np.int8)
    graph[0, 3] = 1
    graph[0, 1] = 1
    graph[1, 2] = 1
    assert not is_disconnected(graph, 0, 1)
    assert is_disconnected(graph, 1, 3)


def test_remove_edge():
    graph = create_complete_graph(5)
    remove_edge(graph, 0, 1)
    assert is_disconnected(graph, 0, 1)
    for i, j in itertools.combinations(range(5), 2):
        if not (i, j) == (0, 1):
            assert not is_disconnected(graph, i, j)


def test_is_undirected():
    graph = create_complete_graph(5)
    assert is_undirected(graph, 0, 1)
    orient_edge(graph, 0, 1)
    assert not is_undirected(graph, 0, 1)


def test_is_adjacent():
    graph = create_complete_graph(5)
    assert is_adjacent(graph, 0, 1)
    assert is_adjacent(graph, 0, 2)
    assert is_adjacent(graph, 3, 1)


def test_is_parent():
    graph = np.zeros((5, 5), dtype=np.int8)
    graph[1, 0] = 1
    assert is_parent(graph, 1, 0)
    assert not is_parent(graph, 0, 1)


def test_orient_edge():
    graph = create_complete_graph(5)
    orient_edge(graph, 0, 1)
    assert is_parent(graph, 0, 1)


def test_set_arrowhead_against_existing_direction():
    graph = create_complete_graph(3)
    orient_edge(graph, 1, 0)
    set_arrowhead(graph, 0, 1)
    assert is_bidirected(graph, 0, 1)
    assert not is_parent(graph, 0, 1) and not is_parent(graph, 1, 0)
    assert is_adjacent(graph, 0, 1)


def test_set_arrowhead_on_undirected_edge():
    graph = create_complete_graph(3)
    set_arrowhead(graph, 0, 1)
    assert is_parent(graph, 0, 1)


def test_undirect_undetermined_edges():
    graph = create_complete_graph(3)
    orient_edge(graph, 1, 0)
    set_arrowhead(graph, 0, 1)
    orient_edge(graph, 1, 2)
    assert undirect_undetermined_edges(graph) == 1
    assert is_undirected(graph, 0, 1)
    assert is_parent(graph, 1, 2)


def test_collider_parents():
    graph = np.zeros((5, 5), dtype=np.int8)
    graph[0, 1] = 1
    graph[2, 1] = 1
    assert is_parent(graph, 0, 1) and is_parent(graph, 2, 1)
    assert parents_of(graph, 1) == {0, 2}


def test_parents_of():
    graph = np.zeros((5, 5), dtype=np.int8)
    graph[0, 1] = 1
    graph[2, 1] = 1
    assert parents_of(graph, 1) == {0, 2}


def test_topoligical_ordering():
    graph = np.zeros((3, 3), dtype=np.int8)
    graph[0, 1] = 1
    graph[1, 2] = 1
    assert topological_ordering(graph) == [0, 1, 2]


def test_topological_ordering_rejects_cycle():
    graph = np.zeros((3, 3), dtype=np.int8)
    graph[0, 1] = 1
    graph[1, 2] = 1
    graph[2, 0] = 1
    with pytest.raises(ValueError):
        topological_ordering(graph)


def test_children_of():
    graph = np.zeros((5, 5), dtype=np.int8)
    graph[1, 0] = 1
    graph[1, 2] = 1
    assert children_of(graph, 1) == {0, 2}


def test_neighbors():
    graph = np.zeros((5, 5), dtype=np.int8)
    graph[1, 0] = 1
    graph[0, 1] = 1
    graph[1, 2] = 1
    graph[2, 1] = 1
    graph[1, 3] = 1
    assert neighbors(graph, 1) == {0, 2}


def test_get_all_edges():
    graph = np.zeros((3, 3), dtype=np.int8)
    graph[0, 1] = 1
    graph[2, 1] = 1
    assert list(get_all_edges(graph)) == [(0, 1), (1, 2)]


def test_find_unshielded_triples():
    # 0 - 1 - 2 - 3 with 1 - 3
    graph = np.zeros((4, 4), dtype=np.int8)
    for x, y in [(0, 1), (1, 2), (2, 3), (1, 3)]:
        graph[x, y] = graph[y, x] = 1
    assert set(find_unshielded_triples(graph)) == {(0, 1, 2), (0, 1, 3)}


def test_is_ancestor_of():
    graph = create_empty_graph(4)
    orient_edge(graph, 0, 1)
    orient_edge(graph, 1, 2)
    graph[2, 3] = graph[3, 2] = 1
    assert is_ancestor_of(graph, 0, 2)
    assert not is_ancestor_of(graph, 2, 0)
    assert not is_ancestor_of(graph, 0, 3)


def test_has_directed_cycle():
    graph = create_empty_graph(3)
    orient_edge(graph, 0, 1)
    orient_edge(graph, 1, 2)
    assert not has_directed_cycle(graph)
    orient_edge(graph, 2, 0)
    assert has_directed_cycle(graph)


def test_skeleton_of():
    graph = create_empty_graph(3)
    orient_edge(graph, 0, 1)
    graph[1, 1] = 1
    skeleton = skeleton_of(graph)
    assert is_undirected(skeleton, 0, 1)
    assert skeleton[1, 1] == 0
    assert is_disconnected(skeleton, 1, 2)


def test_max_degree():
    graph = create_empty_graph(4)
    orient_edge(graph, 0, 1)
    orient_edge(graph, 2, 1)
    orient_edge(graph, 3, 1)
    assert max_degree(graph) == 3
    assert max_degree(create_empty_graph(0)) == 0
