import numpy as np
from numpy.typing import NDArray
from typing import Iterator
import itertools
from collections import deque

# endpoint markers, g[x, y] is the mark at y's end of the x-y edge
TAIL = 0
HEAD = 1
UNDETERMINED = 2


def create_complete_graph(n: int, marker: int = HEAD) -> NDArray:
    """
    Create a complete graph with the specified number of nodes.

    Args:
        n (int): Number of nodes in the graph.
        marker (int, optional): Marker value for the edges. Defaults to 1.

    Returns:
        NDArray: Complete graph with edges marked.
    """
    graph = np.full((n, n), marker, dtype=np.int8) - marker * np.identity(
        n, dtype=np.int8
    )
    return graph


def create_empty_graph(n: int) -> NDArray:
    """
    Create an empty graph with the specified number of nodes.

    Args:
        n (int): Number of nodes in the graph.

    Returns:
        NDArray: Graph without edges.
    """
    return np.zeros((n, n), dtype=np.int8)


def skeleton_of(graph: NDArray) -> NDArray:
    """
    Undirected copy of a graph keeping only its adjacencies.

    Args:
        graph: Graph representation.

    Returns:
        NDArray: Symmetric graph with every adjacency undirected and no self loops.
    """
    adjacent = (graph != 0) | (graph.T != 0)
    np.fill_diagonal(adjacent, False)
    return adjacent.astype(np.int8)


def is_disconnected(graph, x: int, y: int) -> bool:
    """
    Check if there is no edge between two nodes in the graph.

    Args:
        graph: Graph representation.
        x (int): First node.
        y (int): Second node.

    Returns:
        bool: True if there is no edge between x and y, False otherwise.
    """
    return graph[x, y] == 0 and graph[y, x] == 0


def is_adjacent(graph, x: int, y: int) -> bool:
    """
    Check if two nodes are adjacent in the graph.

    Args:
        graph: Graph representation.
        x (int): Node index.
        y (int): Node index.

    Returns:
        bool: True if nodes are adjacent, False otherwise.
    """
    return (graph[x, y] != 0) or (graph[y, x] != 0)


def adj(graph, x: int) -> set[int]:
    """
    Get the set of adjacent nodes to a given node in the graph.

    Args:
        graph: Graph representation.
        x (int): Node index.

    Returns:
        set[int]: Set of adjacent nodes to x.
    """
    return {int(i) for i in np.where((graph[x, :] != 0) | (graph[:, x] != 0))[0]}


def max_degree(graph: NDArray) -> int:
    """
    Largest number of adjacents of any node, 0 for a graph without nodes.
    """
    if len(graph) == 0:
        return 0
    adjacent = (graph != 0) | (graph.T != 0)
    return int(adjacent.sum(axis=1).max())


def remove_edge(graph, x: int, y: int) -> None:
    """
    Remove an edge between two nodes in the graph.

    Args:
        graph: Graph representation.
        x (int): First node.
        y (int): Second node.

    Returns:
        None
    """
    graph[x, y] = 0
    graph[y, x] = 0


def orient_edge(
    graph, x: int, y: int, tail_marker: int = TAIL, head_marker: int = HEAD
) -> None:
    """
    Orient an edge between two nodes in the graph.

    Args:
        graph: Graph representation.
        x (int): Parent node.
        y (int): Child node.
        tail_marker (int, optional): Marker for the tail of the edge. Defaults to 0.
        head_marker (int, optional): Marker for the head of the edge. Defaults to 1.

    Returns:
        None
    """
    graph[x, y] = head_marker
    graph[y, x] = tail_marker


def set_arrowhead(graph, x: int, y: int) -> None:
    """
    Put an arrowhead at y on the x-y edge, keeping the mark at x.

    An edge already directed y -> x becomes undetermined (x <-> y).

    Args:
        graph: Graph representation.
        x (int): Node at the tail side.
        y (int): Node receiving the arrowhead.
    """
    if is_parent(graph, y, x) or is_bidirected(graph, x, y):
        graph[x, y] = UNDETERMINED
        graph[y, x] = UNDETERMINED
    else:
        orient_edge(graph, x, y)


def is_parent(
    graph, x: int, y: int, tail_marker: int = TAIL, head_marker: int = HEAD
) -> bool:
    """
    Check if x is a parent of y in the graph.

    Args:
        graph: Graph representation.
        x (int): Potential parent node.
        y (int): Potential child node.
        tail_marker (int, optional): Marker for the tail of the edge. Defaults to 0.
        head_marker (int, optional): Marker for the head of the edge. Defaults to 1.

    Returns:
        bool: True if x is a parent of y, False otherwise.
    """
    return (graph[x, y] == head_marker) and (graph[y, x] == tail_marker)


def is_undirected(graph, x: int, y: int, marker: int = HEAD) -> bool:
    """
    Check if there is an undirected edge between two nodes in the graph.

    Args:
        graph: Graph representation.
        x (int): First node.
        y (int): Second node.
        marker (int, optional): Marker for the undirected edge. Defaults to 1.

    Returns:
        bool: True if there is an undirected edge between x and y, False otherwise.
    """
    return graph[x, y] == marker and graph[y, x] == marker


def is_bidirected(graph, x: int, y: int) -> bool:
    return graph[x, y] == UNDETERMINED and graph[y, x] == UNDETERMINED


def parents_of(
    graph: NDArray, x: int, tail_marker: int = TAIL, head_marker: int = HEAD
) -> set[int]:
    """
    Get the parents of a node in the graph.

    Args:
        graph: Graph representation.
        x (int): Node index.
        tail_marker (int, optional): Tail marker value. Defaults to 0.
        head_marker (int, optional): Head marker value. Defaults to 1.

    Returns:
        set[int]: Set of parent nodes.
    """
    return {
        int(i)
        for i in np.where((graph[x, :] == tail_marker) & (graph[:, x] == head_marker))[
            0
        ]
    }


def children_of(graph, i: int) -> set[int]:
    """
    Get the children of a node in the graph.

    Args:
        graph: Graph representation.
        i (int): Node index.

    Returns:
        set[int]: Set of child nodes.
    """
    return {int(j) for j in np.where((graph[i, :] == HEAD) & (graph[:, i] == TAIL))[0]}


def neighbors(graph, i: int) -> set[int]:
    """
    Get the nodes joined to i by an undirected edge.

    Args:
        graph: Graph representation.
        i (int): Node index.

    Returns:
        set[int]: Set of undirected neighbours.
    """
    return {int(j) for j in np.where((graph[i, :] == HEAD) & (graph[:, i] == HEAD))[0]}


def get_all_edges(graph: NDArray) -> Iterator[tuple[int, int]]:
    """
    Generate all adjacent pairs in the graph, lower index first.

    Args:
        graph: Graph representation.

    Yields:
        tuple[int, int]: Tuple representing an edge (node index, node index).
    """
    n = len(graph)
    for i, j in itertools.combinations(range(n), 2):
        if is_adjacent(graph, i, j):
            yield (i, j)


def find_unshielded_triples(graph) -> Iterator[tuple[int, int, int]]:
    """
    Find unshielded triples in the graph regardless of edge marks.

    Args:
        graph: Graph representation.

    Yields:
        tuple[int, int, int]: Triples (x, z, y) with x < y, x and y adjacent to z but not to each other.
    """
    n = len(graph)
    for z in range(n):
        for x, y in itertools.combinations(sorted(adj(graph, z)), 2):
            if not is_adjacent(graph, x, y):
                yield (x, z, y)


def is_ancestor_of(graph: NDArray, x: int, y: int) -> bool:
    """
    Check whether a directed path leads from x to y.

    Args:
        graph: Graph representation.
        x (int): Possible ancestor.
        y (int): Possible descendant.

    Returns:
        bool: True if x == y or y is reachable from x along directed edges.
    """
    if x == y:
        return True
    seen = {x}
    q = deque([x])
    while q:
        node = q.popleft()
        for child in children_of(graph, node):
            if child == y:
                return True
            if child not in seen:
                seen.add(child)
                q.append(child)
    return False


def directed_edges(graph: NDArray) -> list[tuple[int, int]]:
    n = len(graph)
    return [
        (x, y) for x, y in itertools.permutations(range(n), 2) if is_parent(graph, x, y)
    ]


def directed_subgraph(graph: NDArray) -> NDArray:
    """
    Keep only the directed edges of a partially oriented graph.

    Args:
        graph: Graph representation.

    Returns:
        NDArray: Matrix with dag[x, y] == 1 exactly when x -> y in graph.
    """
    dag = create_empty_graph(len(graph))
    for x, y in directed_edges(graph):
        dag[x, y] = 1
    return dag


def topological_ordering(graph: NDArray) -> list[int]:
    """
    Perform topological ordering of the nodes in a directed acyclic graph (DAG).

    Args:
        graph: Directed acyclic graph representation, graph[i, j] == 1 for i -> j.

    Returns:
        list[int]: Topologically ordered list of node indices.

    Raises:
        ValueError: If the given graph is not a DAG (contains cycles).
    """
    # Run the algorithm from the 1962 paper "Topological sorting of
    # large networks" by AB Kahn
    graph = (graph != 0).astype(np.int8)
    in_degree = graph.sum(axis=0)
    sources = sorted((int(i) for i in np.where(in_degree == 0)[0]), reverse=True)
    ordering = []
    while len(sources) > 0:
        i = sources.pop()
        ordering.append(i)
        for j in np.where(graph[i, :] != 0)[0]:
            graph[i, j] = 0
            in_degree[j] -= 1
            if in_degree[j] == 0:
                sources.append(int(j))
    # If graph still contains edges there is at least one cycle
    if graph.sum() > 0:
        raise ValueError("The given graph is not a DAG")
    return ordering


def has_directed_cycle(graph: NDArray) -> bool:
    try:
        topological_ordering(directed_subgraph(graph))
    except ValueError:
        return True
    return False


def undirect_undetermined_edges(graph: NDArray) -> int:
    """
    Mark every undetermined (bidirected) edge as undirected.

    Args:
        graph: Graph representation.

    Returns:
        int: Number of edges changed.
    """
    mask = (graph == UNDETERMINED) & (graph.T == UNDETERMINED)
    graph[mask] = HEAD
    return int(mask.sum() // 2)
