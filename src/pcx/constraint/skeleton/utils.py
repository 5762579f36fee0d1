import itertools
from typing import Hashable, Sequence
from numpy.typing import NDArray
from pcx.config import MAX_DEPTH, ConfigurationError, validate_depth
from pcx.graph.graph_utils import (
    adj,
    create_complete_graph,
    get_all_edges,
    max_degree,
    remove_edge,
    skeleton_of,
)
from pcx.knowledge import Knowledge


def resolve_depth(depth: int, no_variables: int) -> int:
    """
    Turn a configured depth into the largest conditioning set size to try.

    Args:
        depth (int): Configured depth, -1 for unbounded.
        no_variables (int): Number of variables searched over.

    Returns:
        int: Depth capped by MAX_DEPTH and by the largest possible conditioning set.
    """
    validate_depth(depth)
    largest = max(no_variables - 2, 0)
    if depth == -1:
        return min(MAX_DEPTH, largest)
    return min(depth, largest)


def has_free_degree(graph: NDArray, depth: int) -> bool:
    """
    Check whether some node still has depth adjacents besides its partner.
    """
    return max_degree(graph) - 1 >= depth


def initial_skeleton(no_variables: int, initial_graph: NDArray | None) -> NDArray:
    """
    Complete graph, or the adjacencies of a seed graph.

    Raises:
        ConfigurationError: If the seed graph does not match the number of variables.
    """
    if initial_graph is None:
        return create_complete_graph(no_variables)
    if initial_graph.shape != (no_variables, no_variables):
        raise ConfigurationError(
            f"Initial graph has shape {initial_graph.shape}, expected "
            f"({no_variables}, {no_variables})"
        )
    return skeleton_of(initial_graph)


def protected_pairs(
    nodes: Sequence[Hashable], knowledge: Knowledge
) -> frozenset[tuple[int, int]]:
    """
    Index pairs (x < y) whose adjacency is required by knowledge.
    """
    index = {v: i for i, v in enumerate(nodes)}
    pairs = set()
    for a, b in knowledge.required_edges():
        if a in index and b in index:
            x, y = sorted((index[a], index[b]))
            pairs.add((x, y))
    return frozenset(pairs)


def remove_forbidden_adjacencies(
    graph: NDArray, nodes: Sequence[Hashable], knowledge: Knowledge
) -> list[tuple[int, int]]:
    """
    Drop edges forbidden in both directions without testing them.

    Returns:
        list[tuple[int, int]]: Removed pairs.
    """
    removed = []
    for x, y in list(get_all_edges(graph)):
        if knowledge.is_forbidden_adjacency(nodes[x], nodes[y]):
            remove_edge(graph, x, y)
            removed.append((x, y))
    return removed


def find_separating_set(
    indep_tester,
    nodes: Sequence[Hashable],
    graph: NDArray,
    x: int,
    y: int,
    depth: int,
    removable: bool = True,
) -> tuple[frozenset[int] | None, list[tuple[tuple[int, ...], bool]]]:
    """
    Test x and y against every size depth subset of adj(x) - {y}, then of adj(y) - {x}.

    Args:
        indep_tester: Independence test answering on variable names.
        nodes (Sequence[Hashable]): Variables in node index order.
        graph (NDArray): Adjacencies to draw conditioning sets from.
        x (int): First node, enumerated first.
        y (int): Second node.
        depth (int): Conditioning set size.
        removable (bool): If False the search never stops early, knowledge keeps the edge.

    Returns:
        tuple: The separating set (or None) and every (conditioning set, independent) tested.
    """
    tests = []
    tried = set()
    for a, b in ((x, y), (y, x)):
        candidates = sorted(adj(graph, a) - {b})
        if len(candidates) < depth:
            continue
        for z in itertools.combinations(candidates, depth):
            if z in tried:
                continue
            tried.add(z)
            independent = bool(
                indep_tester.is_independent(nodes[x], nodes[y], [nodes[v] for v in z])
            )
            tests.append((z, independent))
            if independent and removable:
                return frozenset(z), tests
    return None, tests
