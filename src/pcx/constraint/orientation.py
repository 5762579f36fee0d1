import logging
from typing import Hashable, Sequence
from numpy.typing import NDArray
from pcx.graph.graph_utils import (
    find_unshielded_triples,
    get_all_edges,
    is_ancestor_of,
    is_parent,
    orient_edge,
    set_arrowhead,
)
from pcx.knowledge import Knowledge
from .common import SeparationSetMapping

logger = logging.getLogger(__name__)


def is_arrowpoint_allowed(
    nodes: Sequence[Hashable], knowledge: Knowledge, x: int, y: int
) -> bool:
    """
    Check whether knowledge lets an arrowhead point from x into y.

    Args:
        nodes (Sequence[Hashable]): Variables in node index order.
        knowledge (Knowledge): Background knowledge.
        x (int): Tail side node.
        y (int): Head side node.

    Returns:
        bool: False if y -> x is required or x -> y is forbidden.
    """
    return not knowledge.is_required(nodes[y], nodes[x]) and not knowledge.is_forbidden(
        nodes[x], nodes[y]
    )


def _knowledge_direction(
    nodes: Sequence[Hashable], knowledge: Knowledge, x: int, y: int
) -> tuple[int, int] | None:
    a, b = nodes[x], nodes[y]
    if knowledge.is_required(a, b):
        return (x, y)
    if knowledge.is_required(b, a):
        return (y, x)
    forbidden_xy = knowledge.is_forbidden(a, b)
    forbidden_yx = knowledge.is_forbidden(b, a)
    if forbidden_xy and not forbidden_yx:
        return (y, x)
    if forbidden_yx and not forbidden_xy:
        return (x, y)
    return None


def orient_by_knowledge(
    graph: NDArray, nodes: Sequence[Hashable], knowledge: Knowledge
) -> int:
    """
    Orient every adjacency whose direction knowledge settles.

    Required directions are applied as given; a direction forbidden one way
    only is oriented the other way. Pairs forbidden both ways are left alone.

    Args:
        graph (NDArray): Graph to orient in place.
        nodes (Sequence[Hashable]): Variables in node index order.
        knowledge (Knowledge): Background knowledge.

    Returns:
        int: Number of edges whose orientation changed.
    """
    if knowledge.is_empty():
        return 0
    changed = 0
    for x, y in list(get_all_edges(graph)):
        direction = _knowledge_direction(nodes, knowledge, x, y)
        if direction is None or is_parent(graph, *direction):
            continue
        orient_edge(graph, *direction)
        logger.debug("Oriented by knowledge: %r --> %r", nodes[direction[0]], nodes[direction[1]])
        changed += 1
    return changed


def orient_colliders(
    graph: NDArray,
    separation_sets: SeparationSetMapping,
    nodes: Sequence[Hashable],
    knowledge: Knowledge,
    aggressively_prevent_cycles: bool = False,
) -> tuple[set[tuple[int, int, int]], set[tuple[int, int, int]], set[tuple[int, int, int]]]:
    """
    Orient the V-structures in the graph.

    For each unshielded triple x - z - y, orient x -> z <- y unless z is in
    the separating set of x and y. Pairs without a recorded separating set
    are left as non-colliders.

    Args:
        graph (NDArray): The causal graph, oriented in place.
        separation_sets (SeparationSetMapping): Separation sets found by the adjacency search.
        nodes (Sequence[Hashable]): Variables in node index order.
        knowledge (Knowledge): Background knowledge vetoing arrowheads.
        aggressively_prevent_cycles (bool): Also veto colliders that would close a directed cycle.

    Returns:
        tuple: Colliders, non-colliders and ambiguous triples as (x, z, y) index triples.
    """
    colliders, noncolliders, ambiguous = set(), set(), set()
    for x, z, y in list(find_unshielded_triples(graph)):
        sepset = separation_sets.get(x, y)
        if sepset is None or z in sepset:
            noncolliders.add((x, z, y))
            continue
        if not (
            is_arrowpoint_allowed(nodes, knowledge, x, z)
            and is_arrowpoint_allowed(nodes, knowledge, y, z)
        ):
            logger.debug(
                "Collider %r --> %r <-- %r forbidden by knowledge", nodes[x], nodes[z], nodes[y]
            )
            ambiguous.add((x, z, y))
            continue
        if aggressively_prevent_cycles and (
            _closes_cycle(graph, x, z) or _closes_cycle(graph, y, z)
        ):
            logger.debug(
                "Collider %r --> %r <-- %r would create a cycle", nodes[x], nodes[z], nodes[y]
            )
            ambiguous.add((x, z, y))
            continue
        # orient  x -> z <- y
        set_arrowhead(graph, x, z)
        set_arrowhead(graph, y, z)
        colliders.add((x, z, y))
        logger.debug("Orienting collider %r --> %r <-- %r", nodes[x], nodes[z], nodes[y])
    return colliders, noncolliders, ambiguous


def _closes_cycle(graph: NDArray, x: int, y: int) -> bool:
    return not is_parent(graph, x, y) and is_ancestor_of(graph, y, x)
