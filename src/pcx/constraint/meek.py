import itertools
import logging
from typing import Callable, Hashable, Sequence
from numpy.typing import NDArray
from pcx.graph.graph_utils import (
    is_adjacent,
    is_ancestor_of,
    is_undirected,
    neighbors,
    orient_edge,
    parents_of,
    children_of,
    undirect_undetermined_edges,
)
from pcx.knowledge import Knowledge
from .orientation import is_arrowpoint_allowed, orient_by_knowledge

logger = logging.getLogger(__name__)

Direct = Callable[[int, int], bool]


class MeekRules:
    """
    Propagates orientations with Meek's rules until nothing changes.

    Attributes:
        nodes (Sequence[Hashable]): Variables in node index order.
        knowledge (Knowledge): Background knowledge, forced first and never violated.
        undirect_unforced_edges (bool): Turn undetermined edges into undirected ones before propagating.
    """

    def __init__(
        self,
        nodes: Sequence[Hashable],
        knowledge: Knowledge | None = None,
        undirect_unforced_edges: bool = False,
    ) -> None:
        self.nodes = list(nodes)
        self.knowledge = Knowledge() if knowledge is None else knowledge
        self.undirect_unforced_edges = undirect_unforced_edges

    def orient_implied(self, graph: NDArray) -> bool:
        """
        Orient every edge implied by the current orientations.

        Args:
            graph (NDArray): The causal graph, oriented in place.

        Returns:
            bool: True if any modifications were made to the graph, False otherwise.
        """
        if len(graph) != len(self.nodes):
            raise ValueError(
                f"Graph has {len(graph)} nodes but {len(self.nodes)} variables were given"
            )
        changed = orient_by_knowledge(graph, self.nodes, self.knowledge) > 0
        # before the rules, so they propagate through these edges
        if self.undirect_unforced_edges:
            changed |= undirect_undetermined_edges(graph) > 0
        rules = [r1, r2, r3]
        if not self.knowledge.is_empty():
            rules.append(r4)

        def direct(a: int, b: int) -> bool:
            return self._direct(graph, a, b)

        modified = True
        while modified:
            modified = any(rule(graph, direct) for rule in rules)
            changed |= modified
        return changed

    def _direct(self, graph: NDArray, a: int, b: int) -> bool:
        if not is_undirected(graph, a, b):
            return False
        if not is_arrowpoint_allowed(self.nodes, self.knowledge, a, b):
            return False
        if is_ancestor_of(graph, b, a):
            logger.debug(
                "Not orienting %r --> %r, it would create a cycle", self.nodes[a], self.nodes[b]
            )
            return False
        orient_edge(graph, a, b)
        logger.debug("Meek orientation %r --> %r", self.nodes[a], self.nodes[b])
        return True


def r1(graph: NDArray, direct: Direct) -> bool:
    """
    Meek Rule 1: a -> b - c with a, c non-adjacent gives b -> c.

    Args:
        graph (NDArray): The adjacency matrix representing the causal graph.
        direct (Direct): Orients an undirected edge when allowed.

    Returns:
        bool: True if any modifications were made to the graph, False otherwise.
    """
    n = len(graph)
    modified = False
    for b in range(n):
        for a in sorted(parents_of(graph, b)):
            for c in sorted(neighbors(graph, b)):
                if c != a and not is_adjacent(graph, a, c):
                    modified |= direct(b, c)
    return modified


def r2(graph: NDArray, direct: Direct) -> bool:
    """
    Meek Rule 2: a -> b -> c with a - c gives a -> c.

    Args:
        graph (NDArray): The adjacency matrix representing the causal graph.
        direct (Direct): Orients an undirected edge when allowed.

    Returns:
        bool: True if any modifications were made to the graph, False otherwise.
    """
    n = len(graph)
    modified = False
    for a in range(n):
        for c in sorted(neighbors(graph, a)):
            if children_of(graph, a) & parents_of(graph, c):
                modified |= direct(a, c)
    return modified


def r3(graph: NDArray, direct: Direct) -> bool:
    """
    Meek Rule 3: a - b, a - c, a - d, b -> d <- c with b, c non-adjacent gives a -> d.

    Args:
        graph (NDArray): The adjacency matrix representing the causal graph.
        direct (Direct): Orients an undirected edge when allowed.

    Returns:
        bool: True if any modifications were made to the graph, False otherwise.
    """
    n = len(graph)
    modified = False
    for d in range(n):
        for a in sorted(neighbors(graph, d)):
            candidates = sorted(neighbors(graph, a) & parents_of(graph, d))
            for b, c in itertools.combinations(candidates, 2):
                if not is_adjacent(graph, b, c):
                    modified |= direct(a, d)
                    break
    return modified


def r4(graph: NDArray, direct: Direct) -> bool:
    """
    Meek Rule 4: a - b, a - d, d -> c -> b, a adjacent c, b, d non-adjacent gives a -> b.

    Only fires when background knowledge oriented edges the other rules cannot reach.

    Args:
        graph (NDArray): The adjacency matrix representing the causal graph.
        direct (Direct): Orients an undirected edge when allowed.

    Returns:
        bool: True if any modifications were made to the graph, False otherwise.
    """
    n = len(graph)
    modified = False
    for a in range(n):
        for b in sorted(neighbors(graph, a)):
            for c in sorted(parents_of(graph, b)):
                if c == a or not is_adjacent(graph, a, c):
                    continue
                for d in sorted(parents_of(graph, c)):
                    if d in (a, b):
                        continue
                    if is_undirected(graph, a, d) and not is_adjacent(graph, b, d):
                        if direct(a, b):
                            modified = True
                            break
                else:
                    continue
                break
    return modified
