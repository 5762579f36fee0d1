from typing import Hashable, Sequence
from numpy.typing import NDArray
from .utils import (
    find_separating_set,
    has_free_degree,
    initial_skeleton,
    protected_pairs,
    remove_forbidden_adjacencies,
    resolve_depth,
)
from pcx.config import validate_depth
from pcx.graph.graph_utils import get_all_edges, is_disconnected, remove_edge
from pcx.knowledge import Knowledge
from pcx.diagnostics import FasStatistics
from pcx.independence.oracle import DSeparationTest
from ..common import SeparationSetMapping
from tqdm import tqdm


class CPUSkeletonLearner:
    """
    Class for learning the skeleton of a causal graph one test at a time.

    Attributes:
        max_depth (int): Maximum conditioning set size, -1 for unbounded.
        verbose (bool): Flag indicating whether to display verbose output.
        observer: Optional observer told about depth levels and removed edges.
        statistics (FasStatistics): Test counters of the last call to learn.
    """

    def __init__(self, max_depth: int = -1, verbose: bool = False, observer=None) -> None:
        """
        Initialize the CPUSkeletonLearner.

        Args:
            max_depth (int): Maximum conditioning set size, -1 for unbounded.
            verbose (bool): Flag indicating whether to display verbose output.
            observer: Optional observer told about depth levels and removed edges.
        """
        self.max_depth = validate_depth(max_depth)
        self.verbose = verbose
        self.observer = observer
        self.statistics = FasStatistics()

    def learn(
        self,
        indep_tester,
        nodes: Sequence[Hashable] | None = None,
        knowledge: Knowledge | None = None,
        initial_graph: NDArray | None = None,
        ground_truth: DSeparationTest | None = None,
    ) -> tuple[NDArray, SeparationSetMapping]:
        """
        Learn the skeleton of the causal graph.

        Args:
            indep_tester: Independence test over the variables.
            nodes (Sequence[Hashable] | None): Variables to search over, all of the test's if omitted.
            knowledge (Knowledge | None): Background knowledge.
            initial_graph (NDArray | None): Seed adjacencies, complete graph if omitted.
            ground_truth (DSeparationTest | None): Oracle used to count false judgements.

        Returns:
            tuple[NDArray, SeparationSetMapping]: The learned skeleton and separation sets.
        """
        nodes = list(indep_tester.variables()) if nodes is None else list(nodes)
        knowledge = Knowledge() if knowledge is None else knowledge
        graph = initial_skeleton(len(nodes), initial_graph)
        separation_sets = SeparationSetMapping()
        self.statistics = FasStatistics(ground_truth=ground_truth)

        remove_forbidden_adjacencies(graph, nodes, knowledge)
        protected = protected_pairs(nodes, knowledge)
        max_depth = resolve_depth(self.max_depth, len(nodes))

        for depth in (t := tqdm(range(max_depth + 1), disable=not self.verbose)):
            if not has_free_degree(graph, depth):
                break
            edges = list(get_all_edges(graph))
            t.set_description(f"exploring condition sets at depth: {depth}")
            if self.observer is not None:
                self.observer.depth_started(depth, len(edges))
            for x, y in edges:
                if is_disconnected(graph, x, y):
                    continue
                sepset, tests = find_separating_set(
                    indep_tester, nodes, graph, x, y, depth, (x, y) not in protected
                )
                for z, independent in tests:
                    self.statistics.record(
                        nodes[x], nodes[y], [nodes[v] for v in z], independent
                    )
                if sepset is not None:
                    remove_edge(graph, x, y)
                    separation_sets.set(x, y, sepset)
                    if self.observer is not None:
                        self.observer.edge_removed(
                            nodes[x], nodes[y], [nodes[v] for v in sorted(sepset)]
                        )
        return (graph, separation_sets)
