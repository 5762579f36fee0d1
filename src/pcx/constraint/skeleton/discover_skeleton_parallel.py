from typing import Hashable, Sequence
from numpy.typing import NDArray
from pcx.graph.graph_utils import get_all_edges, remove_edge
from .utils import (
    find_separating_set,
    has_free_degree,
    initial_skeleton,
    protected_pairs,
    remove_forbidden_adjacencies,
    resolve_depth,
)
from concurrent.futures import Executor
import functools
import itertools
from concurrent.futures import ThreadPoolExecutor, ProcessPoolExecutor
from pcx.config import HardwareConfig, ComputeBackend, validate_depth
from pcx.diagnostics import FasStatistics
from pcx.independence.oracle import DSeparationTest
from pcx.knowledge import Knowledge
import math
from tqdm import tqdm
from ..common import SeparationSetMapping


class ParallelSkeletonLearner:
    """
    Class for learning the skeleton of a causal graph in parallel.

    Edges of one depth level are tested concurrently against the adjacencies
    at the start of that level; removals are applied once the level is done.

    Attributes:
        hw_config (HardwareConfig): Hardware configuration for computation.
        max_depth (int): Maximum conditioning set size, -1 for unbounded.
        verbose (bool): Flag indicating whether to display verbose output.
        observer: Optional observer told about depth levels and removed edges.
        statistics (FasStatistics): Test counters of the last call to learn.
    """

    def __init__(
        self,
        hw_config: HardwareConfig,
        max_depth: int = -1,
        verbose: bool = False,
        observer=None,
    ) -> None:
        """
        Initialize the ParallelSkeletonLearner.

        Args:
            hw_config (HardwareConfig): Hardware configuration for computation.
            max_depth (int): Maximum conditioning set size, -1 for unbounded.
            verbose (bool): Flag indicating whether to display verbose output.
            observer: Optional observer told about depth levels and removed edges.
        """
        self.hw_config = hw_config
        self.max_depth = validate_depth(max_depth)
        self.max_workers = hw_config.max_workers
        self.verbose = verbose
        self.observer = observer
        self.statistics = FasStatistics()

    def _create_executor(self) -> Executor:
        if self.hw_config.compute_backend is ComputeBackend.MULTICORE:
            return ProcessPoolExecutor(self.max_workers)
        return ThreadPoolExecutor(self.max_workers)

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
            indep_tester: Independence test over the variables, picklable for MULTICORE.
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

        with self._create_executor() as executor:
            for depth in (t := tqdm(range(max_depth + 1), disable=not self.verbose)):
                if not has_free_degree(graph, depth):
                    break
                J = list(get_all_edges(graph))
                if self.observer is not None:
                    self.observer.depth_started(depth, len(J))
                batch_size = int(math.ceil(len(J) / self.max_workers))
                batches = list(itertools.batched(J, batch_size))
                run_mini_pc = functools.partial(
                    run_pc_at_depth,
                    depth=depth,
                    indep_tester=indep_tester,
                    graph=graph.copy(),
                    nodes=nodes,
                    protected=protected,
                )
                t.set_description(f"executing level {depth}")
                results = executor.map(
                    run_mini_pc, batches
                )  # distribute tasks to workers
                # sync results
                t.set_description("synchronising results")

                for x, y, sepset, tests in itertools.chain(*results):
                    for z, independent in tests:
                        self.statistics.record(
                            nodes[x], nodes[y], [nodes[v] for v in z], independent
                        )
                    if sepset is None:
                        continue
                    remove_edge(graph, x, y)
                    separation_sets.set(x, y, sepset)
                    if self.observer is not None:
                        self.observer.edge_removed(
                            nodes[x], nodes[y], [nodes[v] for v in sorted(sepset)]
                        )

        return (graph, separation_sets)


def run_pc_at_depth(
    edges: list[tuple[int, int]],
    depth: int,
    indep_tester,
    graph: NDArray,
    nodes: Sequence[Hashable],
    protected: frozenset[tuple[int, int]],
) -> list[tuple[int, int, frozenset[int] | None, list]]:
    """
    Run PC algorithm at a specific depth.

    Args:
        edges (list[tuple[int, int]]): Edges to test, lower index first.
        depth (int): Depth for conditional independence tests.
        indep_tester: Independence tester.
        graph (NDArray): Adjacencies at the start of the level, left untouched.
        nodes (Sequence[Hashable]): Variables in node index order.
        protected (frozenset[tuple[int, int]]): Pairs whose adjacency knowledge requires.

    Returns:
        list: Per edge, the separating set found (or None) and the tests performed.
    """
    results = []
    for x, y in edges:
        sepset, tests = find_separating_set(
            indep_tester, nodes, graph, x, y, depth, (x, y) not in protected
        )
        results.append((x, y, sepset, tests))
    return results
