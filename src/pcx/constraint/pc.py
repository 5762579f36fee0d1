import itertools
import logging
import time
from typing import Hashable, Sequence

import networkx as nx
import numpy as np
from numpy.typing import NDArray

from pcx.config import ConfigurationError, HardwareConfig, PCConfig
from pcx.diagnostics import LoggingObserver, SearchDiagnostics
from pcx.graph.graph_utils import get_all_edges, has_directed_cycle, is_adjacent
from pcx.independence.fisher import FisherZTest
from pcx.independence.oracle import DSeparationTest
from pcx.knowledge import Knowledge
from .common import SeparationSetMapping
from .meek import MeekRules
from .orientation import orient_by_knowledge, orient_colliders
from .skeleton import create_skeleton_learner

logger = logging.getLogger(__name__)


class PCLearner:
    """
    Class for learning the structure of a causal graph using the PC algorithm.

    The search removes edges between conditionally independent variables,
    orients unshielded colliders from the separating sets and propagates
    orientations with Meek's rules, never against background knowledge.

    Attributes:
        alpha (float): The significance level used when fitting raw observations.
        config (PCConfig): Search parameters.
        hardware_config (HardwareConfig | None): Hardware configuration for the adjacency search.
        knowledge (Knowledge): Background knowledge.
        initial_graph (NDArray | None): Seed adjacencies for the adjacency search.
        true_graph: Ground truth DAG used only to count false judgements.
        observer: Receives progress notifications, a LoggingObserver by default.
        nodes (list): Variables of the last search, in node index order.
        separation_sets (SeparationSetMapping): Separation sets of the last search.
        diagnostics (SearchDiagnostics | None): Counters of the last search.
    """

    def __init__(
        self,
        alpha: float = 0.05,
        config: PCConfig | None = None,
        hardware_config: HardwareConfig | None = None,
        knowledge: Knowledge | None = None,
        indep_tester_factory=FisherZTest,
        initial_graph: NDArray | None = None,
        true_graph: NDArray | nx.DiGraph | None = None,
        observer=None,
    ) -> None:
        """
        Initialize the PCLearner.

        Args:
            alpha (float): The significance level for conditional independence tests built by fit.
            config (PCConfig | None): Search parameters, defaults if omitted.
            hardware_config (HardwareConfig | None): Hardware configuration for the adjacency search.
            knowledge (Knowledge | None): Background knowledge, none if omitted.
            indep_tester_factory: Builds an independence test from (observations, alpha) in fit.
            initial_graph (NDArray | None): Seed adjacencies, complete graph if omitted.
            true_graph (NDArray | nx.DiGraph | None): Ground truth DAG for diagnostics.
            observer: Progress observer, a LoggingObserver if omitted.
        """
        self.config = PCConfig() if config is None else config
        self.alpha = alpha
        self.hardware_config = hardware_config
        self.knowledge = Knowledge() if knowledge is None else knowledge
        self.indep_tester_factory = indep_tester_factory
        self.initial_graph = initial_graph
        self.true_graph = true_graph
        self.observer = (
            LoggingObserver(self.config.verbose) if observer is None else observer
        )
        self.nodes: list[Hashable] = []
        self.graph: NDArray | None = None
        self.separation_sets = SeparationSetMapping()
        self.diagnostics: SearchDiagnostics | None = None

    @property
    def knowledge(self) -> Knowledge:
        return self._knowledge

    @knowledge.setter
    def knowledge(self, knowledge: Knowledge) -> None:
        if knowledge is None:
            raise ConfigurationError("Knowledge must not be None")
        self._knowledge = knowledge

    def fit(self, observations: NDArray) -> NDArray:
        """
        Fit the model to the observations.

        Args:
            observations (NDArray): The observational data.

        Returns:
            NDArray: The learned causal graph.
        """
        indep_tester = self.indep_tester_factory(observations, self.alpha)
        return self.search(indep_tester)

    def search(
        self, indep_tester, variables: Sequence[Hashable] | None = None
    ) -> NDArray:
        """
        Run the PC search.

        Args:
            indep_tester: Independence test, see pcx.independence.base.IndependenceTest.
            variables (Sequence[Hashable] | None): Variables to search over, all of the test's if omitted.

        Returns:
            NDArray: The learned causal graph over the variables, in their order.

        Raises:
            ConfigurationError: If the test is missing, a variable is outside
                the test's domain or the initial graph does not fit.
        """
        nodes = self._validate(indep_tester, variables)
        start = time.perf_counter()
        self.observer.search_started(nodes, indep_tester)

        skeleton_learner = create_skeleton_learner(
            self.config.depth, self.hardware_config, self.config.verbose, self.observer
        )
        graph, separation_sets = skeleton_learner.learn(
            indep_tester,
            nodes,
            self.knowledge,
            initial_graph=self.initial_graph,
            ground_truth=self._ground_truth(nodes),
        )
        statistics = skeleton_learner.statistics

        orient_by_knowledge(graph, nodes, self.knowledge)
        colliders, noncolliders, ambiguous = orient_colliders(
            graph,
            separation_sets,
            nodes,
            self.knowledge,
            self.config.aggressively_prevent_cycles,
        )
        rules = MeekRules(nodes, self.knowledge, self.config.undirect_unforced_edges)
        rules.orient_implied(graph)
        # only knowledge is applied without a cycle check
        if has_directed_cycle(graph):
            logger.warning("Background knowledge forced a directed cycle into the result")

        def named(triples):
            return frozenset(tuple(nodes[i] for i in triple) for triple in triples)

        self.nodes = nodes
        self.graph = graph
        self.separation_sets = separation_sets
        self.diagnostics = SearchDiagnostics(
            num_independence_tests=statistics.num_independence_tests,
            num_independent_judgements=statistics.num_independent_judgements,
            num_dependence_judgements=statistics.num_dependence_judgements,
            num_false_dependence_judgements=statistics.num_false_dependence_judgements,
            num_false_independence_judgements=statistics.num_false_independence_judgements,
            elapsed_time=time.perf_counter() - start,
            unshielded_colliders=named(colliders),
            unshielded_noncolliders=named(noncolliders),
            ambiguous_triples=named(ambiguous),
        )
        graph.setflags(write=False)
        self.observer.search_finished(graph, nodes, self.diagnostics)
        return graph

    def _validate(
        self, indep_tester, variables: Sequence[Hashable] | None
    ) -> list[Hashable]:
        if indep_tester is None:
            raise ConfigurationError("An independence test is required")
        domain = list(indep_tester.variables())
        nodes = domain if variables is None else list(variables)
        known = set(domain)
        unknown = [v for v in nodes if v not in known]
        if unknown:
            raise ConfigurationError(
                "All of the given variables must be in the domain of the "
                f"independence test provided, unknown: {unknown}"
            )
        if len(set(nodes)) != len(nodes):
            raise ConfigurationError(f"Variables must be distinct: {nodes}")
        if self.initial_graph is not None and self.initial_graph.shape != (
            len(nodes),
            len(nodes),
        ):
            raise ConfigurationError(
                f"Initial graph has shape {self.initial_graph.shape}, expected "
                f"({len(nodes)}, {len(nodes)})"
            )
        return nodes

    def _ground_truth(self, nodes: list[Hashable]) -> DSeparationTest | None:
        if self.true_graph is None:
            return None
        try:
            if isinstance(self.true_graph, nx.DiGraph):
                return DSeparationTest(self.true_graph)
            return DSeparationTest.from_adjacency(np.asarray(self.true_graph), nodes)
        except (ValueError, IndexError) as e:
            logger.warning("Ignoring true graph, false judgement counts disabled: %s", e)
            return None

    @property
    def elapsed_time(self) -> float | None:
        return None if self.diagnostics is None else self.diagnostics.elapsed_time

    @property
    def num_independence_tests(self) -> int | None:
        return None if self.diagnostics is None else self.diagnostics.num_independence_tests

    def get_adjacencies(self) -> set[frozenset[Hashable]]:
        """
        Adjacent variable pairs of the last search.
        """
        self._require_graph()
        return {
            frozenset((self.nodes[x], self.nodes[y]))
            for x, y in get_all_edges(self.graph)
        }

    def get_nonadjacencies(self) -> set[frozenset[Hashable]]:
        """
        Non-adjacent variable pairs of the last search.
        """
        self._require_graph()
        return {
            frozenset((self.nodes[x], self.nodes[y]))
            for x, y in itertools.combinations(range(len(self.nodes)), 2)
            if not is_adjacent(self.graph, x, y)
        }

    def _require_graph(self) -> None:
        if self.graph is None:
            raise RuntimeError("Call search or fit first")
