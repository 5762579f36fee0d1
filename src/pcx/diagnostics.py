import logging
from dataclasses import dataclass, field
from typing import Hashable, Iterable, Protocol, Sequence

from numpy.typing import NDArray

from pcx.independence.oracle import DSeparationTest
from pcx.utils import graph_to_frame

logger = logging.getLogger(__name__)

Triple = tuple[Hashable, Hashable, Hashable]


@dataclass
class FasStatistics:
    """
    Bookkeeping of the independence tests run by an adjacency search.

    The false judgement counters stay None unless a ground truth oracle is
    attached, and fall back to None if the ground truth cannot answer.
    """

    num_independence_tests: int = 0
    num_independent_judgements: int = 0
    num_dependence_judgements: int = 0
    num_false_dependence_judgements: int | None = None
    num_false_independence_judgements: int | None = None
    ground_truth: DSeparationTest | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.ground_truth is not None:
            self.num_false_dependence_judgements = 0
            self.num_false_independence_judgements = 0

    def record(
        self, x: Hashable, y: Hashable, z: Iterable[Hashable], independent: bool
    ) -> None:
        self.num_independence_tests += 1
        if independent:
            self.num_independent_judgements += 1
        else:
            self.num_dependence_judgements += 1
        if self.ground_truth is None:
            return
        try:
            separated = self.ground_truth.is_independent(x, y, z)
        except KeyError as e:
            logger.warning(
                "Ground truth cannot judge %r and %r (%s), false judgement counts disabled",
                x,
                y,
                e,
            )
            self.disable_ground_truth()
            return
        if separated and not independent:
            self.num_false_dependence_judgements += 1
        elif independent and not separated:
            self.num_false_independence_judgements += 1

    def disable_ground_truth(self) -> None:
        self.ground_truth = None
        self.num_false_dependence_judgements = None
        self.num_false_independence_judgements = None


@dataclass(frozen=True)
class SearchDiagnostics:
    num_independence_tests: int
    num_independent_judgements: int
    num_dependence_judgements: int
    num_false_dependence_judgements: int | None
    num_false_independence_judgements: int | None
    elapsed_time: float
    unshielded_colliders: frozenset[Triple]
    unshielded_noncolliders: frozenset[Triple]
    ambiguous_triples: frozenset[Triple]


class SearchObserver(Protocol):
    def search_started(self, nodes: Sequence[Hashable], indep_tester) -> None: ...

    def depth_started(self, depth: int, num_edges: int) -> None: ...

    def edge_removed(
        self, x: Hashable, y: Hashable, sepset: Iterable[Hashable]
    ) -> None: ...

    def search_finished(
        self, graph: NDArray, nodes: Sequence[Hashable], diagnostics: SearchDiagnostics
    ) -> None: ...


class LoggingObserver:
    """
    Observer reporting search progress through the logging module.

    Attributes:
        verbose (bool): Log depth levels and removed edges at INFO instead of DEBUG.
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose
        self._detail = logging.INFO if verbose else logging.DEBUG

    def search_started(self, nodes: Sequence[Hashable], indep_tester) -> None:
        logger.info("Starting PC algorithm")
        logger.info("Independence test = %s, %d variables", indep_tester, len(nodes))

    def depth_started(self, depth: int, num_edges: int) -> None:
        logger.log(self._detail, "Searching at depth %d, %d edges left", depth, num_edges)

    def edge_removed(
        self, x: Hashable, y: Hashable, sepset: Iterable[Hashable]
    ) -> None:
        logger.log(self._detail, "Independence accepted: %r _||_ %r | %s", x, y, list(sepset))

    def search_finished(
        self, graph: NDArray, nodes: Sequence[Hashable], diagnostics: SearchDiagnostics
    ) -> None:
        if logger.isEnabledFor(self._detail):
            logger.log(self._detail, "Returning this graph:\n%s", graph_to_frame(graph, nodes))
        logger.info(
            "%d independence tests, %d colliders, %d ambiguous triples",
            diagnostics.num_independence_tests,
            len(diagnostics.unshielded_colliders),
            len(diagnostics.ambiguous_triples),
        )
        logger.info("Elapsed time = %.3f s", diagnostics.elapsed_time)
        logger.info("Finishing PC algorithm")
