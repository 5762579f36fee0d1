import logging

from pcx.config import PCConfig
from pcx.constraint.pc import PCLearner
from pcx.independence.oracle import DSeparationTest
from pcx.knowledge import Knowledge
from pcx.utils import generate_linear_gaussian, pretty_print_graph
import numpy as np


def oracle_example():
    # A -> B <- C -> D
    oracle = DSeparationTest.from_edges(
        ["A", "B", "C", "D"], [("A", "B"), ("C", "B"), ("C", "D")]
    )
    learner = PCLearner(knowledge=Knowledge.from_tiers([["A", "C"], ["B", "D"]]))
    graph = learner.search(oracle)
    pretty_print_graph(graph, learner.nodes)
    print(learner.diagnostics)


def data_example():
    observations, ground_truth = generate_linear_gaussian(1000, np.random.default_rng(0))
    learner = PCLearner(config=PCConfig(verbose=True), true_graph=ground_truth)
    graph = learner.fit(observations)
    pretty_print_graph(graph, ["p", "q", "o", "r", "s"])


def main():
    logging.basicConfig(level=logging.INFO)
    oracle_example()
    data_example()


if __name__ == "__main__":
    main()
