from pcx.constraint.skeleton.discover_skeleton_parallel import ParallelSkeletonLearner
from pcx.config import HardwareConfig, ComputeBackend
from pcx.independence.fisher import FisherZTest
from pcx.utils import generate_linear_gaussian, pretty_print_graph


def main():
    hw_config = HardwareConfig(ComputeBackend.MULTICORE)
    learner = ParallelSkeletonLearner(hw_config=hw_config)
    observations, _ = generate_linear_gaussian(1000)
    graph, *_ = learner.learn(FisherZTest(observations))
    pretty_print_graph(graph)
    print(learner.statistics)


if __name__ == "__main__":
    main()
