from pcx.constraint.skeleton import CPUSkeletonLearner
from pcx.independence.fisher import FisherZTest
from pcx.utils import generate_linear_gaussian, pretty_print_graph


def main():
    learner = CPUSkeletonLearner()
    observations, _ = generate_linear_gaussian(1000)
    graph, separation_sets = learner.learn(FisherZTest(observations))
    pretty_print_graph(graph)
    print(separation_sets)


if __name__ == "__main__":
    main()
