from numpy.typing import NDArray
import numpy as np
import pandas as pd
from typing import Hashable, Sequence
from pcx.graph.graph_utils import create_empty_graph, is_adjacent, is_parent
from pcx.graph.graph_utils import is_bidirected, is_undirected


def generate_linear_gaussian(
    n_samples: int, rng: np.random.Generator | None = None
) -> tuple[NDArray, NDArray]:
    """
    Sample p -> o, p -> r <- q, r -> s with Gaussian noise.

    Returns:
        tuple[NDArray, NDArray]: Observations (n_samples x 5) and the generating DAG.
    """
    rng = np.random.default_rng() if rng is None else rng
    p = rng.standard_normal(n_samples)
    q = rng.standard_normal(n_samples)
    o = (1 * p) + rng.standard_normal(n_samples)
    r = p + q + 0.1 * rng.standard_normal(n_samples)
    s = 0.7 * r + 0.1 * rng.standard_normal(n_samples)

    ground_truth = create_empty_graph(5)
    ground_truth[0, 2] = 1
    ground_truth[0, 3] = 1
    ground_truth[1, 3] = 1
    ground_truth[3, 4] = 1

    return np.vstack([p, q, o, r, s]).T, ground_truth


def _edge_symbol(graph: NDArray, x: int, y: int) -> str:
    if not is_adjacent(graph, x, y):
        return ""
    if is_undirected(graph, x, y):
        return "---"
    if is_bidirected(graph, x, y):
        return "<->"
    if is_parent(graph, x, y):
        return "-->"
    return "<--"


def graph_to_frame(graph: NDArray, nodes: Sequence[Hashable] | None = None) -> pd.DataFrame:
    """
    Tabulate the edge marks of a graph, reading row -> column.

    Args:
        graph (NDArray): Graph representation.
        nodes (Sequence[Hashable] | None): Node labels, node indices if omitted.

    Returns:
        pd.DataFrame: Square frame with "-->", "<--", "---", "<->" or "" per cell.
    """
    n = len(graph)
    labels = list(range(n)) if nodes is None else list(nodes)
    df = pd.DataFrame(
        [[_edge_symbol(graph, x, y) for y in range(n)] for x in range(n)],
    )
    df.index = labels
    df.columns = labels
    return df


def pretty_print_graph(graph: NDArray, nodes: Sequence[Hashable] | None = None) -> None:
    print(graph_to_frame(graph, nodes))
