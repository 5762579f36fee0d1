import networkx as nx
import numpy as np
from numpy.typing import NDArray
from collections import deque
from typing import Hashable, Iterable, Sequence


class DSeparationTest:
    """
    Independence oracle that answers from d-separation in a known DAG.

    Attributes:
        dag (nx.DiGraph): The ground truth graph.
        num_queries (int): Number of queries answered so far.
    """

    def __init__(self, dag: nx.DiGraph) -> None:
        if not nx.is_directed_acyclic_graph(dag):
            raise ValueError("The given graph is not a DAG")
        self.dag = dag
        self.num_queries = 0
        self._parents = {node: set(dag.predecessors(node)) for node in dag.nodes}
        self._children = {node: set(dag.successors(node)) for node in dag.nodes}

    @classmethod
    def from_adjacency(
        cls, graph: NDArray, names: Sequence[Hashable] | None = None
    ) -> "DSeparationTest":
        """
        Build the oracle from a matrix where graph[i, j] != 0 means i -> j.

        Args:
            graph (NDArray): Adjacency matrix of the DAG.
            names (Sequence[Hashable] | None): Node names, node indices if omitted.
        """
        n = len(graph)
        names = list(range(n)) if names is None else list(names)
        if len(names) != n:
            raise ValueError(f"Graph has {n} nodes but {len(names)} names were given")
        dag = nx.DiGraph()
        dag.add_nodes_from(names)
        for i, j in zip(*np.nonzero(graph)):
            dag.add_edge(names[i], names[j])
        return cls(dag)

    @classmethod
    def from_edges(
        cls, names: Sequence[Hashable], edges: Iterable[tuple[Hashable, Hashable]]
    ) -> "DSeparationTest":
        dag = nx.DiGraph()
        dag.add_nodes_from(names)
        dag.add_edges_from(edges)
        return cls(dag)

    def variables(self) -> list[Hashable]:
        return list(self.dag.nodes)

    def is_independent(
        self, x: Hashable, y: Hashable, z: Iterable[Hashable] = ()
    ) -> bool:
        self.num_queries += 1
        z = set(z)
        for node in (x, y, *z):
            if node not in self._parents:
                raise KeyError(f"Unknown variable: {node!r}")
        return y not in self._reachable(x, z)

    def _reachable(self, x: Hashable, z: set) -> set:
        # ancestors of the conditioning set open colliders
        ancestors = set()
        to_visit = set(z)
        while to_visit:
            node = to_visit.pop()
            if node not in ancestors:
                ancestors.add(node)
                to_visit.update(self._parents[node])

        # traverse active trails from x
        q = deque([(x, "up")])
        visited = set()
        reachable = set()
        while q:
            node, direction = q.popleft()
            if (node, direction) in visited:
                continue
            visited.add((node, direction))
            if node not in z:
                reachable.add(node)
            if direction == "up" and node not in z:
                q.extend((p, "up") for p in self._parents[node])
                q.extend((c, "down") for c in self._children[node])
            elif direction == "down":
                if node not in z:
                    q.extend((c, "down") for c in self._children[node])
                if node in ancestors:
                    q.extend((p, "up") for p in self._parents[node])
        return reachable

    def __repr__(self) -> str:
        return f"DSeparationTest(nodes={self.dag.number_of_nodes()}, edges={self.dag.number_of_edges()})"
