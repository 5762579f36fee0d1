import numpy as np
from numpy.typing import NDArray
import math
from scipy.stats import norm
from typing import Hashable, Iterable, Sequence


class FisherZTest:
    """
    Partial correlation test for linear Gaussian data.

    Attributes:
        corr_matrix (NDArray): Correlation matrix of the observations.
        alpha (float): The significance level for conditional independence tests.
        size (int): Number of samples.
    """

    def __init__(
        self,
        observations: NDArray,
        alpha: float = 0.05,
        names: Sequence[Hashable] | None = None,
    ) -> None:
        _, no_variables = observations.shape
        if names is None:
            names = list(range(no_variables))
        if len(names) != no_variables:
            raise ValueError(
                f"Observations have {no_variables} columns but {len(names)} names were given"
            )
        self.corr_matrix = np.corrcoef(observations.T)
        self.alpha = alpha
        self.size = observations.shape[0]
        self._names = list(names)
        self._index = {name: i for i, name in enumerate(self._names)}

    def variables(self) -> list[Hashable]:
        return list(self._names)

    def p_value(self, x: Hashable, y: Hashable, z: Iterable[Hashable] = ()) -> float:
        z = list(z)
        var = [self._index[v] for v in [x, y, *z]]
        sub_corr_matrix = self.corr_matrix[np.ix_(var, var)]
        inv = np.linalg.pinv(sub_corr_matrix)
        r = -inv[0, 1] / math.sqrt(abs(inv[0, 0] * inv[1, 1]))
        if abs(r) >= 1:
            r = (1.0 - np.finfo(float).eps) * np.sign(r)
        Z = 0.5 * math.log((1 + r) / (1 - r))
        X = math.sqrt(self.size - len(z) - 3) * abs(Z)
        return 2 * (1 - norm.cdf(abs(X)))

    def is_independent(
        self, x: Hashable, y: Hashable, z: Iterable[Hashable] = ()
    ) -> bool:
        return self.p_value(x, y, z) > self.alpha

    def __repr__(self) -> str:
        return f"FisherZTest(alpha={self.alpha}, samples={self.size})"
