from typing import Hashable, Iterable, Iterator, Sequence


class SeparationSetMapping:
    """
    Separating sets keyed by unordered node pairs.

    Only pairs whose edge was removed carry an entry. Entries are written
    once; recording the same set again is allowed, a different one is not.
    """

    def __init__(self) -> None:
        self._sepsets: dict[frozenset[int], frozenset[int]] = {}

    @staticmethod
    def _key(x: int, y: int) -> frozenset[int]:
        if x == y:
            raise ValueError(f"A separating set needs two distinct nodes, got {x} twice")
        return frozenset((x, y))

    def set(self, x: int, y: int, sepset: Iterable[int]) -> None:
        key = self._key(x, y)
        sepset = frozenset(int(v) for v in sepset)
        if x in sepset or y in sepset:
            raise ValueError(f"Separating set of ({x}, {y}) contains an endpoint")
        existing = self._sepsets.get(key)
        if existing is not None and existing != sepset:
            raise ValueError(
                f"Separating set of ({x}, {y}) already recorded as {sorted(existing)}"
            )
        self._sepsets[key] = sepset

    def get(self, x: int, y: int) -> frozenset[int] | None:
        return self._sepsets.get(self._key(x, y))

    def __getitem__(self, pair: tuple[int, int]) -> frozenset[int]:
        x, y = pair
        sepset = self.get(x, y)
        if sepset is None:
            raise KeyError(pair)
        return sepset

    def __contains__(self, pair: tuple[int, int]) -> bool:
        x, y = pair
        return self._key(x, y) in self._sepsets

    def __len__(self) -> int:
        return len(self._sepsets)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        for key in self._sepsets:
            x, y = sorted(key)
            yield (x, y)

    def items(self) -> Iterator[tuple[tuple[int, int], frozenset[int]]]:
        for pair in self:
            yield pair, self._sepsets[frozenset(pair)]

    def named(self, nodes: Sequence[Hashable]) -> dict[frozenset, frozenset]:
        """
        Translate node indices into variable names.

        Args:
            nodes (Sequence[Hashable]): Variables in node index order.

        Returns:
            dict: Mapping from unordered variable pairs to separating sets of variables.
        """
        return {
            frozenset((nodes[x], nodes[y])): frozenset(nodes[v] for v in sepset)
            for (x, y), sepset in self.items()
        }

    def __repr__(self) -> str:
        return f"SeparationSetMapping({len(self)} pairs)"
