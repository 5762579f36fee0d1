from typing import Hashable, Iterable, Iterator


class Knowledge:
    """
    Background knowledge about edge directions.

    Directions can be forbidden or required explicitly. Tiers order variables
    so that a variable in a later tier is never a cause of one in an earlier
    tier; optionally edges inside a tier can be forbidden as well.
    """

    def __init__(self) -> None:
        self._forbidden: set[tuple[Hashable, Hashable]] = set()
        self._required: set[tuple[Hashable, Hashable]] = set()
        self._tiers: dict[Hashable, int] = {}
        self._forbidden_within: set[int] = set()

    def set_forbidden(self, x: Hashable, y: Hashable) -> "Knowledge":
        if (x, y) in self._required:
            raise ValueError(f"Edge {x!r} -> {y!r} is already required")
        self._forbidden.add((x, y))
        return self

    def set_required(self, x: Hashable, y: Hashable) -> "Knowledge":
        if x == y:
            raise ValueError(f"Cannot require a self loop on {x!r}")
        if self.is_forbidden(x, y):
            raise ValueError(f"Edge {x!r} -> {y!r} is forbidden")
        if (y, x) in self._required:
            raise ValueError(f"Edge {y!r} -> {x!r} is already required")
        self._required.add((x, y))
        return self

    def add_to_tier(self, tier: int, *variables: Hashable) -> "Knowledge":
        if tier < 0:
            raise ValueError(f"Tier must be >= 0: {tier}")
        for v in variables:
            self._tiers[v] = tier
        return self

    def set_tier_forbidden_within(
        self, tier: int, forbidden: bool = True
    ) -> "Knowledge":
        if forbidden:
            self._forbidden_within.add(tier)
        else:
            self._forbidden_within.discard(tier)
        return self

    def tier_of(self, x: Hashable) -> int | None:
        return self._tiers.get(x)

    def is_forbidden(self, x: Hashable, y: Hashable) -> bool:
        """
        Check whether x -> y is ruled out, explicitly or by tiers.
        """
        if (x, y) in self._forbidden:
            return True
        tx, ty = self.tier_of(x), self.tier_of(y)
        if tx is None or ty is None:
            return False
        return tx > ty or (tx == ty and tx in self._forbidden_within)

    def is_required(self, x: Hashable, y: Hashable) -> bool:
        return (x, y) in self._required

    def is_forbidden_adjacency(self, x: Hashable, y: Hashable) -> bool:
        return self.is_forbidden(x, y) and self.is_forbidden(y, x)

    def is_empty(self) -> bool:
        return not (self._forbidden or self._required or self._tiers)

    def required_edges(self) -> Iterator[tuple[Hashable, Hashable]]:
        yield from sorted(self._required, key=repr)

    @classmethod
    def from_tiers(cls, tiers: Iterable[Iterable[Hashable]]) -> "Knowledge":
        knowledge = cls()
        for tier, variables in enumerate(tiers):
            knowledge.add_to_tier(tier, *variables)
        return knowledge

    def __repr__(self) -> str:
        return (
            f"Knowledge(forbidden={len(self._forbidden)}, "
            f"required={len(self._required)}, tiers={len(set(self._tiers.values()))})"
        )
