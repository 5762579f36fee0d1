from typing import Hashable, Iterable, Protocol, Sequence, runtime_checkable


@runtime_checkable
class IndependenceTest(Protocol):
    """
    What the PC search needs from a conditional independence test.

    Implementations must be deterministic for the same arguments and total
    over the variables they report.
    """

    def variables(self) -> Sequence[Hashable]: ...

    def is_independent(
        self, x: Hashable, y: Hashable, z: Iterable[Hashable] = ()
    ) -> bool: ...
