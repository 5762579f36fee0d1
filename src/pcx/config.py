from enum import Enum, auto
from dataclasses import dataclass, field
import os

MAX_DEPTH = 1000


class ConfigurationError(ValueError):
    pass


class ComputeBackend(Enum):
    CPU = auto()
    MULTICORE = auto()
    MULTITHREAD = auto()


@dataclass(frozen=True)
class HardwareConfig:
    compute_backend: ComputeBackend
    max_workers: int = field(default_factory=lambda: os.cpu_count())

    def __post_init__(self) -> None:
        if self.max_workers is None or self.max_workers < 1:
            raise ConfigurationError(
                f"max_workers must be a positive integer: {self.max_workers}"
            )


@dataclass(frozen=True)
class PCConfig:
    """
    Search parameters for the PC learner.

    Attributes:
        depth (int): Largest conditioning set size tried by the adjacency search, -1 for unbounded.
        aggressively_prevent_cycles (bool): Also veto colliders that would close a directed cycle.
        undirect_unforced_edges (bool): Turn undetermined (bidirected) edges into undirected ones before Meek propagation.
        verbose (bool): Flag indicating whether to display verbose output.
    """

    depth: int = -1
    aggressively_prevent_cycles: bool = False
    undirect_unforced_edges: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        validate_depth(self.depth)


def validate_depth(depth: int) -> int:
    """
    Check that a depth lies in [-1, MAX_DEPTH].

    Raises:
        ConfigurationError: If the depth is not an integer or is out of range.
    """
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise ConfigurationError(f"Depth must be an integer: {depth!r}")
    if depth < -1:
        raise ConfigurationError(f"Depth must be -1 or >= 0: {depth}")
    if depth > MAX_DEPTH:
        raise ConfigurationError(f"Depth must be <= {MAX_DEPTH}: {depth}")
    return depth
