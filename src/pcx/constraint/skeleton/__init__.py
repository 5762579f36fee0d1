from pcx.config import HardwareConfig, ComputeBackend
from .discover_skeleton_cpu import CPUSkeletonLearner
from .discover_skeleton_parallel import ParallelSkeletonLearner


def create_skeleton_learner(
    max_depth: int,
    hardware_config: HardwareConfig | None,
    verbose: bool,
    observer=None,
):
    """
    Create a skeleton learner based on the provided parameters.

    Args:
        max_depth (int): Maximum conditioning set size, -1 for unbounded.
        hardware_config (HardwareConfig | None): Configuration for parallel execution.
        verbose (bool): Whether to output verbose logging.
        observer: Optional observer told about depth levels and removed edges.

    Returns:
        SkeletonLearner: An instance of a skeleton learner.
    """

    if hardware_config is None or hardware_config.compute_backend is ComputeBackend.CPU:
        return CPUSkeletonLearner(max_depth, verbose, observer)
    return ParallelSkeletonLearner(hardware_config, max_depth, verbose, observer)
