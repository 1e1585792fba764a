"""Core algorithms for MMF.

This package contains the foveation pipeline: per-level crop and
resample, the ordered merge, the compute-phase backends, and the driver
tying them together.

Public API:
    - foveate / foveate_detailed: Validate, compute levels, merge.
    - compute_levels / compose: The two phases on their own.
    - FoveationResult: Composed image plus built levels.
    - build_level / BuiltLevel: Build a single level.
    - Compositor / ComposedImage: Outer-to-inner merge.
    - Backend, CpuBackend, GpuBackend, get_backend: Compute backends.
"""

from mmf.core.backends import (
    Backend,
    CpuBackend,
    GpuBackend,
    LevelBackendProtocol,
    get_backend,
)
from mmf.core.compositor import ComposedImage, Compositor
from mmf.core.driver import (
    FoveationResult,
    compose,
    compute_levels,
    foveate,
    foveate_detailed,
)
from mmf.core.level_builder import BuiltLevel, build_level

__all__ = [
    "Backend",
    "BuiltLevel",
    "ComposedImage",
    "Compositor",
    "CpuBackend",
    "FoveationResult",
    "GpuBackend",
    "LevelBackendProtocol",
    "build_level",
    "compose",
    "compute_levels",
    "foveate",
    "foveate_detailed",
    "get_backend",
]
