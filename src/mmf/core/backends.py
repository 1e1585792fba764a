"""Execution backends for the MMF compute phase.

A backend builds every level of one foveation and returns them indexed
by level. Levels are independent, so the CPU backend fans them out over
a bounded thread pool; each task writes only its own result slot.

The GPU backend keeps the same interface but this build ships no device
kernel, so it always reports BackendUnavailableError and callers fall
back to the CPU.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Protocol

from PIL import Image

from mmf.core.level_builder import BuiltLevel, build_level
from mmf.exceptions import BackendUnavailableError
from mmf.geometry import FoveaParameters
from mmf.imaging import ImageOpsProtocol

logger = logging.getLogger(__name__)


class Backend(str, Enum):
    """Execution backend for the compute phase."""

    cpu = "cpu"  # Thread pool over levels
    gpu = "gpu"  # One device thread per level (not available in this build)


class LevelBackendProtocol(Protocol):
    """Protocol for compute-phase backends."""

    name: str

    def compute(
        self,
        image: Image.Image,
        params: FoveaParameters,
        *,
        ops: ImageOpsProtocol | None = None,
        strict: bool = False,
    ) -> list[BuiltLevel]:
        """Build levels 0..m of image, returned in level order."""
        ...


class CpuBackend:
    """Builds levels concurrently on a bounded thread pool.

    Example:
        >>> backend = CpuBackend(max_workers=4)
        >>> levels = backend.compute(image, params)
        >>> [lvl.index for lvl in levels]
        [0, 1, 2, 3, 4]
    """

    name = Backend.cpu.value

    __slots__ = ("_max_workers",)

    def __init__(self, max_workers: int = 1) -> None:
        """Initialize the backend.

        Args:
            max_workers: Upper bound on concurrent level builds (>= 1).

        Raises:
            ValueError: If max_workers is less than 1.
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._max_workers = max_workers

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def compute(
        self,
        image: Image.Image,
        params: FoveaParameters,
        *,
        ops: ImageOpsProtocol | None = None,
        strict: bool = False,
    ) -> list[BuiltLevel]:
        """Build every level; returns once all of them have finished.

        The first level error, if any, propagates to the caller after the
        pool has shut down.
        """
        levels = list(params.levels)
        n_workers = min(self._max_workers, len(levels))
        logger.debug(
            "Computing levels",
            extra={"levels": len(levels), "workers": n_workers},
        )

        if n_workers == 1:
            return [
                build_level(image, k, params, ops=ops, strict=strict) for k in levels
            ]

        results: list[BuiltLevel | None] = [None] * len(levels)
        with ThreadPoolExecutor(
            max_workers=n_workers, thread_name_prefix="mmf-level"
        ) as executor:
            futures = {
                k: executor.submit(
                    build_level, image, k, params, ops=ops, strict=strict
                )
                for k in levels
            }
            for k, future in futures.items():
                results[k] = future.result()

        return [level for level in results if level is not None]


class GpuBackend:
    """Placeholder for a device backend building one level per thread."""

    name = Backend.gpu.value

    def compute(
        self,
        image: Image.Image,
        params: FoveaParameters,
        *,
        ops: ImageOpsProtocol | None = None,
        strict: bool = False,
    ) -> list[BuiltLevel]:
        """Always raises; retry with the CPU backend.

        Raises:
            BackendUnavailableError: Always.
        """
        del image, params, ops, strict
        raise BackendUnavailableError(
            self.name, "no device kernel is available in this build"
        )


def get_backend(
    backend: Backend | str, *, max_workers: int = 1
) -> LevelBackendProtocol:
    """Return a backend instance for the requested kind.

    Args:
        backend: Backend kind or its string value.
        max_workers: Worker pool size for the CPU backend.

    Returns:
        The backend instance. Selecting the GPU backend succeeds; it fails
        when asked to compute.

    Raises:
        ValueError: If backend is not a known kind.
    """
    kind = Backend(backend)
    if kind is Backend.gpu:
        return GpuBackend()
    return CpuBackend(max_workers=max_workers)
