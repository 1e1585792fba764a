"""Unit tests for compute-phase backends."""

from __future__ import annotations

import threading
from unittest.mock import patch

import numpy as np
import pytest
from PIL import Image

from mmf.core import Backend, CpuBackend, GpuBackend, get_backend
from mmf.core.level_builder import build_level
from mmf.exceptions import BackendUnavailableError, OutOfBoundsError
from mmf.geometry import FoveaParameters, Rectangle


class TestGetBackend:
    """Tests for backend selection."""

    def test_cpu_by_enum_and_string(self) -> None:
        assert isinstance(get_backend(Backend.cpu), CpuBackend)
        assert isinstance(get_backend("cpu", max_workers=3), CpuBackend)

    def test_gpu_selection_succeeds(self) -> None:
        assert isinstance(get_backend("gpu"), GpuBackend)

    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ValueError, match="tpu"):
            get_backend("tpu")


class TestCpuBackend:
    """Tests for CpuBackend."""

    def test_rejects_zero_workers(self) -> None:
        with pytest.raises(ValueError, match="max_workers must be >= 1"):
            CpuBackend(max_workers=0)

    @pytest.mark.parametrize("workers", [1, 2, 8])
    def test_levels_returned_in_index_order(
        self,
        noise_image: Image.Image,
        centered_params: FoveaParameters,
        workers: int,
    ) -> None:
        levels = CpuBackend(max_workers=workers).compute(noise_image, centered_params)
        assert [level.index for level in levels] == [0, 1, 2, 3, 4]
        assert [level.image.size for level in levels] == [(128, 128)] * 4 + [
            (512, 512)
        ]

    def test_parallel_matches_sequential(
        self, noise_image: Image.Image, centered_params: FoveaParameters
    ) -> None:
        sequential = CpuBackend(max_workers=1).compute(noise_image, centered_params)
        parallel = CpuBackend(max_workers=4).compute(noise_image, centered_params)
        for a, b in zip(sequential, parallel, strict=True):
            np.testing.assert_array_equal(np.asarray(a.image), np.asarray(b.image))

    def test_uses_worker_threads(
        self, noise_image: Image.Image, centered_params: FoveaParameters
    ) -> None:
        thread_names: list[str] = []

        def recording_build_level(*args, **kwargs):  # type: ignore[no-untyped-def]
            thread_names.append(threading.current_thread().name)
            return build_level(*args, **kwargs)

        with patch("mmf.core.backends.build_level", side_effect=recording_build_level):
            CpuBackend(max_workers=2).compute(noise_image, centered_params)

        assert len(thread_names) == 5
        assert all(name.startswith("mmf-level") for name in thread_names)

    def test_level_error_propagates(
        self, noise_image: Image.Image, centered_params: FoveaParameters
    ) -> None:
        outside = Rectangle(x=900, y=900, width=4, height=4)
        with (
            patch("mmf.core.level_builder.crop_rectangle", return_value=outside),
            pytest.raises(OutOfBoundsError),
        ):
            CpuBackend(max_workers=3).compute(
                noise_image, centered_params, strict=True
            )


class TestGpuBackend:
    """The GPU backend is never available in this build."""

    def test_compute_raises_backend_unavailable(
        self, noise_image: Image.Image, centered_params: FoveaParameters
    ) -> None:
        with pytest.raises(BackendUnavailableError) as exc_info:
            GpuBackend().compute(noise_image, centered_params)
        assert exc_info.value.backend == "gpu"
        assert "unavailable" in str(exc_info.value)
