"""Unit tests for per-level crop and resample.

Tests build_level including:
- Window-sized output for inner levels, full size for the outermost
- Clamping near image edges (degraded levels)
- Empty crops: strict raises, permissive falls back to the whole image
- Dependency injection of the imaging operations
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import numpy as np
import pytest
from PIL import Image

from mmf.core import BuiltLevel, build_level
from mmf.exceptions import InvalidParameterError, OutOfBoundsError
from mmf.geometry import FoveaParameters, Rectangle, Region, make_parameters
from mmf.imaging import Interpolation, PillowImageOps


class TestBuildLevelCentred:
    """Centred fovea on the 512x512 reference image."""

    @pytest.mark.parametrize("k", [0, 1, 2, 3])
    def test_inner_levels_are_window_sized(
        self, noise_image: Image.Image, centered_params: FoveaParameters, k: int
    ) -> None:
        level = build_level(noise_image, k, centered_params)
        assert isinstance(level, BuiltLevel)
        assert level.index == k
        assert level.image.size == (128, 128)
        assert not level.degraded
        assert not level.fallback

    def test_outermost_level_is_full_size(
        self, noise_image: Image.Image, centered_params: FoveaParameters
    ) -> None:
        level = build_level(noise_image, 4, centered_params)
        assert level.image.size == (512, 512)
        np.testing.assert_array_equal(
            np.asarray(level.image), np.asarray(noise_image)
        )

    def test_innermost_level_is_exact_centre_crop(
        self, noise_image: Image.Image, centered_params: FoveaParameters
    ) -> None:
        level = build_level(noise_image, 0, centered_params)
        assert level.source_region == Region(x=192, y=192, width=128, height=128)
        np.testing.assert_array_equal(
            np.asarray(level.image), np.asarray(noise_image)[192:320, 192:320]
        )

    def test_source_is_not_modified(
        self, noise_image: Image.Image, centered_params: FoveaParameters
    ) -> None:
        before = np.asarray(noise_image).copy()
        build_level(noise_image, 1, centered_params)
        np.testing.assert_array_equal(np.asarray(noise_image), before)


class TestBuildLevelClamped:
    """Fovea at a corner: crops spill past the image and are clamped."""

    def test_corner_levels_are_degraded(self, noise_image: Image.Image) -> None:
        params = make_parameters(4, (128, 128), (512, 512), (0, 0))
        level = build_level(noise_image, 0, params)

        assert level.requested == Rectangle(x=-64, y=-64, width=128, height=128)
        assert level.source_region == Region(x=0, y=0, width=64, height=64)
        assert level.degraded
        assert not level.fallback
        assert level.image.size == (128, 128)

    def test_outermost_level_never_degraded(self, noise_image: Image.Image) -> None:
        params = make_parameters(4, (128, 128), (512, 512), (0, 0))
        assert not build_level(noise_image, 4, params).degraded


class TestBuildLevelEmptyCrop:
    """A crop that misses the image entirely."""

    _OUTSIDE = Rectangle(x=600, y=600, width=10, height=10)

    def test_strict_raises(
        self, noise_image: Image.Image, centered_params: FoveaParameters
    ) -> None:
        with patch("mmf.core.level_builder.crop_rectangle", return_value=self._OUTSIDE):
            with pytest.raises(OutOfBoundsError) as exc_info:
                build_level(noise_image, 2, centered_params, strict=True)
        assert exc_info.value.level == 2

    def test_permissive_uses_whole_image(
        self, noise_image: Image.Image, centered_params: FoveaParameters
    ) -> None:
        with patch("mmf.core.level_builder.crop_rectangle", return_value=self._OUTSIDE):
            level = build_level(noise_image, 2, centered_params)

        assert level.fallback
        assert level.degraded
        assert level.source_region == Region.full(centered_params.image_size)
        assert level.image.size == (128, 128)


class TestBuildLevelDependencyInjection:
    """The imaging operations are injectable."""

    def test_uses_injected_ops(
        self, noise_image: Image.Image, centered_params: FoveaParameters
    ) -> None:
        ops = MagicMock(wraps=PillowImageOps())
        build_level(noise_image, 1, centered_params, ops=ops)

        ops.extract_region.assert_called_once_with(
            noise_image, Region(x=144, y=144, width=224, height=224)
        )
        ops.resize.assert_called_once()
        _, target, interpolation = ops.resize.call_args.args
        assert target == centered_params.window_size
        assert interpolation is Interpolation.bilinear

    def test_outermost_level_is_not_resampled(
        self, noise_image: Image.Image, centered_params: FoveaParameters
    ) -> None:
        ops = MagicMock(wraps=PillowImageOps())
        build_level(noise_image, 4, centered_params, ops=ops)
        ops.resize.assert_not_called()

    def test_invalid_level_index(
        self, noise_image: Image.Image, centered_params: FoveaParameters
    ) -> None:
        with pytest.raises(InvalidParameterError, match="out of range") as exc_info:
            build_level(noise_image, 5, centered_params)
        assert exc_info.value.parameter == "k"
        assert exc_info.value.value == 5
