"""Integration tests for the full foveation pipeline on image files.

These tests run load, foveate and save together, with non-square
images and a fovea away from the centre, and check the composed image
against the level geometry.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from mmf import foveate_detailed
from mmf.geometry import GeometryValidator, destination_rectangle
from mmf.imaging import load_image, save_image

pytestmark = pytest.mark.integration


@pytest.fixture
def gradient_file(tmp_path: Path) -> Path:
    """640x400 RGB gradient written as PNG."""
    xs = np.linspace(0, 255, 640, dtype=np.float64)
    ys = np.linspace(0, 255, 400, dtype=np.float64)
    arr = np.zeros((400, 640, 3), dtype=np.uint8)
    arr[..., 0] = xs[np.newaxis, :].astype(np.uint8)
    arr[..., 1] = ys[:, np.newaxis].astype(np.uint8)
    arr[..., 2] = 128
    path = tmp_path / "gradient.png"
    Image.fromarray(arr).save(path)
    return path


class TestFoveationPipeline:
    """End-to-end runs through files on disk."""

    def test_off_centre_fovea_roundtrip(
        self, gradient_file: Path, tmp_path: Path
    ) -> None:
        image = load_image(gradient_file)
        result = foveate_detailed(
            image, 5, (96, 64), (640, 400), (500, 100), max_workers=3
        )

        out_path = save_image(result.image, tmp_path / "out" / "foveated.png")
        reloaded = load_image(out_path)

        assert reloaded.size == (640, 400)
        np.testing.assert_array_equal(np.asarray(reloaded), np.asarray(result.image))
        assert [level.index for level in result.levels] == [0, 1, 2, 3, 4, 5]
        assert result.levels[-1].image.size == (640, 400)
        assert all(level.image.size == (96, 64) for level in result.levels[:-1])

    def test_innermost_level_lands_on_its_destination(
        self, gradient_file: Path
    ) -> None:
        image = load_image(gradient_file)
        result = foveate_detailed(image, 3, (80, 50), (640, 400), (320, 200))

        region = GeometryValidator().clamp(
            destination_rectangle(0, result.params), result.params.image_size
        )
        patch = np.asarray(result.image.crop(region.to_box()))
        expected = np.asarray(
            result.levels[0].image.resize(
                region.size.to_tuple(), Image.Resampling.BILINEAR
            )
        )
        np.testing.assert_array_equal(patch, expected)

    def test_every_fovea_position_produces_full_image(
        self, gradient_file: Path
    ) -> None:
        image = load_image(gradient_file)
        for fovea in [(0, 0), (640, 400), (0, 400), (640, 0), (320, 0)]:
            result = foveate_detailed(image, 4, (64, 64), (640, 400), fovea)
            assert result.image.size == (640, 400)
            assert result.skipped_levels == ()
