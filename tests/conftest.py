"""Shared pytest fixtures and configuration."""

import logging
from collections.abc import Callable, Iterator

import numpy as np
import pytest
from PIL import Image

from mmf.config import Settings
from mmf.geometry import FoveaParameters, make_parameters
from mmf.utils.logging import clear_correlation_context, configure_logging


@pytest.fixture(autouse=True)
def reset_logging_context() -> Iterator[None]:
    """Reset correlation context between tests."""
    clear_correlation_context()
    yield
    clear_correlation_context()


@pytest.fixture(autouse=True)
def reset_root_handlers() -> Iterator[None]:
    """Drop handlers bound to streams captured by a previous test."""
    yield
    logging.getLogger().handlers.clear()


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-safe defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
        MAX_WORKERS=2,
        STRICT=False,
    )


@pytest.fixture
def configure_test_logging() -> Iterator[None]:
    """Configure logging for tests with console output."""
    configure_logging(level="DEBUG", log_format="console")
    yield


def _noise_image(width: int, height: int, seed: int = 0) -> Image.Image:
    rng = np.random.default_rng(seed)
    arr = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    return Image.fromarray(arr)


@pytest.fixture
def make_noise_image() -> Callable[..., Image.Image]:
    """Factory for deterministic RGB noise images of any size."""
    return _noise_image


@pytest.fixture
def noise_image() -> Image.Image:
    """512x512 deterministic noise image."""
    return _noise_image(512, 512)


@pytest.fixture
def centered_params() -> FoveaParameters:
    """Reference configuration: 512x512 image, 128 window, 4 levels, centred."""
    return make_parameters(4, (128, 128), (512, 512), (256, 256))
