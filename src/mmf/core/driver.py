"""Two-phase MMF driver.

Algorithm:
    1. Validate: parameters are checked against each other and the image
       before any pixel work; a rejected call produces no output.
    2. Compute phase: levels 0..m are built independently on the selected
       backend. Each task reads only the shared, immutable source image
       and parameters and writes its own result slot.
    3. Merge phase: after every level is built, the compositor writes
       levels m-1..0 into a clone of the source, on the calling thread.

Example:
    >>> from PIL import Image
    >>> img = Image.new("RGB", (512, 512))
    >>> out = foveate(img, 4, (128, 128), (512, 512), (256, 256))
    >>> out.size
    (512, 512)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from PIL import Image

from mmf.config import Settings, settings
from mmf.core.backends import Backend, get_backend
from mmf.core.compositor import Compositor
from mmf.core.level_builder import BuiltLevel
from mmf.exceptions import InvalidParameterError
from mmf.geometry import FoveaParameters, Size, make_parameters
from mmf.geometry.parameters import PointLike, SizeLike
from mmf.imaging import ImageInput, ImageOpsProtocol, as_pil_image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FoveationResult:
    """Result of a complete foveation.

    Attributes:
        image: Composed image, same size as the source.
        levels: Built levels, indexed by level.
        params: The validated parameters.
        backend: Backend that ran the compute phase.
        skipped_levels: Levels left out of the merge because their
            destination lay entirely outside the image.
    """

    image: Image.Image
    levels: tuple[BuiltLevel, ...]
    params: FoveaParameters
    backend: Backend
    skipped_levels: tuple[int, ...] = ()

    @property
    def degraded_levels(self) -> tuple[int, ...]:
        """Indices of levels whose crop had to be clamped."""
        return tuple(level.index for level in self.levels if level.degraded)


def _validated(
    image: ImageInput,
    m: int,
    w: SizeLike,
    u: SizeLike,
    f: PointLike,
) -> tuple[Image.Image, FoveaParameters]:
    params = make_parameters(m, w, u, f)
    source = as_pil_image(image)
    if Size.from_tuple(source.size) != params.image_size:
        raise InvalidParameterError(
            f"image is {source.size[0]}x{source.size[1]}, "
            f"expected {params.image_size.width}x{params.image_size.height}",
            parameter="image_size",
            value=params.image_size.to_tuple(),
        )
    return source, params


def _max_workers(
    params: FoveaParameters, max_workers: int | None, config: Settings
) -> int:
    if max_workers is not None:
        return max(1, min(max_workers, params.level_count + 1))
    return config.resolve_max_workers(params.level_count + 1)


def compute_levels(
    image: ImageInput,
    m: int,
    w: SizeLike,
    u: SizeLike,
    f: PointLike,
    *,
    backend: Backend | str = Backend.cpu,
    strict: bool | None = None,
    max_workers: int | None = None,
    ops: ImageOpsProtocol | None = None,
    config: Settings | None = None,
) -> list[Image.Image]:
    """Build the m + 1 level images of image.

    Args:
        image: Source image (PIL image or uint8 array) of size u.
        m: Level count.
        w: Canonical window size.
        u: Image size.
        f: Fovea position.
        backend: Compute backend.
        strict: Raise on empty clamped rectangles; defaults to settings.STRICT.
        max_workers: Thread pool size; defaults to settings.MAX_WORKERS.
        ops: Imaging operations (defaults to PillowImageOps).
        config: Settings to read defaults from (defaults to the global ones).

    Returns:
        Level images indexed by level, innermost first.

    Raises:
        InvalidParameterError: If the parameters or image are invalid.
        OutOfBoundsError: If strict and a level crop is empty.
        BackendUnavailableError: If the backend cannot run.
    """
    config = config or settings
    source, params = _validated(image, m, w, u, f)
    built = _run_compute(source, params, backend, strict, max_workers, ops, config)
    return [level.image for level in built]


def compose(
    image: ImageInput,
    levels: Sequence[Image.Image],
    m: int,
    w: SizeLike,
    u: SizeLike,
    f: PointLike,
    *,
    strict: bool | None = None,
    ops: ImageOpsProtocol | None = None,
    config: Settings | None = None,
) -> Image.Image:
    """Merge level images into one image of the same size as image.

    Levels are written from outermost to innermost so the fovea keeps
    the finest level.

    Raises:
        InvalidParameterError: If the parameters, image or levels are invalid.
        OutOfBoundsError: If strict and a destination is empty.
    """
    config = config or settings
    source, params = _validated(image, m, w, u, f)
    strict = config.STRICT if strict is None else strict
    return Compositor(ops, strict=strict).compose(source, levels, params).image


def foveate_detailed(
    image: ImageInput,
    m: int,
    w: SizeLike,
    u: SizeLike,
    f: PointLike,
    backend: Backend | str = Backend.cpu,
    *,
    strict: bool | None = None,
    max_workers: int | None = None,
    ops: ImageOpsProtocol | None = None,
    config: Settings | None = None,
) -> FoveationResult:
    """Foveate image and return the composed image with its levels.

    See compute_levels for the arguments.

    Raises:
        InvalidParameterError: If the parameters or image are invalid.
        OutOfBoundsError: If strict and a level rectangle is empty.
        BackendUnavailableError: If the backend cannot run.
    """
    config = config or settings
    strict = config.STRICT if strict is None else strict
    source, params = _validated(image, m, w, u, f)
    kind = Backend(backend)

    built = _run_compute(source, params, kind, strict, max_workers, ops, config)
    composed = Compositor(ops, strict=strict).compose(
        source, [level.image for level in built], params
    )

    result = FoveationResult(
        image=composed.image,
        levels=tuple(built),
        params=params,
        backend=kind,
        skipped_levels=composed.skipped_levels,
    )
    logger.info(
        "Foveation complete",
        extra={
            "levels": params.level_count + 1,
            "backend": kind.value,
            "degraded_levels": list(result.degraded_levels),
            "skipped_levels": list(result.skipped_levels),
        },
    )
    return result


def foveate(
    image: ImageInput,
    m: int,
    w: SizeLike,
    u: SizeLike,
    f: PointLike,
    backend: Backend | str = Backend.cpu,
    *,
    strict: bool | None = None,
    max_workers: int | None = None,
    ops: ImageOpsProtocol | None = None,
    config: Settings | None = None,
) -> Image.Image:
    """Foveate image around f and return the composed image.

    Args:
        image: Source image (PIL image or uint8 array) of size u.
        m: Level count (m + 1 levels are built).
        w: Canonical window size.
        u: Image size.
        f: Fovea position.
        backend: Compute backend (CPU or GPU).
        strict: Raise on empty clamped rectangles instead of degrading.
        max_workers: Thread pool size for the CPU backend.
        ops: Imaging operations (defaults to PillowImageOps).
        config: Settings to read defaults from.

    Returns:
        Composed image, same size as image.

    Raises:
        InvalidParameterError: If the parameters or image are invalid.
        OutOfBoundsError: If strict and a level rectangle is empty.
        BackendUnavailableError: If the backend cannot run.
    """
    return foveate_detailed(
        image,
        m,
        w,
        u,
        f,
        backend,
        strict=strict,
        max_workers=max_workers,
        ops=ops,
        config=config,
    ).image


def _run_compute(
    source: Image.Image,
    params: FoveaParameters,
    backend: Backend | str,
    strict: bool | None,
    max_workers: int | None,
    ops: ImageOpsProtocol | None,
    config: Settings,
) -> list[BuiltLevel]:
    strict = config.STRICT if strict is None else strict
    workers = _max_workers(params, max_workers, config)
    runner = get_backend(backend, max_workers=workers)
    return runner.compute(source, params, ops=ops, strict=strict)
