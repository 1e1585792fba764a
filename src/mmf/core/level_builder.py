"""Per-level crop and resample for MMF.

Each level k is built from the source image alone:
    1. Compute the formula crop rectangle (delta(k), size(k)).
    2. Clamp it to the image; a change marks the level degraded.
    3. Extract the clamped region.
    4. Resample it to the canonical window w, except for the outermost
       level, which is returned at full size.

Levels share nothing mutable, so they may be built in any order or
concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import Image

from mmf.exceptions import OutOfBoundsError
from mmf.geometry import (
    FoveaParameters,
    GeometryValidator,
    Rectangle,
    Region,
    crop_rectangle,
)
from mmf.imaging import ImageOpsProtocol, Interpolation, PillowImageOps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuiltLevel:
    """Result of building one level.

    Attributes:
        index: Level index k.
        image: Level content; window-sized for k < m, full size for k = m.
        requested: Crop rectangle given by the formulas (unclamped).
        source_region: Region actually read from the source image.
        degraded: True if clamping changed the requested rectangle.
        fallback: True if clamping left nothing and the whole image was
            used instead (permissive mode only).
    """

    index: int
    image: Image.Image
    requested: Rectangle
    source_region: Region
    degraded: bool = False
    fallback: bool = False


def build_level(
    image: Image.Image,
    k: int,
    params: FoveaParameters,
    *,
    ops: ImageOpsProtocol | None = None,
    strict: bool = False,
    validator: GeometryValidator | None = None,
) -> BuiltLevel:
    """Crop and resample level k of image.

    Args:
        image: Source image of size params.image_size.
        k: Level index in [0, m].
        params: Validated fovea parameters.
        ops: Imaging operations (defaults to PillowImageOps).
        strict: If True, an empty clamped rectangle raises; otherwise the
            level falls back to the whole image.
        validator: Bounds validator (defaults to GeometryValidator).

    Returns:
        The built level.

    Raises:
        OutOfBoundsError: If strict and the clamped rectangle is empty.
        InvalidParameterError: If k is outside [0, m].
    """
    ops = ops or PillowImageOps()
    validator = validator or GeometryValidator()
    bounds = params.image_size

    requested = crop_rectangle(k, params)
    fallback = False
    try:
        region = validator.clamp(requested, bounds, level=k)
    except OutOfBoundsError:
        if strict:
            raise
        logger.warning(
            "Level crop empty after clamping, using whole image",
            extra={"level_index": k, "requested": requested.to_tuple()},
        )
        region = Region.full(bounds)
        fallback = True

    degraded = fallback or region.to_rectangle() != requested
    if degraded and not fallback:
        logger.warning(
            "Level crop clamped to image bounds",
            extra={
                "level_index": k,
                "requested": requested.to_tuple(),
                "clamped": region.to_tuple(),
            },
        )

    level_image = ops.extract_region(image, region)
    if k < params.level_count:
        level_image = ops.resize(
            level_image, params.window_size, Interpolation.bilinear
        )

    logger.debug(
        "Level built",
        extra={
            "level_index": k,
            "region": region.to_tuple(),
            "size": level_image.size,
        },
    )

    return BuiltLevel(
        index=k,
        image=level_image,
        requested=requested,
        source_region=region,
        degraded=degraded,
        fallback=fallback,
    )
