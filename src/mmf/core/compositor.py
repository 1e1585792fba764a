"""Ordered merge of MMF levels into one image.

The composed image starts as a copy of the source, which already equals
the outermost level m. Levels m-1 down to 0 are then resampled to their
destination rectangles and pasted over it. Writing strictly from outer
to inner means the finest level, at the fovea, is written last and is
never covered by a coarser one.

A destination that integer truncation collapses to zero width or height
is kept as a one pixel patch at the clamped origin, so corner foveae with
a tiny window still write every level.

Merge Order:
    Destination rectangles are nested, R(k) inside R(k+1). Pasting in
    ascending k order would let level m-1 overwrite the magnified centre,
    so the order here is fixed and not configurable.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from PIL import Image

from mmf.exceptions import InvalidParameterError, OutOfBoundsError
from mmf.geometry import (
    FoveaParameters,
    GeometryValidator,
    Region,
    Size,
    destination_rectangle,
)
from mmf.imaging import ImageOpsProtocol, Interpolation, PillowImageOps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComposedImage:
    """Result of merging levels.

    Attributes:
        image: Composed image, same size as the source.
        destinations: Clamped destination region per written level, keyed
            by level index.
        skipped_levels: Levels whose destination missed the image entirely
            (permissive mode only).
    """

    image: Image.Image
    destinations: dict[int, Region] = field(default_factory=dict)
    skipped_levels: tuple[int, ...] = ()


class Compositor:
    """Merges built levels into a single foveated image.

    The compositor is the single owner of the output buffer: it clones
    the source once and performs every write itself, on the calling
    thread, in outer-to-inner order.

    Example:
        >>> compositor = Compositor()
        >>> result = compositor.compose(source, levels, params)
        >>> result.image.size == source.size
        True
    """

    __slots__ = ("_ops", "_strict", "_validator")

    def __init__(
        self,
        ops: ImageOpsProtocol | None = None,
        *,
        strict: bool = False,
        validator: GeometryValidator | None = None,
    ) -> None:
        """Initialize the compositor.

        Args:
            ops: Imaging operations (defaults to PillowImageOps).
            strict: If True, a destination outside the image raises
                OutOfBoundsError; otherwise that level is skipped.
            validator: Bounds validator (defaults to GeometryValidator).
        """
        self._ops = ops or PillowImageOps()
        self._strict = strict
        self._validator = validator or GeometryValidator()

    def compose(
        self,
        source: Image.Image,
        levels: Sequence[Image.Image],
        params: FoveaParameters,
    ) -> ComposedImage:
        """Merge levels[0..m] into an image the size of source.

        Args:
            source: The unmodified source image.
            levels: Level images indexed by level, innermost first.
            params: The parameters the levels were built with.

        Returns:
            ComposedImage with the merged image and per-level placement.

        Raises:
            InvalidParameterError: If source or levels do not match params.
            OutOfBoundsError: If strict and a destination misses the image.
        """
        self._check_inputs(source, levels, params)

        output = self._ops.clone(source)
        bounds = params.image_size
        destinations: dict[int, Region] = {}
        skipped: list[int] = []

        for k in range(params.level_count - 1, -1, -1):
            target = destination_rectangle(k, params)
            try:
                region = self._validator.clamp(target, bounds, level=k, min_size=1)
            except OutOfBoundsError:
                if self._strict:
                    raise
                logger.warning(
                    "Level destination outside image, skipping",
                    extra={"level_index": k, "destination": target.to_tuple()},
                )
                skipped.append(k)
                continue

            if region.to_rectangle() != target:
                logger.warning(
                    "Level destination clamped to image bounds",
                    extra={
                        "level_index": k,
                        "destination": target.to_tuple(),
                        "clamped": region.to_tuple(),
                    },
                )

            patch = self._ops.resize(levels[k], region.size, Interpolation.bilinear)
            self._ops.copy_into(output, region, patch)
            destinations[k] = region

        return ComposedImage(
            image=output,
            destinations=destinations,
            skipped_levels=tuple(skipped),
        )

    @staticmethod
    def _check_inputs(
        source: Image.Image,
        levels: Sequence[Image.Image],
        params: FoveaParameters,
    ) -> None:
        if Size.from_tuple(source.size) != params.image_size:
            raise InvalidParameterError(
                f"source size must equal image_size {params.image_size.to_tuple()}",
                parameter="source.size",
                value=source.size,
            )
        expected_count = params.level_count + 1
        if len(levels) != expected_count:
            raise InvalidParameterError(
                f"expected {expected_count} levels",
                parameter="levels",
                value=len(levels),
            )
        for k, level in enumerate(levels):
            expected = (
                params.image_size
                if k == params.level_count
                else params.window_size
            )
            if level.size != expected.to_tuple():
                raise InvalidParameterError(
                    f"level image must be {expected.to_tuple()}",
                    parameter="levels[k].size",
                    value=level.size,
                    level=k,
                )


def compose(
    source: Image.Image,
    levels: Sequence[Image.Image],
    params: FoveaParameters,
    *,
    ops: ImageOpsProtocol | None = None,
    strict: bool = False,
) -> Image.Image:
    """Merge levels into one image; see Compositor.compose."""
    return Compositor(ops, strict=strict).compose(source, levels, params).image
