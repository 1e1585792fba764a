"""Fovea parameters for MMF.

FoveaParameters bundles the four quantities every level formula depends
on: the level count m, the canonical window size w, the image size u and
the fovea position f. Instances are immutable and validated on creation.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, Field, ValidationError, model_validator

from mmf.exceptions import InvalidParameterError
from mmf.geometry.primitives import Point, Size

PointLike = Point | tuple[int, int]
SizeLike = Size | tuple[int, int]


class FoveaParameters(BaseModel, frozen=True):
    """Validated parameters of one foveation.

    Attributes:
        level_count: Number of levels m; the pipeline builds m + 1 levels.
        window_size: Canonical level dimensions w.
        image_size: Source image dimensions u.
        fovea: Fovea position f in absolute image coordinates.
    """

    level_count: int = Field(..., ge=0, description="Number of levels (m)")
    window_size: Size
    image_size: Size
    fovea: Point

    @model_validator(mode="after")
    def _validate_geometry(self) -> Self:
        if not self.window_size.fits_within(self.image_size):
            raise ValueError("window_size must not exceed image_size")
        if not (
            0 <= self.fovea.x <= self.image_size.width
            and 0 <= self.fovea.y <= self.image_size.height
        ):
            raise ValueError("fovea must lie within image_size")
        return self

    @property
    def levels(self) -> range:
        """Level indices from innermost (0) to outermost (m)."""
        return range(self.level_count + 1)

    @property
    def outermost(self) -> int:
        return self.level_count


def _as_point(value: PointLike) -> Point:
    return value if isinstance(value, Point) else Point.from_tuple(value)


def _as_pair(value: SizeLike) -> tuple[int, int]:
    return value.to_tuple() if isinstance(value, Size) else (value[0], value[1])


def make_parameters(
    level_count: int,
    window_size: SizeLike,
    image_size: SizeLike,
    fovea: PointLike,
) -> FoveaParameters:
    """Validate raw values and build FoveaParameters.

    Every check runs before any computation so that a rejected call
    produces no partial output.

    Args:
        level_count: Number of levels m (>= 0).
        window_size: Canonical window size w, positive on both axes.
        image_size: Image size u, positive on both axes.
        fovea: Fovea position f inside [0, u.x] x [0, u.y].

    Returns:
        The validated parameters.

    Raises:
        InvalidParameterError: If any value violates the parameter invariants.
    """
    if level_count < 0:
        raise InvalidParameterError(
            "level count must be non-negative",
            parameter="level_count",
            value=level_count,
        )

    w = _as_pair(window_size)
    u = _as_pair(image_size)
    f = _as_point(fovea).to_tuple()

    if u[0] <= 0 or u[1] <= 0:
        raise InvalidParameterError(
            "image size must be positive", parameter="image_size", value=u
        )
    if w[0] <= 0 or w[1] <= 0:
        raise InvalidParameterError(
            "window size must be positive", parameter="window_size", value=w
        )
    if w[0] > u[0] or w[1] > u[1]:
        raise InvalidParameterError(
            f"window size must not exceed image size {u}",
            parameter="window_size",
            value=w,
        )
    if not (0 <= f[0] <= u[0] and 0 <= f[1] <= u[1]):
        raise InvalidParameterError(
            f"fovea must lie within [0, {u[0]}] x [0, {u[1]}]",
            parameter="fovea",
            value=f,
        )

    try:
        return FoveaParameters(
            level_count=level_count,
            window_size=Size.from_tuple(w),
            image_size=Size.from_tuple(u),
            fovea=Point.from_tuple(f),
        )
    except ValidationError as e:
        raise InvalidParameterError(f"invalid fovea parameters: {e}") from e
