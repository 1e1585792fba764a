"""MMF level geometry.

Pure integer formulas giving, for level k of m, the crop rectangle read
from the source image and the destination rectangle written into the
composed image.

Notation:
    k: level index, 0 = innermost (fovea), m = outermost (full image)
    j: m - k, the same level counted from the outside in
    w: canonical window size
    u: image size
    f: fovea position; 2F = 2f - u is twice its offset from the centre

Formulas (per axis):
    delta(k) = trunc( j * (u - w + 2F) / (2m) )
    size(k)  = trunc( (m*u + w*j - j*u) / m )
    map(k, p) = trunc( (j*w*(u - w) + 2*j*w*F + 2*p*(m*u - j*u + j*w)) / (2*m*w) )

Division truncates toward zero. This is bit-exact: levels tile without
one-pixel gaps only when every caller rounds the same way, so Python's
floor division is never used on values that can be negative.

With m = 0 there is a single level, evaluated with m treated as 1; it
covers the full image.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from mmf.exceptions import InvalidParameterError
from mmf.geometry.parameters import FoveaParameters
from mmf.geometry.primitives import Point, Rectangle, Size

logger = logging.getLogger(__name__)


class LevelGeometry(NamedTuple):
    """Geometry of one level.

    Attributes:
        level: Level index k.
        delta: Crop origin in the source image (unclamped).
        size: Crop extent in the source image.
        destination: Rectangle the level occupies in the composed image
            (unclamped).
    """

    level: int
    delta: Point
    size: Point
    destination: Rectangle


def _tdiv(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def _effective_m(m: int) -> int:
    return m if m > 0 else 1


def _check_level(k: int, m: int) -> None:
    if not 0 <= k <= m:
        raise InvalidParameterError(
            f"level {k} out of range [0, {m}]", parameter="k", value=k
        )


def _delta_axis(j: int, m: int, w: int, u: int, f: int) -> int:
    return _tdiv(j * (u - w + (2 * f - u)), 2 * m)


def _size_axis(j: int, m: int, w: int, u: int) -> int:
    return _tdiv(m * u + w * j - j * u, m)


def _map_axis(j: int, m: int, w: int, u: int, f: int, p: int) -> int:
    numerator = (
        j * w * (u - w) + j * w * (2 * f - u) + 2 * p * (m * u - j * u + j * w)
    )
    return _tdiv(numerator, 2 * m * w)


def delta(k: int, m: int, w: Size, u: Size, f: Point) -> Point:
    """Compute the crop origin of level k.

    The origin moves toward the fovea as k decreases; the outermost
    level starts at (0, 0).

    Args:
        k: Level index in [0, m].
        m: Level count.
        w: Canonical window size.
        u: Image size.
        f: Fovea position.

    Returns:
        Crop origin, possibly negative when the fovea is near an edge.

    Raises:
        InvalidParameterError: If k is outside [0, m].
    """
    _check_level(k, m)
    j = m - k
    m = _effective_m(m)
    return Point(
        x=_delta_axis(j, m, w.width, u.width, f.x),
        y=_delta_axis(j, m, w.height, u.height, f.y),
    )


def size(k: int, m: int, w: Size, u: Size) -> Point:
    """Compute the crop extent of level k.

    size(0) equals w and size(m) equals u; the extent is non-decreasing
    in k on both axes.

    Raises:
        InvalidParameterError: If k is outside [0, m].
    """
    _check_level(k, m)
    j = m - k
    m = _effective_m(m)
    return Point(
        x=_size_axis(j, m, w.width, u.width),
        y=_size_axis(j, m, w.height, u.height),
    )


def map_local_to_image(
    k: int, m: int, w: Size, u: Size, f: Point, px: Point
) -> Point:
    """Map a point of level k's canonical window into image coordinates.

    Args:
        k: Level index in [0, m].
        m: Level count.
        w: Canonical window size.
        u: Image size.
        f: Fovea position.
        px: Point inside the window, in [0, w.width] x [0, w.height].

    Returns:
        Absolute image coordinates (unclamped).

    Raises:
        InvalidParameterError: If k is outside [0, m].
    """
    _check_level(k, m)
    j = m - k
    m = _effective_m(m)
    return Point(
        x=_map_axis(j, m, w.width, u.width, f.x, px.x),
        y=_map_axis(j, m, w.height, u.height, f.y, px.y),
    )


def crop_rectangle(k: int, params: FoveaParameters) -> Rectangle:
    """Return the unclamped source rectangle read for level k."""
    m, w, u, f = _unpack(params)
    return Rectangle.from_origin_extent(delta(k, m, w, u, f), size(k, m, w, u))


def destination_rectangle(k: int, params: FoveaParameters) -> Rectangle:
    """Return the unclamped rectangle level k occupies in the composed image.

    The rectangle spans map_local_to_image(k, (0, 0)) to
    map_local_to_image(k, w).
    """
    m, w, u, f = _unpack(params)
    initial = map_local_to_image(k, m, w, u, f, Point(x=0, y=0))
    final = map_local_to_image(k, m, w, u, f, w.to_point())
    return Rectangle.from_corners(initial, final)


def level_geometry(params: FoveaParameters) -> list[LevelGeometry]:
    """Compute the geometry of every level, innermost first."""
    m, w, u, f = _unpack(params)
    result: list[LevelGeometry] = []
    for k in params.levels:
        geometry = LevelGeometry(
            level=k,
            delta=delta(k, m, w, u, f),
            size=size(k, m, w, u),
            destination=destination_rectangle(k, params),
        )
        logger.debug(
            "Level geometry",
            extra={
                "level_index": k,
                "delta": geometry.delta.to_tuple(),
                "size": geometry.size.to_tuple(),
                "destination": geometry.destination.to_tuple(),
            },
        )
        result.append(geometry)
    return result


def _unpack(params: FoveaParameters) -> tuple[int, Size, Size, Point]:
    return params.level_count, params.window_size, params.image_size, params.fovea
