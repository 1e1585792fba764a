"""Geometry primitives for MMF.

This module provides immutable Pydantic models for representing points,
sizes, and rectangles in absolute image pixel coordinates. All coordinates
follow the convention where (0, 0) is the top-left corner and rectangles
are half-open on their right and bottom edges.

Two rectangle types are used:
    - Rectangle: raw formula output, may extend past (or start before)
      the image edges.
    - Region: a non-empty rectangle that lies inside the image. Produced by
      clamping a Rectangle and consumed by the imaging layer.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, Field


class Point(BaseModel, frozen=True):
    """A 2D integer point.

    Points produced by the geometry formulas may be negative or lie beyond
    the image; they are only brought into range by clamping.

    Attributes:
        x: Horizontal position (pixels from left edge).
        y: Vertical position (pixels from top edge).
    """

    x: int
    y: int

    def to_tuple(self) -> tuple[int, int]:
        """Convert to (x, y) tuple."""
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, coord: tuple[int, int]) -> Self:
        """Create Point from (x, y) tuple."""
        return cls(x=coord[0], y=coord[1])


class Size(BaseModel, frozen=True):
    """A 2D size representing width and height.

    Both dimensions must be strictly positive (> 0).

    Attributes:
        width: Horizontal extent in pixels.
        height: Vertical extent in pixels.
    """

    width: int = Field(..., gt=0, description="Width in pixels")
    height: int = Field(..., gt=0, description="Height in pixels")

    @property
    def center(self) -> Point:
        """Return the midpoint (integer division) as a Point."""
        return Point(x=self.width // 2, y=self.height // 2)

    def to_tuple(self) -> tuple[int, int]:
        """Convert to (width, height) tuple."""
        return (self.width, self.height)

    def to_point(self) -> Point:
        """Return the size as a Point (far corner of a window at the origin)."""
        return Point(x=self.width, y=self.height)

    def fits_within(self, other: Size) -> bool:
        """Check that this size is no larger than other on both axes."""
        return self.width <= other.width and self.height <= other.height

    @classmethod
    def from_tuple(cls, size: tuple[int, int]) -> Self:
        """Create Size from (width, height) tuple."""
        return cls(width=size[0], height=size[1])


class Rectangle(BaseModel, frozen=True):
    """An axis-aligned rectangle that may extend outside the image.

    Attributes:
        x: Left edge X coordinate (may be negative).
        y: Top edge Y coordinate (may be negative).
        width: Horizontal extent in pixels (>= 0).
        height: Vertical extent in pixels (>= 0).
    """

    x: int
    y: int
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)

    @property
    def right(self) -> int:
        """Return the X coordinate of the right edge (exclusive)."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Return the Y coordinate of the bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def to_tuple(self) -> tuple[int, int, int, int]:
        """Convert to (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    @classmethod
    def from_origin_extent(cls, origin: Point, extent: Point) -> Self:
        """Create Rectangle from an origin point and an extent point."""
        return cls(x=origin.x, y=origin.y, width=extent.x, height=extent.y)

    @classmethod
    def from_corners(cls, top_left: Point, bottom_right: Point) -> Self:
        """Create Rectangle from corner points.

        Args:
            top_left: Top-left corner (inclusive).
            bottom_right: Bottom-right corner (exclusive).

        Returns:
            Rectangle spanning the corners. An inverted pair of corners
            yields an empty rectangle at top_left.
        """
        return cls(
            x=top_left.x,
            y=top_left.y,
            width=max(0, bottom_right.x - top_left.x),
            height=max(0, bottom_right.y - top_left.y),
        )


class Region(BaseModel, frozen=True):
    """A non-empty rectangular region inside an image.

    The region is defined as:
    - Top-left: (x, y)
    - Bottom-right: (x + width, y + height) [exclusive]

    Attributes:
        x: Left edge X coordinate (>= 0).
        y: Top edge Y coordinate (>= 0).
        width: Horizontal extent in pixels (> 0).
        height: Vertical extent in pixels (> 0).
    """

    x: int = Field(..., ge=0, description="Left edge X coordinate")
    y: int = Field(..., ge=0, description="Top edge Y coordinate")
    width: int = Field(..., gt=0, description="Width in pixels")
    height: int = Field(..., gt=0, description="Height in pixels")

    @property
    def right(self) -> int:
        """Return the X coordinate of the right edge (exclusive)."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Return the Y coordinate of the bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def size(self) -> Size:
        """Return the dimensions as a Size."""
        return Size(width=self.width, height=self.height)

    def to_tuple(self) -> tuple[int, int, int, int]:
        """Convert to (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    def to_box(self) -> tuple[int, int, int, int]:
        """Convert to a (left, upper, right, lower) box as used by Pillow."""
        return (self.x, self.y, self.right, self.bottom)

    def to_rectangle(self) -> Rectangle:
        return Rectangle(x=self.x, y=self.y, width=self.width, height=self.height)

    @classmethod
    def full(cls, bounds: Size) -> Self:
        """Create the Region covering an entire image of the given size."""
        return cls(x=0, y=0, width=bounds.width, height=bounds.height)
