"""Bounds validation for MMF rectangles.

The level formulas can produce rectangles that spill over the image edge
when the fovea sits near a border. This module checks rectangles against
the image bounds and clamps them back inside.
"""

from __future__ import annotations

from mmf.exceptions import OutOfBoundsError
from mmf.geometry.primitives import Rectangle, Region, Size


class GeometryValidator:
    """Validator for rectangles against image bounds.

    The validator is stateless and operates purely on the inputs provided
    to each method.
    """

    def validate(
        self,
        rectangle: Rectangle | Region,
        bounds: Size,
        *,
        strict: bool = True,
    ) -> bool:
        """Validate that a rectangle is non-empty and within bounds.

        Args:
            rectangle: The rectangle to validate.
            bounds: The image dimensions.
            strict: If True, raise OutOfBoundsError on failure.
                If False, return False instead.

        Returns:
            True if the rectangle is valid within bounds.

        Raises:
            OutOfBoundsError: If strict=True and the rectangle is invalid.
        """
        violations: list[str] = []
        if rectangle.x < 0:
            violations.append(f"left edge ({rectangle.x}) is negative")
        if rectangle.y < 0:
            violations.append(f"top edge ({rectangle.y}) is negative")
        if rectangle.right > bounds.width:
            violations.append(
                f"right edge ({rectangle.right}) exceeds width ({bounds.width})"
            )
        if rectangle.bottom > bounds.height:
            violations.append(
                f"bottom edge ({rectangle.bottom}) exceeds height ({bounds.height})"
            )
        if rectangle.width <= 0 or rectangle.height <= 0:
            violations.append("rectangle is empty")

        if violations and strict:
            raise OutOfBoundsError(
                f"Rectangle out of bounds: {'; '.join(violations)}",
                rectangle=rectangle.to_tuple(),
                bounds=bounds.to_tuple(),
            )

        return not violations

    def clamp(
        self,
        rectangle: Rectangle,
        bounds: Size,
        *,
        level: int | None = None,
        min_size: int = 0,
    ) -> Region:
        """Clamp a rectangle to the image bounds.

        The result is the intersection of the rectangle with
        [0, bounds.width) x [0, bounds.height). A rectangle that has
        collapsed to less than min_size on an axis is instead widened to
        min_size pixels on that axis, anchored inside the image at its
        clamped origin. An empty intersection is otherwise an error.

        Args:
            rectangle: The rectangle to clamp.
            bounds: The image dimensions.
            level: Level index for error context.
            min_size: Extent given to an axis on which the rectangle has
                collapsed. 0 keeps the plain intersection.

        Returns:
            The clamped Region.

        Raises:
            OutOfBoundsError: If nothing of the rectangle lies inside bounds.

        Example:
            >>> validator = GeometryValidator()
            >>> bounds = Size(width=100, height=100)
            >>> validator.clamp(Rectangle(x=-10, y=90, width=40, height=40), bounds)
            Region(x=0, y=90, width=30, height=10)
            >>> validator.clamp(Rectangle(x=0, y=0, width=0, height=0), bounds,
            ...                 min_size=1)
            Region(x=0, y=0, width=1, height=1)
        """
        left, right = _clamp_axis(rectangle.x, rectangle.width, bounds.width, min_size)
        top, bottom = _clamp_axis(
            rectangle.y, rectangle.height, bounds.height, min_size
        )

        if right <= left or bottom <= top:
            raise OutOfBoundsError(
                "Rectangle is empty after clamping",
                rectangle=rectangle.to_tuple(),
                bounds=bounds.to_tuple(),
                level=level,
            )

        return Region(x=left, y=top, width=right - left, height=bottom - top)

    def is_within_bounds(self, rectangle: Rectangle | Region, bounds: Size) -> bool:
        """Check if rectangle is within bounds without raising."""
        return self.validate(rectangle, bounds, strict=False)


def _clamp_axis(start: int, extent: int, limit: int, min_size: int) -> tuple[int, int]:
    low = max(0, start)
    high = min(limit, start + extent)
    if extent < min_size:
        # Collapsed by integer truncation: keep min_size pixels at the origin.
        low = max(0, min(start, limit - min_size))
        high = min(limit, low + min_size)
    return low, high
