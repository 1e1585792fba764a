"""Pillow implementation of the imaging operations."""

from __future__ import annotations

from PIL import Image

from mmf.exceptions import InvalidParameterError, OutOfBoundsError
from mmf.geometry.primitives import Region, Size
from mmf.geometry.validators import GeometryValidator
from mmf.imaging.types import Interpolation


class PillowImageOps:
    """Region extraction, resampling and pasting on PIL images.

    Every operation returns a new image except copy_into, which mutates
    its destination in place. The class holds no state and is safe to
    share across threads as long as no two threads write the same image.

    Example:
        >>> ops = PillowImageOps()
        >>> img = Image.new("RGB", (64, 64))
        >>> ops.extract_region(img, Region(x=8, y=8, width=16, height=16)).size
        (16, 16)
    """

    __slots__ = ("_validator",)

    def __init__(self, validator: GeometryValidator | None = None) -> None:
        self._validator = validator or GeometryValidator()

    def extract_region(self, image: Image.Image, region: Region) -> Image.Image:
        """Return a new image holding the pixels of region.

        Args:
            image: Source image.
            region: Region to read; must lie inside the image.

        Returns:
            Independent image of region.size.

        Raises:
            OutOfBoundsError: If region is not fully inside image.
        """
        self._validator.validate(region, Size.from_tuple(image.size))
        return image.crop(region.to_box())

    def resize(
        self,
        image: Image.Image,
        target: Size | tuple[int, int],
        interpolation: Interpolation = Interpolation.bilinear,
    ) -> Image.Image:
        """Return image resampled to target.

        Resizing to the image's own size returns an unfiltered copy.

        Raises:
            InvalidParameterError: If target has a zero or negative dimension.
        """
        width, height = target.to_tuple() if isinstance(target, Size) else target
        if width <= 0 or height <= 0:
            raise InvalidParameterError(
                "resize target must be positive",
                parameter="target",
                value=(width, height),
            )
        return image.resize((width, height), resample=interpolation.resampling)

    def copy_into(self, dest: Image.Image, region: Region, src: Image.Image) -> None:
        """Overwrite the pixels of dest inside region with src.

        Raises:
            InvalidParameterError: If src size differs from region size.
            OutOfBoundsError: If region is not fully inside dest.
        """
        if src.size != region.size.to_tuple():
            raise InvalidParameterError(
                f"source size {src.size} does not match region size",
                parameter="region",
                value=region.to_tuple(),
            )
        if not self._validator.is_within_bounds(region, Size.from_tuple(dest.size)):
            raise OutOfBoundsError(
                "Destination region outside image",
                rectangle=region.to_tuple(),
                bounds=dest.size,
            )
        if src.mode != dest.mode:
            src = src.convert(dest.mode)
        dest.paste(src, region.to_box())

    def clone(self, image: Image.Image) -> Image.Image:
        """Return an independent copy of image."""
        return image.copy()
