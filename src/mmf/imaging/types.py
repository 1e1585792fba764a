"""Type definitions for the imaging layer.

The foveation core never touches pixels directly; it goes through the
four operations of ImageOpsProtocol. PillowImageOps is the default
implementation, and tests may inject fakes.
"""

from enum import Enum
from typing import Protocol

from PIL import Image

from mmf.geometry.primitives import Region, Size


class Interpolation(str, Enum):
    """Resampling filters supported by the imaging layer.

    Every level is resampled bilinearly, both into the canonical window
    and back onto its destination.
    """

    bilinear = "bilinear"

    @property
    def resampling(self) -> Image.Resampling:
        """Return the matching Pillow resampling filter."""
        return Image.Resampling[self.name.upper()]


class ImageOpsProtocol(Protocol):
    """Protocol defining the image operations the core consumes.

    This protocol allows for dependency injection and testing with
    mock implementations.
    """

    def extract_region(self, image: Image.Image, region: Region) -> Image.Image:
        """Return a new image holding the pixels of region.

        Raises:
            OutOfBoundsError: If region is not fully inside image.
        """
        ...

    def resize(
        self,
        image: Image.Image,
        target: Size | tuple[int, int],
        interpolation: Interpolation = Interpolation.bilinear,
    ) -> Image.Image:
        """Return image resampled to target.

        Raises:
            InvalidParameterError: If target has a zero dimension.
        """
        ...

    def copy_into(self, dest: Image.Image, region: Region, src: Image.Image) -> None:
        """Overwrite the pixels of dest inside region with src.

        Raises:
            InvalidParameterError: If src size differs from region size.
            OutOfBoundsError: If region is not fully inside dest.
        """
        ...

    def clone(self, image: Image.Image) -> Image.Image:
        """Return an independent copy of image."""
        ...
