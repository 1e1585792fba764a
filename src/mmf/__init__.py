"""MMF: rectangular multiresolution foveation.

Builds nested resolution levels around a fovea point and composes them
into a single image of the source size, finest at the fovea.

Example:
    from PIL import Image
    from mmf import foveate

    img = Image.open("photo.png")
    out = foveate(img, 4, (128, 128), img.size, (img.width // 2, img.height // 2))
"""

from mmf.core import (
    Backend,
    FoveationResult,
    compose,
    compute_levels,
    foveate,
    foveate_detailed,
)
from mmf.exceptions import (
    BackendUnavailableError,
    FoveationError,
    ImageIOError,
    InvalidParameterError,
    OutOfBoundsError,
)
from mmf.geometry import FoveaParameters, Point, Size, make_parameters

__version__ = "0.1.0"

__all__ = [
    "Backend",
    "BackendUnavailableError",
    "FoveaParameters",
    "FoveationError",
    "FoveationResult",
    "ImageIOError",
    "InvalidParameterError",
    "OutOfBoundsError",
    "Point",
    "Size",
    "__version__",
    "compose",
    "compute_levels",
    "foveate",
    "foveate_detailed",
    "make_parameters",
]
