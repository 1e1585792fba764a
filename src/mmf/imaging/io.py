"""Image loading, saving and conversion.

The foveation core works on PIL images; this module turns files and
numpy arrays into them and writes results back to disk.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image, UnidentifiedImageError

from mmf.exceptions import ImageIOError, InvalidParameterError

ImageInput = Image.Image | npt.NDArray[np.uint8]


def load_image(path: str | Path) -> Image.Image:
    """Load an image file fully into memory.

    Args:
        path: Path to any format Pillow can read.

    Returns:
        The decoded image, detached from the file handle.

    Raises:
        ImageIOError: If the file is missing or cannot be decoded.
    """
    resolved = Path(path).resolve()
    if not resolved.exists():
        raise ImageIOError("File not found", path=resolved)

    try:
        with Image.open(resolved) as img:
            img.load()
            return img.copy()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageIOError(f"Failed to read image: {e}", path=resolved) from e


def save_image(image: Image.Image, path: str | Path) -> Path:
    """Write an image, inferring the format from the file extension.

    Parent directories are created as needed.

    Raises:
        ImageIOError: If Pillow cannot encode or write the file.
    """
    resolved = Path(path).resolve()
    try:
        resolved.parent.mkdir(parents=True, exist_ok=True)
        image.save(resolved)
    except (ValueError, OSError) as e:
        raise ImageIOError(f"Failed to write image: {e}", path=resolved) from e
    return resolved


def as_pil_image(image: ImageInput) -> Image.Image:
    """Return image as a PIL image, converting uint8 arrays.

    Accepts HxW (grayscale), HxWx3 (RGB) and HxWx4 (RGBA) arrays.

    Raises:
        InvalidParameterError: If the array shape or dtype is unsupported.
    """
    if isinstance(image, Image.Image):
        return image

    arr = np.asarray(image)
    if arr.dtype != np.uint8:
        raise InvalidParameterError(
            "image array must be uint8", parameter="dtype", value=str(arr.dtype)
        )
    if arr.ndim == 2 or (arr.ndim == 3 and arr.shape[2] in (3, 4)):
        return Image.fromarray(np.ascontiguousarray(arr))
    raise InvalidParameterError(
        "image array must be HxW, HxWx3 or HxWx4",
        parameter="shape",
        value=arr.shape,
    )
