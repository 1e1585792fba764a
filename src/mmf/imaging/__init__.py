"""Imaging layer for MMF.

This package provides the pixel operations the foveation core consumes
(region extraction, resampling, pasting, cloning) on top of Pillow, plus
helpers for reading and writing image files.

Key Components:
    - ImageOpsProtocol: The four operations the core depends on
    - PillowImageOps: Default Pillow implementation
    - Interpolation: Supported resampling filters
    - load_image / save_image / as_pil_image: File and array conversion

Example:
    from mmf.imaging import PillowImageOps, load_image
    from mmf.geometry import Region

    ops = PillowImageOps()
    img = load_image("photo.png")
    patch = ops.extract_region(img, Region(x=10, y=10, width=64, height=64))
    patch = ops.resize(patch, (128, 128))
"""

from mmf.imaging.io import ImageInput, as_pil_image, load_image, save_image
from mmf.imaging.pillow_ops import PillowImageOps
from mmf.imaging.types import ImageOpsProtocol, Interpolation

__all__ = [
    "ImageInput",
    "ImageOpsProtocol",
    "Interpolation",
    "PillowImageOps",
    "as_pil_image",
    "load_image",
    "save_image",
]
