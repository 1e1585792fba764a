"""Geometry module for MMF.

This package provides coordinate primitives, bounds validation, and the
integer level formulas of rectangular multiresolution foveation.

Key Components:
    - Primitives: Point, Size, Rectangle, Region models
    - Parameters: FoveaParameters and make_parameters
    - Engine: delta, size and map_local_to_image per level
    - Validators: Bounds checking and rectangle clamping

Example:
    from mmf.geometry import make_parameters, crop_rectangle, GeometryValidator

    params = make_parameters(4, (128, 128), (512, 512), (256, 256))
    rect = crop_rectangle(0, params)  # Rectangle(x=192, y=192, ...)
    region = GeometryValidator().clamp(rect, params.image_size)
"""

from mmf.geometry.engine import (
    LevelGeometry,
    crop_rectangle,
    delta,
    destination_rectangle,
    level_geometry,
    map_local_to_image,
    size,
)
from mmf.geometry.parameters import FoveaParameters, make_parameters
from mmf.geometry.primitives import Point, Rectangle, Region, Size
from mmf.geometry.validators import GeometryValidator

__all__ = [
    "FoveaParameters",
    "GeometryValidator",
    "LevelGeometry",
    "Point",
    "Rectangle",
    "Region",
    "Size",
    "crop_rectangle",
    "delta",
    "destination_rectangle",
    "level_geometry",
    "make_parameters",
    "map_local_to_image",
    "size",
]
