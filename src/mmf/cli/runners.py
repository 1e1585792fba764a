"""Runner functions behind the MMF CLI commands.

These keep the typer command functions thin: argument parsing lives in
main.py, the work and its result records live here.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from mmf.core import Backend, FoveationResult, foveate_detailed
from mmf.exceptions import BackendUnavailableError, InvalidParameterError
from mmf.geometry import LevelGeometry, Point, Size, level_geometry, make_parameters
from mmf.imaging import load_image, save_image
from mmf.utils.logging import get_logger, set_correlation_context

_SIZE_RE = re.compile(r"^\s*(\d+)\s*(?:[xX]\s*(\d+))?\s*$")
_POINT_RE = re.compile(r"^\s*(-?\d+)\s*,\s*(-?\d+)\s*$")


@dataclass(frozen=True)
class FoveationRun:
    """Outcome of `mmf foveate`.

    Attributes:
        input_path: Source image path.
        output_path: Written composed image.
        result: The foveation result.
        level_paths: Written level images, if requested.
        fell_back_to_cpu: True if the GPU was requested and the CPU ran.
    """

    input_path: Path
    output_path: Path
    result: FoveationResult
    level_paths: list[Path] = field(default_factory=list)
    fell_back_to_cpu: bool = False

    def to_dict(self) -> dict[str, object]:
        params = self.result.params
        return {
            "input": str(self.input_path),
            "output": str(self.output_path),
            "image_size": list(params.image_size.to_tuple()),
            "window_size": list(params.window_size.to_tuple()),
            "fovea": list(params.fovea.to_tuple()),
            "levels": params.level_count,
            "backend": self.result.backend.value,
            "fell_back_to_cpu": self.fell_back_to_cpu,
            "degraded_levels": list(self.result.degraded_levels),
            "skipped_levels": list(self.result.skipped_levels),
            "level_paths": [str(p) for p in self.level_paths],
        }


def parse_size(value: str) -> Size:
    """Parse "W" or "WxH" into a Size.

    Raises:
        InvalidParameterError: If the text is not a positive size.
    """
    match = _SIZE_RE.match(value)
    if match is None:
        raise InvalidParameterError(
            "expected WIDTHxHEIGHT or a single side", parameter="size", value=value
        )
    width = int(match.group(1))
    height = int(match.group(2)) if match.group(2) is not None else width
    if width <= 0 or height <= 0:
        raise InvalidParameterError(
            "size must be positive", parameter="size", value=value
        )
    return Size(width=width, height=height)


def parse_point(value: str) -> Point:
    """Parse "X,Y" into a Point.

    Raises:
        InvalidParameterError: If the text is not two integers.
    """
    match = _POINT_RE.match(value)
    if match is None:
        raise InvalidParameterError("expected X,Y", parameter="point", value=value)
    return Point(x=int(match.group(1)), y=int(match.group(2)))


def run_foveation(  # noqa: PLR0913
    *,
    input_path: Path,
    output_path: Path,
    levels: int,
    window: Size,
    fovea: Point | None,
    backend: Backend,
    strict: bool,
    fallback_cpu: bool,
    levels_dir: Path | None,
) -> FoveationRun:
    """Load, foveate and save one image.

    Args:
        input_path: Image to read.
        output_path: Where to write the composed image.
        levels: Level count m.
        window: Canonical window size w.
        fovea: Fovea position; defaults to the image centre.
        backend: Compute backend.
        strict: Raise on empty clamped rectangles.
        fallback_cpu: Retry on the CPU if the backend is unavailable.
        levels_dir: If set, every level image is written here.

    Returns:
        FoveationRun describing the outputs.

    Raises:
        FoveationError: On any invalid parameter, bounds or backend failure.
    """
    logger = get_logger(__name__)
    set_correlation_context(run_id=uuid.uuid4().hex[:12], image_id=input_path.name)

    image = load_image(input_path)
    u = Size.from_tuple(image.size)
    f = fovea if fovea is not None else u.center

    fell_back = False
    try:
        result = foveate_detailed(image, levels, window, u, f, backend, strict=strict)
    except BackendUnavailableError as e:
        if not fallback_cpu:
            raise
        logger.warning("Backend unavailable, retrying on CPU", reason=e.reason)
        result = foveate_detailed(
            image, levels, window, u, f, Backend.cpu, strict=strict
        )
        fell_back = True

    written = save_image(result.image, output_path)
    logger.info("Foveated image saved", path=str(written))

    level_paths: list[Path] = []
    if levels_dir is not None:
        suffix = output_path.suffix or ".png"
        for level in result.levels:
            path = save_image(level.image, levels_dir / f"level_{level.index}{suffix}")
            level_paths.append(path)
        logger.info("Level images saved", directory=str(levels_dir))

    return FoveationRun(
        input_path=input_path,
        output_path=written,
        result=result,
        level_paths=level_paths,
        fell_back_to_cpu=fell_back,
    )


def describe_geometry(
    *,
    image_size: Size,
    levels: int,
    window: Size,
    fovea: Point | None,
) -> list[LevelGeometry]:
    """Compute the per-level geometry without touching any pixels."""
    f = fovea if fovea is not None else image_size.center
    params = make_parameters(levels, window, image_size, f)
    return level_geometry(params)


def geometry_to_dict(geometry: LevelGeometry) -> dict[str, object]:
    return {
        "level": geometry.level,
        "delta": list(geometry.delta.to_tuple()),
        "size": list(geometry.size.to_tuple()),
        "destination": list(geometry.destination.to_tuple()),
    }
