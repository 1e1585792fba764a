"""MMF CLI - rectangular multiresolution foveation.

Command-line interface for foveating image files and inspecting the
level geometry.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from mmf import __version__
from mmf.config import settings
from mmf.core import Backend
from mmf.exceptions import InvalidParameterError
from mmf.utils.logging import configure_logging, get_logger

app = typer.Typer(
    name="mmf",
    help="MMF: rectangular multiresolution foveation",
    add_completion=False,
)

# Exit codes
_EXIT_OK = 0
_EXIT_ERROR = 1
_EXIT_INVALID = 2


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show version information."""
    if json_output:
        typer.echo(json.dumps({"version": __version__}))
    else:
        typer.echo(f"mmf {__version__}")


@app.command()
def foveate(  # noqa: PLR0913
    input_path: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Image to foveate",
        ),
    ],
    output_path: Annotated[
        Path, typer.Argument(help="Where to write the foveated image")
    ],
    levels: Annotated[
        int | None,
        typer.Option("--levels", "-m", help="Number of levels m (default from config)"),
    ] = None,
    window: Annotated[
        str | None,
        typer.Option("--window", "-w", help="Level window size, WxH or a single side"),
    ] = None,
    fovea: Annotated[
        str | None,
        typer.Option("--fovea", "-f", help="Fovea position X,Y (default: centre)"),
    ] = None,
    backend: Annotated[
        Backend, typer.Option("--backend", "-b", help="Compute backend")
    ] = Backend.cpu,
    strict: Annotated[
        bool | None,
        typer.Option(
            "--strict/--permissive",
            help="Fail on empty level rectangles instead of degrading",
        ),
    ] = None,
    fallback_cpu: Annotated[
        bool,
        typer.Option("--fallback-cpu", help="Retry on CPU if the backend is missing"),
    ] = False,
    levels_dir: Annotated[
        Path | None,
        typer.Option("--levels-dir", help="Also write every level image here"),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"
        ),
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Foveate an image file around a point."""
    from mmf.cli.runners import parse_point, parse_size, run_foveation  # noqa: PLC0415

    _configure_logging(verbose)
    logger = get_logger(__name__)

    try:
        run = run_foveation(
            input_path=input_path,
            output_path=output_path,
            levels=settings.DEFAULT_LEVELS if levels is None else levels,
            window=parse_size(window or str(settings.DEFAULT_WINDOW)),
            fovea=parse_point(fovea) if fovea else None,
            backend=backend,
            strict=settings.STRICT if strict is None else strict,
            fallback_cpu=fallback_cpu,
            levels_dir=levels_dir,
        )

        if json_output:
            typer.echo(json.dumps(run.to_dict(), indent=2))
        else:
            params = run.result.params
            typer.echo(f"Foveated image written to {run.output_path}")
            typer.echo(
                f"Levels: {params.level_count + 1}, "
                f"fovea: {params.fovea.x},{params.fovea.y}, "
                f"backend: {run.result.backend.value}"
            )
            if run.result.degraded_levels:
                degraded = ", ".join(map(str, run.result.degraded_levels))
                typer.echo(f"Degraded levels (clamped): {degraded}")
            if run.fell_back_to_cpu:
                typer.echo("Backend unavailable, ran on CPU")

        raise typer.Exit(_EXIT_OK)

    except typer.Exit:
        raise
    except InvalidParameterError as e:
        logger.error("Invalid parameters", error=str(e))
        _echo_error(e, json_output)
        raise typer.Exit(_EXIT_INVALID) from None
    except Exception as e:
        logger.exception("Foveation failed")
        _echo_error(e, json_output)
        raise typer.Exit(_EXIT_ERROR) from None


@app.command()
def geometry(
    image_size: Annotated[
        str, typer.Argument(help="Image size, WxH or a single side")
    ],
    levels: Annotated[
        int | None, typer.Option("--levels", "-m", help="Number of levels m")
    ] = None,
    window: Annotated[
        str | None, typer.Option("--window", "-w", help="Level window size")
    ] = None,
    fovea: Annotated[
        str | None, typer.Option("--fovea", "-f", help="Fovea position X,Y")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Print the crop and destination rectangle of every level."""
    from mmf.cli.runners import (  # noqa: PLC0415
        describe_geometry,
        geometry_to_dict,
        parse_point,
        parse_size,
    )

    try:
        rows = describe_geometry(
            image_size=parse_size(image_size),
            levels=settings.DEFAULT_LEVELS if levels is None else levels,
            window=parse_size(window or str(settings.DEFAULT_WINDOW)),
            fovea=parse_point(fovea) if fovea else None,
        )
    except InvalidParameterError as e:
        _echo_error(e, json_output)
        raise typer.Exit(_EXIT_INVALID) from None

    if json_output:
        typer.echo(json.dumps([geometry_to_dict(row) for row in rows], indent=2))
    else:
        typer.echo(f"{'level':>5}  {'delta':>14}  {'size':>14}  destination")
        for row in rows:
            typer.echo(
                f"{row.level:>5}  {_pair(row.delta.to_tuple()):>14}  "
                f"{_pair(row.size.to_tuple()):>14}  "
                f"{row.destination.to_tuple()}"
            )
    raise typer.Exit(_EXIT_OK)


# =============================================================================
# Helpers
# =============================================================================


def _configure_logging(verbose: int) -> None:
    """Configure logging based on verbosity level."""
    if verbose == 0:
        level = "WARNING"
    elif verbose == 1:
        level = "INFO"
    else:  # verbose >= 2
        level = "DEBUG"

    configure_logging(level=level)


def _echo_error(error: Exception, json_output: bool) -> None:
    if json_output:
        typer.echo(json.dumps({"error": str(error)}))
    else:
        typer.echo(f"Error: {error}", err=True)


def _pair(value: tuple[int, int]) -> str:
    return f"({value[0]}, {value[1]})"


if __name__ == "__main__":
    app()
