"""Custom exceptions for foveation operations.

These exceptions carry the geometric context (level, rectangle, bounds)
that produced the failure so callers can report or recover from it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class FoveationError(Exception):
    """Base exception for all foveation errors."""

    def __init__(self, message: str, *, level: int | None = None) -> None:
        """Initialize foveation error with optional level context.

        Args:
            message: Human-readable error description.
            level: Index of the level being processed, if any.
        """
        self.message = message
        self.level = level
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with level context if available."""
        if self.level is not None:
            return f"{self.message} (level={self.level})"
        return self.message


class InvalidParameterError(FoveationError, ValueError):
    """Raised when foveation parameters are rejected before computation.

    This error is raised when:
    - the level count is negative
    - the window is empty or larger than the image
    - the fovea lies outside the image
    - a resize target has a zero dimension
    - the image size does not match the declared image size
    """

    def __init__(
        self,
        message: str,
        *,
        parameter: str | None = None,
        value: Any = None,
        level: int | None = None,
    ) -> None:
        """Initialize parameter error.

        Args:
            message: Human-readable error description.
            parameter: Name of the offending parameter.
            value: The rejected value.
            level: Index of the level being processed, if any.
        """
        self.parameter = parameter
        self.value = value
        super().__init__(message, level=level)

    def _format_message(self) -> str:
        parts = [self.message]
        if self.parameter is not None:
            parts.append(f"{self.parameter}={self.value!r}")
        if self.level is not None:
            parts.append(f"level={self.level}")

        if len(parts) == 1:
            return parts[0]
        return f"{parts[0]} ({', '.join(parts[1:])})"


class OutOfBoundsError(FoveationError):
    """Raised when a rectangle cannot be brought inside the image.

    Clamping normally recovers formula rectangles that spill over the
    image edge; this error means nothing was left after clamping, or a
    region handed to the imaging layer was not inside the image.
    """

    def __init__(
        self,
        message: str,
        *,
        rectangle: tuple[int, int, int, int],
        bounds: tuple[int, int],
        level: int | None = None,
    ) -> None:
        """Initialize bounds error.

        Args:
            message: Human-readable error description.
            rectangle: (x, y, width, height) of the offending rectangle.
            bounds: (width, height) of the image.
            level: Index of the level being processed, if any.
        """
        self.rectangle = rectangle
        self.bounds = bounds
        super().__init__(message, level=level)

    def _format_message(self) -> str:
        parts = [self.message, f"rectangle={self.rectangle}", f"bounds={self.bounds}"]
        if self.level is not None:
            parts.append(f"level={self.level}")
        return f"{parts[0]} ({', '.join(parts[1:])})"


class BackendUnavailableError(FoveationError):
    """Raised when the requested execution backend cannot run.

    Callers are expected to retry with the CPU backend.
    """

    def __init__(self, backend: str, reason: str) -> None:
        """Initialize backend error.

        Args:
            backend: Name of the requested backend.
            reason: Why the backend cannot be used.
        """
        self.backend = backend
        self.reason = reason
        super().__init__(f"Backend '{backend}' unavailable: {reason}")


class ImageIOError(FoveationError):
    """Raised when an image file cannot be read or written.

    This error is raised when:
    - The file does not exist
    - The file format is not supported by Pillow
    - The output path cannot be written
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        """Initialize I/O error with optional path context.

        Args:
            message: Human-readable error description.
            path: Path to the image file that caused the error.
        """
        self.path = Path(path) if path else None
        super().__init__(message)

    def _format_message(self) -> str:
        if self.path:
            return f"{self.message} (path: {self.path})"
        return self.message
