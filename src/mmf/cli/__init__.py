"""CLI module for MMF.

Provides the command-line interface for foveating image files and
printing level geometry.
"""

from __future__ import annotations

from mmf.cli.main import app

__all__ = ["app"]
