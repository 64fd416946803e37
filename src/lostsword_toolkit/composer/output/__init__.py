"""
Module: composer.output

Purpose:
    Raster drawing of roster snapshots.

Key Functions:
    - render_scene(): Draw a snapshot into a RasterSurface
    - required_sources(): Images a render can use
    - wrap_note_text(): Note line layout

Key Classes:
    - RasterSurface: Rendered image with PNG export
    - ScaledCanvas: Logical-coordinate drawing surface
"""

from .drawing import ScaledCanvas
from .renderer import RasterSurface, render_scene, required_sources
from .text import ellipsize, load_font, wrap_note_text

__all__ = [
    "RasterSurface",
    "ScaledCanvas",
    "ellipsize",
    "load_font",
    "render_scene",
    "required_sources",
    "wrap_note_text",
]
