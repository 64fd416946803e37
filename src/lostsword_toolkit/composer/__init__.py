"""
Module: composer

Purpose:
    Roster art composition: template layout, background image loading and
    raster drawing, orchestrated by PreviewSession.

    RosterSnapshot → compute_layout → AssetCache → render_scene → RasterSurface

Key Classes:
    - PreviewSession: Render orchestration
    - AssetCache: Image loading
    - RasterSurface: Rendered output

Key Functions:
    - compute_layout(): Template geometry
    - render_scene(): Draw a snapshot
"""

from .config import (
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_TEMPLATE,
    ENGLISH_LABELS,
    KOREAN_LABELS,
    CacheConfig,
    LabelSet,
    RenderConfig,
    TemplateConfig,
)
from .controller import PreviewSession
from .images import AssetCache, DirectoryImageSource, ImageNotFoundError, ImageSource, LoadBatch
from .layout import HitRegion, LayoutTree, Rect, compute_layout, hit_regions, hit_test
from .output import RasterSurface, render_scene, required_sources

__all__ = [
    # Config
    "DEFAULT_CANVAS_WIDTH",
    "DEFAULT_TEMPLATE",
    "ENGLISH_LABELS",
    "KOREAN_LABELS",
    "CacheConfig",
    "LabelSet",
    "RenderConfig",
    "TemplateConfig",
    # Session
    "PreviewSession",
    # Images
    "AssetCache",
    "DirectoryImageSource",
    "ImageNotFoundError",
    "ImageSource",
    "LoadBatch",
    # Layout
    "HitRegion",
    "LayoutTree",
    "Rect",
    "compute_layout",
    "hit_regions",
    "hit_test",
    # Output
    "RasterSurface",
    "render_scene",
    "required_sources",
]
