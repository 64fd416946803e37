"""
Module: gui

Purpose:
    PySide6 widgets for the roster editor.

Key Classes:
    - PreviewCanvas: Live preview with click-to-pick regions
"""

from .preview_widget import PreviewCanvas

__all__ = ["PreviewCanvas"]
