"""
Module: composer.output.drawing

Purpose:
    Drawing primitives over a Pillow RGBA image that take logical
    coordinates. ScaledCanvas owns the device-pixel scale: every rect,
    stroke width, radius and font size passes through it exactly once, so
    callers never multiply by the scale themselves.

Key Classes:
    - ScaledCanvas: Logical-coordinate drawing surface

Dependencies:
    - PIL: Image, ImageDraw, ImageChops, ImageOps
    - composer.output.text: Font loading and ellipsizing

Used By:
    - composer.output.renderer: All scene drawing
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageChops, ImageDraw, ImageOps

from ..config import Color
from ..layout.models import Rect
from .text import ellipsize, load_font

logger = logging.getLogger(__name__)

Box = Tuple[int, int, int, int]


class ScaledCanvas:
    """
    RGBA drawing surface addressed in logical pixels.

    Attributes:
        image: Underlying device-pixel image
        scale: Device pixels per logical pixel

    Example:
        >>> canvas = ScaledCanvas(100, 50, 2.0, (0, 0, 0, 255))
        >>> canvas.image.size
        (200, 100)
    """

    def __init__(
        self,
        width: float,
        height: float,
        scale: float,
        background: Color,
        font_path: Optional[Path] = None,
    ) -> None:
        self.scale = scale
        self.image = Image.new(
            "RGBA",
            (max(1, round(width * scale)), max(1, round(height * scale))),
            background,
        )
        self._draw = ImageDraw.Draw(self.image, "RGBA")
        self._font_path = font_path

    # ─────────────────────────────────────────────────────────────────────
    # Coordinate mapping
    # ─────────────────────────────────────────────────────────────────────

    def box(self, rect: Rect) -> Box:
        """Device-pixel (x0, y0, x1, y1) for ``rect``; x1/y1 inclusive as Pillow expects."""
        s = self.scale
        x0, y0 = round(rect.x * s), round(rect.y * s)
        x1 = max(x0, round(rect.right * s) - 1)
        y1 = max(y0, round(rect.bottom * s) - 1)
        return x0, y0, x1, y1

    def size_of(self, rect: Rect) -> Tuple[int, int]:
        """Device-pixel (width, height) covered by ``rect``."""
        x0, y0, x1, y1 = self.box(rect)
        return x1 - x0 + 1, y1 - y0 + 1

    def _px(self, value: float) -> int:
        return max(1, round(value * self.scale))

    # ─────────────────────────────────────────────────────────────────────
    # Shapes
    # ─────────────────────────────────────────────────────────────────────

    def rounded_rect(
        self,
        rect: Rect,
        radius: float,
        *,
        fill: Optional[Color] = None,
        outline: Optional[Color] = None,
        width: float = 1,
    ) -> None:
        """Filled and/or stroked rounded rectangle."""
        self._draw.rounded_rectangle(
            self.box(rect),
            radius=radius * self.scale,
            fill=fill,
            outline=outline,
            width=self._px(width),
        )

    def dashed_rect(
        self,
        rect: Rect,
        color: Color,
        *,
        dash: float = 6,
        gap: float = 4,
        width: float = 1,
    ) -> None:
        """Dashed rectangle outline."""
        x0, y0, x1, y1 = self.box(rect)
        step = self._px(dash) + self._px(gap)
        dash_px = self._px(dash)
        stroke = self._px(width)

        for x in range(x0, x1 + 1, step):
            end = min(x + dash_px - 1, x1)
            self._draw.line([(x, y0), (end, y0)], fill=color, width=stroke)
            self._draw.line([(x, y1), (end, y1)], fill=color, width=stroke)
        for y in range(y0, y1 + 1, step):
            end = min(y + dash_px - 1, y1)
            self._draw.line([(x0, y), (x0, end)], fill=color, width=stroke)
            self._draw.line([(x1, y), (x1, end)], fill=color, width=stroke)

    def gradient_fill(self, rect: Rect, top: Color, bottom: Color, radius: float = 0) -> None:
        """
        Vertical two-stop gradient clipped to a rounded rectangle.

        Args:
            rect: Area to fill
            top: Colour at the top edge
            bottom: Colour at the bottom edge
            radius: Corner radius
        """
        x0, y0, _, _ = self.box(rect)
        w, h = self.size_of(rect)
        layer = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        layer_draw = ImageDraw.Draw(layer)
        for row in range(h):
            t = row / max(1, h - 1)
            color = tuple(round(a + (b - a) * t) for a, b in zip(top, bottom))
            layer_draw.line([(0, row), (w - 1, row)], fill=color)

        mask = Image.new("L", (w, h), 0)
        ImageDraw.Draw(mask).rounded_rectangle(
            (0, 0, w - 1, h - 1), radius=radius * self.scale, fill=255
        )
        layer.putalpha(ImageChops.multiply(layer.getchannel("A"), mask))
        self.image.alpha_composite(layer, dest=(x0, y0))

    def paste_image(self, rect: Rect, image: Image.Image, radius: float = 0) -> None:
        """
        Draw ``image`` scaled and centre-cropped to cover ``rect``.

        The source image is not modified.
        """
        x0, y0, _, _ = self.box(rect)
        size = self.size_of(rect)
        fitted = ImageOps.fit(image.convert("RGBA"), size, Image.Resampling.LANCZOS)
        if radius > 0:
            mask = Image.new("L", size, 0)
            ImageDraw.Draw(mask).rounded_rectangle(
                (0, 0, size[0] - 1, size[1] - 1), radius=radius * self.scale, fill=255
            )
            fitted.putalpha(ImageChops.multiply(fitted.getchannel("A"), mask))
        self.image.alpha_composite(fitted, dest=(x0, y0))

    # ─────────────────────────────────────────────────────────────────────
    # Text
    # ─────────────────────────────────────────────────────────────────────

    def font(self, size: float, bold: bool = False):
        """Font for ``size`` logical pixels at this canvas' scale."""
        return load_font(self._px(size), bold, self._font_path)

    def text_width(self, text: str, font) -> float:
        """Rendered width of ``text`` in logical pixels."""
        if not text:
            return 0.0
        return self._draw.textlength(text, font=font) / self.scale

    def text(self, x: float, y: float, text: str, font, fill: Color) -> None:
        """Draw ``text`` with its top-left at logical (x, y)."""
        self._draw.text((round(x * self.scale), round(y * self.scale)), text, font=font, fill=fill)

    def text_centered(self, cx: float, cy: float, text: str, font, fill: Color) -> None:
        """Draw ``text`` centred on logical point (cx, cy)."""
        if not text:
            return
        left, top, right, bottom = self._draw.textbbox((0, 0), text, font=font)
        x = round(cx * self.scale - (right - left) / 2 - left)
        y = round(cy * self.scale - (bottom - top) / 2 - top)
        self._draw.text((x, y), text, font=font, fill=fill)

    def label(self, rect: Rect, text: str, font, fill: Color, inset: float = 4) -> None:
        """Draw ``text`` centred in ``rect``, ellipsized to its width."""
        fitted = ellipsize(
            text,
            lambda s: self.text_width(s, font),
            max(0.0, rect.width - 2 * inset),
        )
        cx, cy = rect.center
        self.text_centered(cx, cy, fitted, font, fill)
