"""
Module: composer.output.text

Purpose:
    Text helpers for the compositor: font loading with CJK-capable
    fallbacks, greedy word wrapping for the note region and label
    ellipsizing. Wrapping takes a measure callable so it can be tested
    without a font.

Key Functions:
    - wrap_note_text(): Paragraph split + greedy wrap + truncation
    - ellipsize(): Shorten a label to a width
    - load_font(): Cached font lookup

Dependencies:
    - PIL.ImageFont: Font loading

Used By:
    - composer.output.renderer: Labels and note text
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Callable, List, Optional

from PIL import ImageFont

logger = logging.getLogger(__name__)

Measure = Callable[[str], float]

ELLIPSIS = "…"

# Korean-capable faces first; the template labels default to Korean.
REGULAR_FONTS = [
    "NotoSansKR-Regular.otf",
    "NotoSansKR-Regular.ttf",
    "NotoSansCJK-Regular.ttc",
    "NotoSansCJKkr-Regular.otf",
    "malgun.ttf",                 # Malgun Gothic (Windows)
    "AppleSDGothicNeo.ttc",       # macOS
    "NanumGothic.ttf",
    "DejaVuSans.ttf",
    "arial.ttf",
    "Arial.ttf",
]

BOLD_FONTS = [
    "NotoSansKR-Bold.otf",
    "NotoSansKR-Bold.ttf",
    "NotoSansCJK-Bold.ttc",
    "NotoSansCJKkr-Bold.otf",
    "malgunbd.ttf",
    "NanumGothicBold.ttf",
    "DejaVuSans-Bold.ttf",
    "arialbd.ttf",
    "Arial Bold.ttf",
]


@lru_cache(maxsize=64)
def load_font(size: int, bold: bool = False, font_path: Optional[Path] = None):
    """
    Load a font at ``size`` device pixels.

    Tries ``font_path`` first, then a list of common system faces, then
    Pillow's bundled default font.

    Args:
        size: Font size in pixels
        bold: Prefer a bold face
        font_path: Explicit font file

    Returns:
        Font object usable with ImageDraw
    """
    size = max(1, int(size))
    candidates: List[str] = []
    if font_path is not None:
        candidates.append(str(font_path))
    candidates.extend(BOLD_FONTS if bold else [])
    candidates.extend(REGULAR_FONTS)

    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except (IOError, OSError):
            continue

    logger.warning("Could not load TrueType font, using default")
    return ImageFont.load_default(size=size)


def _split_long_word(word: str, measure: Measure, max_width: float) -> List[str]:
    """Break a word wider than max_width at character boundaries."""
    pieces: List[str] = []
    current = ""
    for char in word:
        candidate = current + char
        if current and measure(candidate) > max_width:
            pieces.append(current)
            current = char
        else:
            current = candidate
    if current:
        pieces.append(current)
    return pieces


def wrap_note_text(
    text: str,
    measure: Measure,
    max_width: float,
    max_lines: int,
) -> List[str]:
    """
    Lay out note text into at most ``max_lines`` lines.

    Process:
    1. Split on explicit newlines into paragraphs
    2. Blank paragraphs become empty lines
    3. Words (split on whitespace) are packed greedily while the measured
       width stays within ``max_width``
    4. A word wider than ``max_width`` on its own is broken at character
       boundaries
    5. Output stops at ``max_lines``

    Whitespace-only text yields no lines.

    Args:
        text: Raw note text
        measure: Returns the rendered width of a string
        max_width: Available width (same units as measure)
        max_lines: Maximum number of lines

    Returns:
        Lines in draw order; each appears once

    Example:
        >>> wrap_note_text("aa bb cc", len, 5, 10)
        ['aa bb', 'cc']
    """
    if max_lines <= 0 or not text or not text.strip():
        return []

    lines: List[str] = []
    for paragraph in text.replace("\r\n", "\n").split("\n"):
        if len(lines) >= max_lines:
            break
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = ""
        for word in words:
            if len(lines) >= max_lines:
                break
            candidate = f"{current} {word}" if current else word
            if measure(candidate) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
                current = ""
                if len(lines) >= max_lines:
                    break
            if measure(word) <= max_width:
                current = word
                continue
            pieces = _split_long_word(word, measure, max_width)
            for piece in pieces[:-1]:
                if len(lines) >= max_lines:
                    break
                lines.append(piece)
            current = pieces[-1]

        if current and len(lines) < max_lines:
            lines.append(current)

    return lines[:max_lines]


def ellipsize(text: str, measure: Measure, max_width: float) -> str:
    """
    Shorten ``text`` with a trailing ellipsis so it fits ``max_width``.

    Example:
        >>> ellipsize("abcdef", len, 4)
        'abc…'
    """
    if measure(text) <= max_width:
        return text
    trimmed = text
    while trimmed and measure(trimmed + ELLIPSIS) > max_width:
        trimmed = trimmed[:-1]
    return trimmed + ELLIPSIS if trimmed else ""
